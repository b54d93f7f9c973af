"""
Shared pytest fixtures for patientflow tests.
"""

import logging

import pytest

from patientflow.arrivals import scripted_arrivals
from patientflow.hospital import HospitalSimulation
from patientflow.patient import Patient, Treatment


def make_patient(arrival_time=0, priority=3, plan=(("ER", 1),), first="Test", last="Patient"):
    """Build a patient from ``(department, duration)`` pairs."""
    return Patient(arrival_time, priority, first, last, [Treatment(d, n) for d, n in plan])


@pytest.fixture
def lines():
    """List collecting everything written to a simulation's sink."""
    return []


@pytest.fixture
def make_sim(lines):
    """Factory for a simulation with scripted arrivals and a list sink."""
    def factory(departments=None, schedule=None, use_priority_queues=False, **kwargs):
        return HospitalSimulation(
            departments={"ER": 2, "X-Ray": 1} if departments is None else departments,
            arrival_source=scripted_arrivals(schedule or {}),
            sink=lines.append,
            use_priority_queues=use_priority_queues,
            **kwargs,
        )
    return factory


@pytest.fixture(autouse=True)
def reset_patientflow_logging():
    """Reset the patientflow logger to its import-time state around each test."""
    logger = logging.getLogger("patientflow")

    def clear():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    clear()
    yield
    clear()
