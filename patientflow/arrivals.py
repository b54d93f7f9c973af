"""Arrival sources for the simulation.

The engine only needs a callable taking the current tick and returning a new
:class:`~patientflow.patient.Patient` or ``None``. ``PatientGenerator`` is the
default random source.
"""

import logging
import random
from typing import Callable, Optional

import numpy as np

from .config import (
    ARRIVAL_INTERVAL, ER_DEPARTMENT, EXTRA_TREATMENTS_PMF,
    FIRST_NAMES, LAST_NAMES, PROB_PRI1, PROB_PRI2, TREATMENT_DURATIONS,
)
from .patient import Patient, Treatment
from .utils import Distribution

logger = logging.getLogger(__name__)

ArrivalSource = Callable[[int], Optional[Patient]]


class PatientGenerator:
    """Random patient arrivals.

    Each tick a patient arrives with probability ``1 / arrival_interval``.
    Priorities are drawn from ``prob_pri1`` / ``prob_pri2`` (percent, the
    rest are priority 3). Plans always start in the ER and continue through
    a random set of other departments.
    """

    def __init__(self, arrival_interval=ARRIVAL_INTERVAL, prob_pri1=PROB_PRI1, prob_pri2=PROB_PRI2,
                 durations=None, extra_treatments_pmf=None, seed=None):
        self.durations = dict(durations or TREATMENT_DURATIONS)
        if ER_DEPARTMENT not in self.durations:
            raise ValueError(f"durations must include {ER_DEPARTMENT!r}")
        self.arrival_interval = arrival_interval
        self.prob_pri1 = prob_pri1
        self.prob_pri2 = prob_pri2

        self.np_rng = np.random.default_rng(seed)
        self.rng = random.Random(seed)
        self.extra_treatments = Distribution(extra_treatments_pmf or EXTRA_TREATMENTS_PMF, rng=self.rng)

    # Knobs (settable between ticks)

    @property
    def arrival_interval(self):
        return self._arrival_interval

    @arrival_interval.setter
    def arrival_interval(self, value):
        if value < 1:
            raise ValueError(f"arrival_interval must be >= 1, got {value}")
        self._arrival_interval = value

    @property
    def prob_pri1(self):
        return self._prob_pri1

    @prob_pri1.setter
    def prob_pri1(self, value):
        if not 0 <= value <= 100:
            raise ValueError(f"prob_pri1 must be within 0-100, got {value}")
        self._prob_pri1 = value

    @property
    def prob_pri2(self):
        return self._prob_pri2

    @prob_pri2.setter
    def prob_pri2(self, value):
        if not 0 <= value <= 100:
            raise ValueError(f"prob_pri2 must be within 0-100, got {value}")
        self._prob_pri2 = value

    def __call__(self, time):
        return self.next_patient(time)

    def next_patient(self, time):
        if self.np_rng.random() >= 1.0 / self.arrival_interval:
            return None
        patient = Patient(time, self._draw_priority(), self.rng.choice(FIRST_NAMES),
                          self.rng.choice(LAST_NAMES), self._draw_plan())
        logger.debug("Generated %s at tick %d", patient.name, time)
        return patient

    def _draw_priority(self):
        roll = self.np_rng.uniform(0, 100)
        if roll < self.prob_pri1:
            return 1
        if roll < self.prob_pri1 + self.prob_pri2:
            return 2
        return 3

    def _draw_plan(self):
        plan = [self._treatment(ER_DEPARTMENT)]
        others = [name for name in self.durations if name != ER_DEPARTMENT]
        count = min(self.extra_treatments.sample(), len(others))
        for name in self.rng.sample(others, count):
            plan.append(self._treatment(name))
        return plan

    def _treatment(self, department):
        mean, std_dev = self.durations[department]
        duration = max(1, int(np.round(self.np_rng.normal(mean, std_dev))))
        return Treatment(department, duration)


def scripted_arrivals(schedule):
    """Arrival source replaying a fixed ``{tick: Patient}`` schedule."""
    def source(time):
        return schedule.get(time)
    return source
