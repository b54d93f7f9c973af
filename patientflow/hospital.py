import logging
from dataclasses import dataclass, field

import simpy
import simpy.rt

from .arrivals import PatientGenerator
from .config import (
    CRITICAL_WAIT_THRESHOLD, DEFAULT_TICK_DELAY, DEPARTMENTS,
    FAST_TREATMENT_THRESHOLD, STARVATION_THRESHOLD,
)
from .department import Department
from . import logging_config  # noqa: F401  (NullHandler on the patientflow logger)

logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    discharged: int = 0
    total_wait: int = 0
    max_wait: int = 0

    # Priority 1 only
    discharged_pri1: int = 0
    total_wait_pri1: int = 0
    max_wait_pri1: int = 0
    pri1_at_risk: int = 0
    pri1_treated_quickly: int = 0

    @property
    def average_wait(self):
        return self.total_wait / self.discharged if self.discharged else None

    @property
    def average_wait_pri1(self):
        return self.total_wait_pri1 / self.discharged_pri1 if self.discharged_pri1 else None


@dataclass
class EngineState:
    """Everything the tick loop mutates apart from departments and patients."""
    time: int = 0
    running: bool = False
    stop_requested: bool = False
    stats: SimulationStats = field(default_factory=SimulationStats)


@dataclass(frozen=True)
class PatientSnapshot:
    name: str
    initials: str
    priority: int
    arrival_time: int
    total_wait_time: int
    total_treatment_time: int
    treatments_remaining: int
    current_department: str


@dataclass(frozen=True)
class DepartmentSnapshot:
    name: str
    capacity: int
    in_service: tuple
    waiting: tuple


@dataclass(frozen=True)
class SimulationSnapshot:
    time: int
    running: bool
    departments: tuple


def _snapshot_patient(patient):
    return PatientSnapshot(
        name=patient.name,
        initials=patient.initials,
        priority=patient.priority,
        arrival_time=patient.arrival_time,
        total_wait_time=patient.total_wait_time,
        total_treatment_time=patient.total_treatment_time,
        treatments_remaining=len(patient.treatments),
        current_department=patient.current_department(),
    )


class HospitalSimulation:
    def __init__(self, departments=None, arrival_source=None, sink=print,
                 use_priority_queues=False, delay=DEFAULT_TICK_DELAY,
                 starvation_threshold=STARVATION_THRESHOLD,
                 critical_wait_threshold=CRITICAL_WAIT_THRESHOLD,
                 fast_treatment_threshold=FAST_TREATMENT_THRESHOLD):
        """
        departments: Dict {Name: Capacity}, processed in insertion order.
            Defaults to the reference layout in config.DEPARTMENTS.
        arrival_source: Callable(tick) -> Patient or None.
            Defaults to a PatientGenerator.
        sink: Callable(str) receiving report lines.
        delay: Wall-clock seconds between ticks while running.
        """
        self.department_layout = dict(DEPARTMENTS if departments is None else departments)
        self.arrival_source = arrival_source if arrival_source is not None else PatientGenerator()
        self.sink = sink
        self.delay = delay

        self.starvation_threshold = starvation_threshold
        self.critical_wait_threshold = critical_wait_threshold
        self.fast_treatment_threshold = fast_treatment_threshold

        self._tick_listeners = []
        self.env = None
        self.departments = {}
        self.state = EngineState()
        self.reset(use_priority_queues)

    # ---------------------------------------------------------
    # Control
    # ---------------------------------------------------------

    @property
    def time(self):
        return self.state.time

    @property
    def running(self):
        return self.state.running

    @property
    def stats(self):
        return self.state.stats

    @property
    def delay(self):
        return self._delay

    @delay.setter
    def delay(self, value):
        if value < 0:
            raise ValueError(f"delay must be >= 0, got {value}")
        self._delay = value

    def reset(self, use_priority_queues=False):
        if self.state.running:
            raise RuntimeError("Cannot reset while simulation is running")

        self.use_priority_queues = use_priority_queues
        self.departments = {
            name: Department(name, capacity, use_priority_queues)
            for name, capacity in self.department_layout.items()
        }
        self.state = EngineState()
        logger.info("Reset with %s queues: %s",
                    "priority" if use_priority_queues else "FIFO", ", ".join(self.departments))

    def start(self, max_ticks=None):
        """Run ticks until stop() is observed (or max_ticks have run), then report."""
        if self.state.running:
            return
        self.state.running = True
        self.state.stop_requested = False
        logger.info("Simulation started at tick %d", self.state.time)

        # simpy clock restarts every run; state.time carries the tick count
        self.env = self._make_env()

        try:
            self.env.run(until=self.env.process(self._tick_loop(max_ticks)))
        finally:
            self.state.running = False

        logger.info("Simulation stopped at tick %d", self.state.time)
        self.report_statistics()

    def stop(self):
        """Ask the loop to halt at the next tick boundary. Safe to call repeatedly."""
        if self.state.running:
            logger.debug("Stop requested at tick %d", self.state.time)
        self.state.stop_requested = True
        self.state.running = False

    def add_tick_listener(self, callback):
        """callback(simulation) runs after every tick, between ticks."""
        self._tick_listeners.append(callback)

    def _make_env(self):
        if self.delay > 0:
            return simpy.rt.RealtimeEnvironment(factor=self.delay, strict=False)
        return simpy.Environment()

    def _tick_loop(self, max_ticks):
        ticks = 0
        while self.state.running:
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.tick()
            ticks += 1
            for callback in list(self._tick_listeners):
                callback(self)
            yield self.env.timeout(1)

    # ---------------------------------------------------------
    # One tick
    # ---------------------------------------------------------

    def tick(self):
        """Advance the simulation by one tick.

        Returns False once stop() has been requested (cleared again by
        start() and reset()), so a loop driving ticks by hand can halt.
        """
        self._route_finished()

        for dept in self.departments.values():
            dept.tick_in_service()

        for dept in self.departments.values():
            dept.tick_waiting()

        self._relieve_starvation()

        for dept in self.departments.values():
            dept.admit_while_space()

        self._handle_arrival()

        self.state.time += 1
        return not self.state.stop_requested

    def _route_finished(self):
        for dept in self.departments.values():
            for patient in dept.collect_finished():
                patient.pop_finished_step()
                if patient.is_plan_complete():
                    self.discharge(patient)
                    continue
                next_name = patient.current_department()
                next_dept = self.departments.get(next_name)
                if next_dept is not None:
                    next_dept.enqueue_waiting(patient)
                else:
                    self._unknown_department(f"unknown department '{next_name}'", patient)

    def _relieve_starvation(self):
        for dept in self.departments.values():
            for patient in dept.waiting:
                if patient.priority == 1 and patient.current_wait > self.starvation_threshold:
                    if dept.force_admit(patient):
                        logger.debug("%d: forced %s into %s after waiting %d",
                                     self.state.time, patient.name, dept.name, patient.current_wait)
                        # Only force one per department per tick
                        break

    def _handle_arrival(self):
        patient = self.arrival_source(self.state.time)
        if patient is None:
            return
        self.emit(f"{self.state.time}: Arrived: {patient}")
        first_name = patient.current_department()
        first_dept = self.departments.get(first_name)
        if first_dept is not None:
            first_dept.enqueue_waiting(patient)
        else:
            self._unknown_department(f"unknown first department '{first_name}'", patient)

    def _unknown_department(self, problem, patient):
        self.emit(f"{self.state.time}: WARNING {problem} for patient: {patient}")
        logger.warning("Dropping %s at tick %d: %s", patient.name, self.state.time, problem)

    def discharge(self, patient):
        patient.discharge(self.state.time)
        stats = self.state.stats
        wait = patient.total_wait_time

        stats.discharged += 1
        stats.total_wait += wait
        stats.max_wait = max(stats.max_wait, wait)

        if patient.priority == 1:
            stats.discharged_pri1 += 1
            stats.total_wait_pri1 += wait
            stats.max_wait_pri1 = max(stats.max_wait_pri1, wait)
            if wait > self.critical_wait_threshold:
                stats.pri1_at_risk += 1
            if wait <= self.fast_treatment_threshold:
                stats.pri1_treated_quickly += 1

        self.emit(f"{self.state.time}: Discharge: {patient} | TotalWait={wait} | SystemTime={patient.system_time}")

    # ---------------------------------------------------------
    # Reporting
    # ---------------------------------------------------------

    def emit(self, line):
        self.sink(line)

    def statistics_report(self):
        stats = self.state.stats
        lines = [
            "----- Statistics -----",
            f"Simulated Time: {self.state.time}",
            f"Total patients treated: {stats.discharged}",
            f"Max waiting time: {stats.max_wait}",
        ]
        if stats.discharged:
            lines.append(f"Average waiting time: {stats.average_wait}")

        lines += [
            "",
            "----- Priority 1 Patients -----",
            f"Priority 1 patients treated: {stats.discharged_pri1}",
        ]
        if stats.discharged_pri1:
            lines.append(f"Average waiting time (Priority 1): {stats.average_wait_pri1}")
        lines += [
            f"Max waiting time (Priority 1): {stats.max_wait_pri1}",
            f"Priority 1 patients at risk (> {self.critical_wait_threshold} wait): {stats.pri1_at_risk}",
            f"Priority 1 patients treated within {self.fast_treatment_threshold} ticks: "
            f"{stats.pri1_treated_quickly}/{stats.discharged_pri1}",
            "",
            "--- Department Stats ---",
        ]
        for dept in self.departments.values():
            lines.append(f"{dept.name} | Patients served: {dept.patients_served} | "
                         f"Avg wait: {dept.average_wait:.1f} | Max queue: {dept.max_queue_length}")
        return lines

    def report_statistics(self):
        for line in self.statistics_report():
            self.emit(line)

    def snapshot(self):
        return SimulationSnapshot(
            time=self.state.time,
            running=self.state.running,
            departments=tuple(
                DepartmentSnapshot(
                    name=dept.name,
                    capacity=dept.capacity,
                    in_service=tuple(_snapshot_patient(p) for p in dept.in_service),
                    waiting=tuple(_snapshot_patient(p) for p in dept.waiting),
                )
                for dept in self.departments.values()
            ),
        )
