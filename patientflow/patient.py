from collections import deque

from .errors import InvalidStateError


def admission_key(patient):
    """Sort key shared by patient comparison and the priority waiting room.

    Lower priority number first, then earlier arrival.
    """
    return (patient.priority, patient.arrival_time)


class Treatment:
    """One stage of a treatment plan: a department and how long it takes."""

    def __init__(self, department, duration):
        if duration <= 0:
            raise ValueError(f"duration must be > 0, got {duration}")
        self.department = department
        self.duration = duration
        self.elapsed = 0

    @property
    def remaining(self):
        return self.duration - self.elapsed

    def is_finished(self):
        return self.elapsed == self.duration

    def advance(self):
        self.elapsed += 1

    def __repr__(self):
        return f"Treatment({self.department}, {self.elapsed}/{self.duration})"


class Patient:
    def __init__(self, arrival_time, priority, first_name, last_name, treatments):
        if priority not in (1, 2, 3):
            raise ValueError(f"priority must be 1, 2 or 3, got {priority}")
        self.name = f"{first_name} {last_name}"
        self.initials = first_name[:1] + last_name[:1]
        self.arrival_time = arrival_time
        self.discharge_time = None
        self.priority = priority

        self.total_wait_time = 0
        self.total_treatment_time = 0

        self.treatments = deque(treatments)
        if not self.treatments:
            raise ValueError("a patient needs at least one treatment")

        self._wait_per_department = {}
        self._queued_at_wait = 0

    # Treatment progress

    def advance_treatment(self):
        if not self.treatments:
            raise InvalidStateError(f"No treatments remaining: {self}")
        current = self.treatments[0]
        if current.is_finished():
            raise InvalidStateError(f"Current treatment already finished: {self}")
        self.total_treatment_time += 1
        current.advance()

    def tick_wait(self):
        self.total_wait_time += 1

    def is_current_step_finished(self):
        return bool(self.treatments) and self.treatments[0].is_finished()

    def is_plan_complete(self):
        return not self.treatments

    def pop_finished_step(self):
        if not self.treatments:
            raise InvalidStateError(f"No treatments to remove: {self}")
        return self.treatments.popleft()

    def current_department(self):
        if not self.treatments:
            raise InvalidStateError(f"No current department - treatments completed: {self}")
        return self.treatments[0].department

    # Timeline

    @property
    def current_wait(self):
        """Ticks spent waiting since last admitted (used for starvation checks)."""
        return self.total_wait_time - self.total_treatment_time

    def discharge(self, time):
        if self.discharge_time is not None:
            raise InvalidStateError(f"Patient already discharged: {self}")
        self.discharge_time = time

    @property
    def system_time(self):
        if self.discharge_time is None:
            return None
        return self.discharge_time - self.arrival_time

    # Wait per department

    def mark_queued(self):
        self._queued_at_wait = self.total_wait_time

    def record_admission(self, department):
        waited = self.total_wait_time - self._queued_at_wait
        self._wait_per_department[department] = self._wait_per_department.get(department, 0) + waited

    @property
    def wait_per_department(self):
        return dict(self._wait_per_department)

    def __lt__(self, other):
        return admission_key(self) < admission_key(other)

    def __repr__(self):
        return (f"{self.name} (Priority {self.priority}) | Arrived: {self.arrival_time} | "
                f"Wait: {self.total_wait_time} | Treatment: {self.total_treatment_time} | "
                f"{len(self.treatments)} treatments remaining")
