import logging

from .waiting import make_waiting_room

logger = logging.getLogger(__name__)


class Department:
    def __init__(self, name, capacity, use_priority_queue=False):
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self.name = name
        self.capacity = capacity

        # 1. State
        # dict keeps insertion order so ticking is deterministic
        self._in_service = {}
        self._waiting = make_waiting_room(use_priority_queue)
        self.use_priority_queue = use_priority_queue

        # 2. Metrics
        self.total_wait = 0
        self.patients_served = 0
        self.max_queue_length = 0

    # ---------------------------------------------------------
    # Core operations
    # ---------------------------------------------------------

    def enqueue_waiting(self, patient):
        patient.mark_queued()
        self._waiting.push(patient)
        self._update_queue_stats()

    def tick_in_service(self):
        for patient in self._in_service:
            patient.advance_treatment()

    def tick_waiting(self):
        for patient in self._waiting:
            patient.tick_wait()
        self._update_queue_stats()

    # ---------------------------------------------------------
    # Admission
    # ---------------------------------------------------------

    def has_space(self):
        return len(self._in_service) < self.capacity

    def admit_while_space(self):
        """Fill free capacity from the waiting room.

        Priority 1 patients are swept in first, wherever they sit in the
        queue; remaining capacity is then filled from the head of the queue.
        Returns the admitted patients in admission order.
        """
        admitted = []

        # 1. Priority sweep
        for patient in [p for p in self._waiting if p.priority == 1]:
            if not self.has_space():
                break
            self._waiting.remove(patient)
            self._admit(patient)
            admitted.append(patient)

        # 2. Regular fill
        while self.has_space() and self._waiting:
            patient = self._waiting.pop()
            self._admit(patient)
            admitted.append(patient)

        if admitted:
            logger.debug("%s admitted %d patient(s), %d waiting", self.name, len(admitted), len(self._waiting))
        return admitted

    def force_admit(self, patient):
        """Admit a starving patient out of turn. Returns True on success."""
        if self.has_space() and self._waiting.remove(patient):
            self._admit(patient)
            return True
        return False

    def _admit(self, patient):
        self._in_service[patient] = None
        patient.record_admission(self.name)
        self.total_wait += patient.total_wait_time
        self.patients_served += 1

    # ---------------------------------------------------------
    # Completion
    # ---------------------------------------------------------

    def collect_finished(self):
        finished = [p for p in self._in_service if p.is_current_step_finished()]
        for patient in finished:
            del self._in_service[patient]
        return finished

    # ---------------------------------------------------------
    # Read access
    # ---------------------------------------------------------

    def _update_queue_stats(self):
        self.max_queue_length = max(self.max_queue_length, len(self._waiting))

    @property
    def in_service(self):
        return tuple(self._in_service)

    @property
    def waiting(self):
        return tuple(self._waiting)

    def is_waiting(self, patient):
        return patient in self._waiting

    def is_in_service(self, patient):
        return patient in self._in_service

    @property
    def average_wait(self):
        if self.patients_served == 0:
            return 0.0
        return self.total_wait / self.patients_served

    def __repr__(self):
        return (f"Department({self.name}, {len(self._in_service)}/{self.capacity} in service, "
                f"{len(self._waiting)} waiting)")
