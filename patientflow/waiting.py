import bisect
import itertools
from collections import deque

from .patient import admission_key


class WaitingRoom:
    """Waiting collection of a department.

    Subclasses decide the order patients come out in. Both support removing
    an arbitrary patient, which forced admissions rely on.
    """

    def push(self, patient):
        raise NotImplementedError

    def pop(self):
        raise NotImplementedError

    def remove(self, patient):
        """Remove ``patient`` if present. Returns True if it was removed."""
        raise NotImplementedError

    def __iter__(self):
        raise NotImplementedError

    def __len__(self):
        raise NotImplementedError

    def __contains__(self, patient):
        return any(p is patient for p in self)

    def __bool__(self):
        return len(self) > 0


class FifoWaitingRoom(WaitingRoom):
    """Strict arrival order."""

    def __init__(self):
        self._patients = deque()

    def push(self, patient):
        self._patients.append(patient)

    def pop(self):
        return self._patients.popleft()

    def remove(self, patient):
        for i, p in enumerate(self._patients):
            if p is patient:
                del self._patients[i]
                return True
        return False

    def __iter__(self):
        return iter(self._patients)

    def __len__(self):
        return len(self._patients)


class PriorityWaitingRoom(WaitingRoom):
    """Ordered by priority then arrival tick; ties keep insertion order."""

    def __init__(self):
        self._entries = []
        self._counter = itertools.count()

    def push(self, patient):
        bisect.insort(self._entries, (admission_key(patient), next(self._counter), patient))

    def pop(self):
        return self._entries.pop(0)[2]

    def remove(self, patient):
        for i, entry in enumerate(self._entries):
            if entry[2] is patient:
                del self._entries[i]
                return True
        return False

    def __iter__(self):
        return (entry[2] for entry in self._entries)

    def __len__(self):
        return len(self._entries)


def make_waiting_room(use_priority):
    return PriorityWaitingRoom() if use_priority else FifoWaitingRoom()
