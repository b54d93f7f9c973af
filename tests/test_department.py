"""Unit tests for Department admission, ticking and completion."""

import pytest

from conftest import make_patient
from patientflow.department import Department


def admit_all(dept, *patients):
    for p in patients:
        dept.enqueue_waiting(p)
    return dept.admit_while_space()


class TestDepartmentCreation:

    @pytest.mark.parametrize("capacity", [0, -2])
    def test_non_positive_capacity_raises(self, capacity):
        with pytest.raises(ValueError, match="capacity must be > 0"):
            Department("ER", capacity)

    def test_starts_empty(self):
        dept = Department("ER", 3)
        assert dept.in_service == ()
        assert dept.waiting == ()
        assert dept.total_wait == 0
        assert dept.patients_served == 0
        assert dept.max_queue_length == 0
        assert dept.average_wait == 0.0


class TestEnqueue:

    def test_tracks_max_queue_length(self):
        dept = Department("ER", 1)
        for _ in range(3):
            dept.enqueue_waiting(make_patient())
        dept.admit_while_space()
        assert len(dept.waiting) == 2
        assert dept.max_queue_length == 3

    def test_waiting_snapshot_is_a_copy(self):
        dept = Department("ER", 1)
        dept.enqueue_waiting(make_patient())
        snapshot = dept.waiting
        assert isinstance(snapshot, tuple)
        assert len(dept.waiting) == 1


class TestAdmitWhileSpace:

    def test_never_exceeds_capacity(self):
        dept = Department("ER", 2)
        admitted = admit_all(dept, *[make_patient(priority=p) for p in (3, 1, 2, 1, 3)])
        assert len(admitted) == 2
        assert len(dept.in_service) == 2
        assert len(dept.waiting) == 3

    def test_priority_one_swept_before_queue_order(self):
        dept = Department("ER", 2)
        a = make_patient(arrival_time=0, priority=3)
        b = make_patient(arrival_time=1, priority=2)
        c = make_patient(arrival_time=2, priority=1)
        admitted = admit_all(dept, a, b, c)
        assert admitted == [c, a]
        assert dept.waiting == (b,)

    def test_all_priority_one_admitted_when_room(self):
        dept = Department("ER", 5)
        others = [make_patient(priority=2) for _ in range(2)]
        urgent = [make_patient(priority=1) for _ in range(2)]
        admitted = admit_all(dept, others[0], urgent[0], others[1], urgent[1])
        assert admitted[:2] == urgent
        assert set(admitted) == set(others + urgent)

    def test_xray_both_enqueued_before_admission(self):
        xray = Department("X-Ray", 1)
        a = make_patient(arrival_time=0, priority=2, plan=[("X-Ray", 2)])
        b = make_patient(arrival_time=0, priority=1, plan=[("X-Ray", 1)])
        admit_all(xray, a, b)
        assert xray.in_service == (b,)
        assert xray.waiting == (a,)

    def test_xray_later_priority_one_waits_for_slot(self):
        xray = Department("X-Ray", 1)
        a = make_patient(arrival_time=0, priority=2, plan=[("X-Ray", 2)])
        admit_all(xray, a)
        b = make_patient(arrival_time=1, priority=1, plan=[("X-Ray", 1)])
        admit_all(xray, b)
        assert xray.in_service == (a,)
        assert xray.waiting == (b,)

    def test_fifo_fill_keeps_arrival_order(self):
        dept = Department("ER", 2)
        a = make_patient(arrival_time=0, priority=3)
        b = make_patient(arrival_time=1, priority=2)
        c = make_patient(arrival_time=2, priority=2)
        admit_all(dept, a, b, c)
        assert dept.in_service == (a, b)

    def test_priority_queue_fill_uses_priority_order(self):
        dept = Department("ER", 2, use_priority_queue=True)
        a = make_patient(arrival_time=0, priority=3)
        b = make_patient(arrival_time=1, priority=2)
        c = make_patient(arrival_time=2, priority=2)
        admit_all(dept, a, b, c)
        assert dept.in_service == (b, c)
        assert dept.waiting == (a,)

    def test_bookkeeping_on_admission(self):
        dept = Department("ER", 1)
        p = make_patient()
        dept.enqueue_waiting(p)
        for _ in range(4):
            dept.tick_waiting()
        dept.admit_while_space()
        assert dept.total_wait == 4
        assert dept.patients_served == 1
        assert dept.average_wait == 4.0
        assert p.wait_per_department == {"ER": 4}


class TestForceAdmit:

    def test_fails_while_full_then_succeeds(self):
        dept = Department("ER", 1)
        blocker = make_patient(priority=3, plan=[("ER", 1)])
        admit_all(dept, blocker)
        starving = make_patient(priority=1)
        dept.enqueue_waiting(starving)

        assert not dept.force_admit(starving)
        assert dept.waiting == (starving,)

        dept.tick_in_service()
        dept.collect_finished()
        assert dept.force_admit(starving)
        assert dept.in_service == (starving,)
        assert dept.waiting == ()
        assert dept.patients_served == 2

    def test_fails_for_patient_not_waiting_here(self):
        dept = Department("ER", 2)
        stranger = make_patient(priority=1)
        assert not dept.force_admit(stranger)
        assert dept.in_service == ()
        assert dept.patients_served == 0

    def test_fails_for_patient_already_in_service(self):
        dept = Department("ER", 2)
        p = make_patient(priority=1)
        admit_all(dept, p)
        assert not dept.force_admit(p)
        assert len(dept.in_service) == 1


class TestTicking:

    def test_tick_in_service_advances_only_admitted(self):
        dept = Department("ER", 1)
        treated = make_patient(plan=[("ER", 3)])
        queued = make_patient(plan=[("ER", 3)])
        admit_all(dept, treated, queued)
        dept.tick_in_service()
        dept.tick_waiting()
        assert treated.total_treatment_time == 1
        assert treated.total_wait_time == 0
        assert queued.total_treatment_time == 0
        assert queued.total_wait_time == 1


class TestCollectFinished:

    def test_returns_only_finished(self):
        dept = Department("ER", 2)
        quick = make_patient(plan=[("ER", 1)])
        slow = make_patient(plan=[("ER", 2)])
        admit_all(dept, quick, slow)
        dept.tick_in_service()
        assert dept.collect_finished() == [quick]
        assert dept.in_service == (slow,)

    def test_second_collect_is_empty(self):
        dept = Department("ER", 1)
        admit_all(dept, make_patient(plan=[("ER", 1)]))
        dept.tick_in_service()
        assert len(dept.collect_finished()) == 1
        assert dept.collect_finished() == []
