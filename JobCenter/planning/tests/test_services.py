from datetime import date, datetime, timedelta

import pytest

from jobs.exceptions import InvalidInput, NotFound, OperationNotFound, StatusConflict, ValidationFailed
from jobs.models import Operation, OperationStatus as S
from planning.models import Machine
from planning.services import (
    assign_sequence,
    build_shift_timeline,
    current_shift,
    get_machine,
    machine_queue,
    remove_from_sequence,
    shift_window,
)

DAY = date(2026, 3, 2)


@pytest.mark.parametrize('clock, expected', [
    ((6, 0), 'A'),
    ((13, 59), 'A'),
    ((14, 0), 'B'),
    ((21, 30), 'B'),
    ((22, 0), 'C'),
    ((3, 15), 'C'),
])
def test_current_shift(clock, expected):
    assert current_shift(datetime(2026, 3, 2, *clock)) == expected


def test_night_shift_window_ends_next_morning():
    start, end = shift_window(DAY, 'C')
    assert end - start == timedelta(hours=8)
    assert end.date() == DAY + timedelta(days=1)


def test_unknown_shift_is_invalid_input():
    with pytest.raises(InvalidInput):
        shift_window(DAY, 'Z')


@pytest.mark.django_db
def test_get_machine(machine):
    assert get_machine(' CNC-01 ') == machine
    with pytest.raises(NotFound):
        get_machine('NOPE')


@pytest.mark.django_db
def test_assign_sequence_orders_and_drops_missing(machine, make_operation):
    a, b, c = (make_operation() for _ in range(3))
    assign_sequence(machine, DAY, 'A', [a.pk, b.pk, c.pk])
    assign_sequence(machine, DAY, 'A', [c.pk, a.pk])

    assert [op.pk for op in machine_queue(machine, DAY, 'A')] == [c.pk, a.pk]
    b.refresh_from_db()
    assert b.sequence == 0


@pytest.mark.django_db
def test_assign_sequence_moves_operation_to_machine(machine, make_operation):
    other = Machine.objects.create(code='CNC-02')
    op = make_operation(machine=other)
    assign_sequence(machine, DAY, 'B', [op.pk])
    op.refresh_from_db()
    assert (op.machine_id, op.planned_date, op.shift, op.sequence) == (machine.pk, DAY, 'B', 1)


@pytest.mark.django_db
def test_assign_sequence_rejects_duplicates(machine, make_operation):
    op = make_operation()
    with pytest.raises(ValidationFailed) as excinfo:
        assign_sequence(machine, DAY, 'A', [op.pk, op.pk])
    assert excinfo.value.field == 'operation_ids'


@pytest.mark.django_db
def test_assign_sequence_rejects_unknown_and_completed(machine, make_operation):
    with pytest.raises(OperationNotFound):
        assign_sequence(machine, DAY, 'A', [424242])
    done = make_operation(status=S.COMPLETE)
    with pytest.raises(StatusConflict) as excinfo:
        assign_sequence(machine, DAY, 'A', [done.pk])
    assert excinfo.value.current == 'Complete'


@pytest.mark.django_db
def test_failed_assignment_changes_nothing(machine, make_operation):
    queued = make_operation()
    assign_sequence(machine, DAY, 'A', [queued.pk])
    with pytest.raises(OperationNotFound):
        assign_sequence(machine, DAY, 'A', [999999])
    queued.refresh_from_db()
    assert queued.sequence == 1


@pytest.mark.django_db
def test_remove_closes_the_gap(machine, make_operation):
    ops = [make_operation() for _ in range(4)]
    assign_sequence(machine, DAY, 'A', [op.pk for op in ops])
    remove_from_sequence(ops[1].pk)

    remaining = list(machine_queue(machine, DAY, 'A'))
    assert [op.pk for op in remaining] == [ops[0].pk, ops[2].pk, ops[3].pk]
    assert [op.sequence for op in remaining] == [1, 2, 3]
    assert Operation.objects.get(pk=ops[1].pk).sequence == 0


@pytest.mark.django_db
def test_remove_unknown_operation():
    with pytest.raises(OperationNotFound):
        remove_from_sequence(31337)


@pytest.mark.django_db
def test_timeline_lays_jobs_back_to_back(machine, make_operation):
    first = make_operation(estimated_minutes=60)
    second = make_operation()
    last = make_operation(estimated_minutes=500)
    assign_sequence(machine, DAY, 'A', [first.pk, second.pk, last.pk])

    timeline = build_shift_timeline(machine, DAY, 'A')
    shift_start, _ = shift_window(DAY, 'A')

    assert timeline[0]['start'] == shift_start.isoformat()
    assert timeline[0]['end'] == (shift_start + timedelta(minutes=60)).isoformat()
    # 15 minute changeover, then the 50 minute default
    assert timeline[1]['start'] == (shift_start + timedelta(minutes=75)).isoformat()
    assert timeline[1]['minutes'] == 50
    assert [entry['overruns_shift'] for entry in timeline] == [False, False, True]
    assert timeline[2]['status_label'] == 'Assigned'
