import pytest

from jobs.exceptions import InvalidOperationId, OperationNotFound
from jobs.models import ActionRecord, Notification, NotificationTarget, OperationStatus as S
from jobs.queries import (
    get_current_status,
    get_operation_snapshot,
    parse_operation_id,
    recent_actions,
    recent_notifications,
)
from jobs.services import JobActionProcessor

pytestmark = pytest.mark.django_db


def test_snapshot_right_after_setup_shows_new_state(make_operation):
    op = make_operation(status=S.ASSIGNED)
    JobActionProcessor().perform('setup', op.pk, 'Asha Rao', {'message': 'Tool change', 'remarks': 'ok'})

    snap = get_operation_snapshot(op.pk)
    assert snap['status'] == S.SETUP
    assert snap['status_label'] == 'Setup'
    assert snap['status_color'] == '#3b82f6'
    assert snap['message'] == 'Tool change'
    assert snap['remarks'] == 'ok'
    assert snap['started_at'] is not None
    assert snap['machine'] == 'CNC-01'
    assert snap['recent_actions'][0]['action'] == 'setup'
    assert snap['recent_actions'][0]['operator'] == 'Asha Rao'


def test_progress_is_capped_at_100(make_operation):
    op = make_operation(planned_quantity=50, actual_quantity=80)
    assert get_operation_snapshot(op.pk)['progress_percent'] == 100


def test_progress_rounds_to_two_places(make_operation):
    op = make_operation(planned_quantity=3, actual_quantity=1)
    assert get_operation_snapshot(op.pk)['progress_percent'] == 33.33


def test_progress_zero_without_plan(make_operation):
    op = make_operation(planned_quantity=0, actual_quantity=10)
    assert get_operation_snapshot(op.pk)['progress_percent'] == 0


def test_snapshot_flags(make_operation):
    paused = get_operation_snapshot(make_operation(status=S.PAUSED, hold_flag=S.IN_PROCESS).pk)
    assert paused['is_paused'] and not paused['is_completed']
    assert paused['hold_flag'] == S.IN_PROCESS
    qc = get_operation_snapshot(make_operation(status=S.QC_HOLD).pk)
    assert qc['is_qc_hold']


def test_snapshot_lists_last_ten_actions_newest_first(make_operation):
    op = make_operation(status=S.IN_PROCESS)
    records = [
        ActionRecord.objects.create(
            operation=op, action='alert', operator='x', from_status=S.IN_PROCESS, to_status=S.IN_PROCESS,
            details={'n': n},
        )
        for n in range(12)
    ]
    recent = get_operation_snapshot(op.pk)['recent_actions']
    assert len(recent) == 10
    assert [r['id'] for r in recent] == [r.pk for r in reversed(records)][:10]


def test_current_status(make_operation):
    op = make_operation(status=S.BREAKDOWN)
    assert get_current_status(op.pk) == S.BREAKDOWN
    assert get_current_status(str(op.pk)) == S.BREAKDOWN


def test_lookups_reject_bad_and_unknown_ids():
    with pytest.raises(InvalidOperationId):
        get_current_status('x')
    with pytest.raises(OperationNotFound):
        get_operation_snapshot(12345)


@pytest.mark.parametrize('value, expected', [(5, 5), ('17', 17), (' 8 ', 8)])
def test_parse_operation_id(value, expected):
    assert parse_operation_id(value) == expected


def test_recent_actions_across_operations(make_operation):
    first = make_operation(status=S.NEW)
    second = make_operation(status=S.NEW)
    processor = JobActionProcessor()
    processor.perform('setup', first.pk, 'a', {'message': 'one'})
    processor.perform('setup', second.pk, 'b', {'message': 'two'})
    rows = recent_actions()
    assert [r['operation_id'] for r in rows] == [second.pk, first.pk]


def test_notifications_filtered_by_target(make_operation):
    op = make_operation()
    Notification.objects.create(message='all', target=NotificationTarget.ALL, source_id=op.pk, category='setup')
    Notification.objects.create(message='qc', target=NotificationTarget.QC, source_id=op.pk, category='fpqc')
    assert [n['message'] for n in recent_notifications(target=NotificationTarget.QC)] == ['qc']
    assert len(recent_notifications()) == 2
