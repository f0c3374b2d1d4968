from datetime import date, datetime, timedelta
from io import BytesIO

import pytest
from django.urls import reverse
from django.utils import timezone
from openpyxl import load_workbook

from jobs.models import OperationStatus as S
from jobs.services import JobActionProcessor
from maintenance.models import DowntimeRecord
from reports.services import ACTION_LOG_HEADERS, action_log_queryset, shift_summary
from utils.xlsx import XLSX_CONTENT_TYPE

pytestmark = pytest.mark.django_db

DAY = date(2026, 3, 2)


def local(hour, minute=0, day=DAY):
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour, minute))


def test_export_is_supervisor_only(operator_client):
    assert operator_client.get(reverse('reports:action_log_export')).status_code == 403


def test_export_contains_action_log(supervisor_client, make_operation):
    op = make_operation(status=S.ASSIGNED)
    JobActionProcessor().perform('setup', op.pk, 'Asha Rao', {'message': 'Tool change'})

    resp = supervisor_client.get(reverse('reports:action_log_export'))
    assert resp.status_code == 200
    assert resp['Content-Type'] == XLSX_CONTENT_TYPE
    assert 'attachment; filename=action_log_' in resp['Content-Disposition']

    ws = load_workbook(BytesIO(resp.content)).active
    assert ws.title == 'Action log'
    assert ws['A1'].value == 'Job Center action log'
    # title, timestamp, header
    assert [cell.value for cell in ws[3]] == ACTION_LOG_HEADERS
    row = [cell.value for cell in ws[4]]
    assert row[1:9] == [op.pk, 'CNC-01', 'LOT-1001', 'ITM-55', 'setup', 'Asha Rao', 'Assigned', 'Setup']
    assert '"message": "Tool change"' in row[9]


def test_export_filter_errors(supervisor_client):
    url = reverse('reports:action_log_export')
    assert supervisor_client.get(url, {'action': 'dance'}).status_code == 400
    assert supervisor_client.get(url, {'date_from': 'yesterday'}).json()['details'] == {'date_from': 'invalid'}
    assert supervisor_client.get(url, {'operation': 'x'}).status_code == 400


def test_action_log_filters(make_operation):
    first, second = make_operation(status=S.NEW), make_operation(status=S.IN_PROCESS)
    processor = JobActionProcessor()
    processor.perform('setup', first.pk, 'a', {'message': 'one'})
    processor.perform('pause', second.pk, 'b', {'reason': 1})

    assert [r.action for r in action_log_queryset(action='pause')] == ['pause']
    assert [r.operation_id for r in action_log_queryset(operation_id=first.pk)] == [first.pk]
    tomorrow = timezone.localdate() + timedelta(days=1)
    assert not action_log_queryset(date_from=tomorrow).exists()


def test_shift_summary_counts_and_downtime(make_operation, machine):
    make_operation(planned_date=DAY, status=S.COMPLETE)
    make_operation(planned_date=DAY, status=S.COMPLETE)
    paused = make_operation(planned_date=DAY, status=S.PAUSED)
    make_operation(planned_date=DAY + timedelta(days=5), status=S.NEW)

    DowntimeRecord.objects.create(
        kind=DowntimeRecord.KIND_PAUSE, operation=paused, machine=machine,
        started_at=local(9), ended_at=local(9, 20), recorded_by='x',
    )
    DowntimeRecord.objects.create(
        kind=DowntimeRecord.KIND_BREAKDOWN, operation=paused, machine=machine,
        started_at=local(10), ended_at=local(11, 5), recorded_by='x',
    )
    # still open, not counted
    DowntimeRecord.objects.create(
        kind=DowntimeRecord.KIND_PAUSE, operation=paused, machine=machine,
        started_at=local(12), recorded_by='x',
    )

    summary = shift_summary(DAY, DAY)
    assert summary['total_operations'] == 3
    counts = {row['label']: row['count'] for row in summary['statuses']}
    assert counts['Complete'] == 2
    assert counts['Paused'] == 1
    assert counts['New'] == 0
    assert summary['downtime'] == [{
        'machine': 'CNC-01', 'pause_minutes': 20, 'breakdown_minutes': 65, 'total_minutes': 85,
    }]


def test_shift_summary_view(supervisor_client, operator_client):
    url = reverse('reports:shift_summary')
    assert operator_client.get(url).status_code == 403
    data = supervisor_client.get(url, {'date_from': '2026-03-02'}).json()['data']
    assert (data['date_from'], data['date_to']) == ('2026-03-02', '2026-03-02')
    backwards = supervisor_client.get(url, {'date_from': '2026-03-02', 'date_to': '2026-03-01'})
    assert backwards.status_code == 400
