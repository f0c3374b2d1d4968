import pytest
from django.test import Client
from django.urls import reverse

from jobs.models import OperationStatus as S

pytestmark = pytest.mark.django_db


def post_action(client, action, payload):
    return client.post(
        reverse('jobs:action', args=[action]),
        data=payload,
        content_type='application/json',
    )


def test_action_success_body(operator_client, make_operation):
    op = make_operation(status=S.ASSIGNED)
    resp = post_action(operator_client, 'setup', {'operation_id': op.pk, 'message': 'Tool change', 'remarks': 'ok'})
    assert resp.status_code == 200
    body = resp.json()
    assert body['ok'] is True
    assert body['message'] == 'Setup started successfully'
    assert body['data']['operation_id'] == op.pk
    assert body['data']['new_status'] == S.SETUP
    assert body['data']['new_status_label'] == 'Setup'
    assert body['data']['message'] == 'Tool change'


def test_action_accepts_form_data(operator_client, make_operation):
    op = make_operation(status=S.IN_PROCESS)
    resp = operator_client.post(
        reverse('jobs:action', args=['pause']),
        data={'operation_id': str(op.pk), 'reason': '4'},
    )
    assert resp.status_code == 200
    assert resp.json()['data']['reason_label'] == 'Quality issue'


def test_anonymous_action_is_401(make_operation):
    op = make_operation()
    resp = post_action(Client(), 'setup', {'operation_id': op.pk, 'message': 'm'})
    assert resp.status_code == 401
    assert resp.json()['code'] == 'unauthorized'


def test_conflict_is_409_with_state_names(operator_client, make_operation):
    op = make_operation(status=S.COMPLETE)
    resp = post_action(operator_client, 'pause', {'operation_id': op.pk, 'reason': 1})
    assert resp.status_code == 409
    body = resp.json()
    assert body['ok'] is False
    assert body['code'] == 'status_conflict'
    assert body['details'] == {'current': 'Complete', 'expected': 'Active status'}


def test_missing_field_is_400(operator_client, make_operation):
    op = make_operation()
    resp = post_action(operator_client, 'setup', {'operation_id': op.pk})
    assert resp.status_code == 400
    body = resp.json()
    assert body['code'] == 'missing_required_field'
    assert body['details'] == {'message': 'required'}


def test_validation_failure_is_422_and_names_field(operator_client, make_operation):
    op = make_operation(status=S.IN_PROCESS)
    resp = post_action(operator_client, 'breakdown', {'operation_id': op.pk, 'remarks': 'x' * 201})
    assert resp.status_code == 422
    body = resp.json()
    assert body['message'] == 'Breakdown remarks must be 200 characters or less'
    assert 'remarks' in body['details']


@pytest.mark.parametrize('bad_id', [None, 'abc', 0, -1, '²'])
def test_bad_operation_id_is_400(operator_client, bad_id):
    resp = post_action(operator_client, 'setup', {'operation_id': bad_id, 'message': 'm'})
    assert resp.status_code == 400
    assert resp.json()['code'] == 'invalid_operation_id'


def test_unknown_operation_is_404(operator_client):
    resp = post_action(operator_client, 'setup', {'operation_id': 98765, 'message': 'm'})
    assert resp.status_code == 404
    assert resp.json()['code'] == 'operation_not_found'


def test_unknown_action_is_400(operator_client, make_operation):
    op = make_operation()
    resp = post_action(operator_client, 'launch', {'operation_id': op.pk})
    assert resp.status_code == 400


def test_malformed_json_is_400(operator_client):
    resp = operator_client.post(
        reverse('jobs:action', args=['setup']), data='{not json', content_type='application/json'
    )
    assert resp.status_code == 400
    assert resp.json()['code'] == 'invalid_input'


def test_action_requires_post(operator_client):
    assert operator_client.get(reverse('jobs:action', args=['setup'])).status_code == 405


def test_snapshot_and_status_endpoints(operator_client, make_operation):
    op = make_operation(status=S.FPQC, planned_quantity=10, actual_quantity=4)
    snap = operator_client.get(reverse('jobs:snapshot', args=[op.pk])).json()['data']
    assert snap['progress_percent'] == 40
    assert snap['allowed_actions'] == ['pause', 'breakdown', 'complete', 'qc_check', 'test', 'alert', 'contact']
    status = operator_client.get(reverse('jobs:status', args=[op.pk])).json()['data']
    assert status == {'operation_id': op.pk, 'status': S.FPQC, 'status_label': 'FPQC'}


def test_snapshot_errors(operator_client):
    assert operator_client.get(reverse('jobs:snapshot', args=['nope'])).status_code == 400
    assert operator_client.get(reverse('jobs:status', args=[404404])).status_code == 404


def test_non_ascii_digits_are_rejected_as_bad_input(operator_client):
    resp = operator_client.get(reverse('jobs:status', args=['²']))
    assert resp.status_code == 400
    assert resp.json()['code'] == 'invalid_operation_id'
    assert operator_client.get(reverse('jobs:snapshot', args=['٣'])).status_code == 400
    assert operator_client.get(reverse('jobs:recent_actions'), {'limit': '²'}).status_code == 400
    assert operator_client.get(reverse('jobs:notifications'), {'target': '٣'}).status_code == 400


def test_reads_require_login(make_operation):
    op = make_operation()
    assert Client().get(reverse('jobs:snapshot', args=[op.pk])).status_code == 401


def test_feeds(operator_client, make_operation):
    op = make_operation(status=S.IN_PROCESS)
    post_action(operator_client, 'breakdown', {'operation_id': op.pk, 'remarks': 'motor fault'})

    actions = operator_client.get(reverse('jobs:recent_actions')).json()['data']['actions']
    assert actions[0]['action'] == 'breakdown'
    assert actions[0]['operator'] == 'Asha Rao'

    maintenance = operator_client.get(reverse('jobs:notifications'), {'target': 3}).json()['data']
    assert [n['message'] for n in maintenance['notifications']] == ['Machine Breakdown - motor fault']
    everyone = operator_client.get(reverse('jobs:notifications'), {'target': 0}).json()['data']
    assert everyone['notifications'] == []
    assert operator_client.get(reverse('jobs:notifications'), {'target': 'x'}).status_code == 400
