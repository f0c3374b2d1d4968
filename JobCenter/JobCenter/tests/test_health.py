import pytest
from django.db import DatabaseError
from django.urls import reverse


@pytest.mark.django_db
def test_health_reports_database(client):
    resp = client.get(reverse('health'))
    body = resp.json()
    assert resp.status_code == 200
    assert body['ok'] is True
    assert body['status'] == 'healthy'
    assert body['database'] == 'ok'
    assert body['server_time']


def test_health_degrades_when_database_is_down(client, monkeypatch, caplog):
    def refuse():
        raise DatabaseError('connection refused')

    monkeypatch.setattr('JobCenter.views.connection.ensure_connection', refuse)
    resp = client.get(reverse('health'))
    assert resp.status_code == 503
    assert resp.json()['database'] == 'unavailable'
    assert 'could not reach the database' in caplog.text
