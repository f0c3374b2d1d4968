import pytest
from django.test import Client

from jobs.models import Operation, OperationStatus
from planning.models import Machine
from users.models import CustomUser


@pytest.fixture
def operator_user(db):
    return CustomUser.objects.create_user(
        username='op1', password='pass', full_name='Asha Rao', role='operator'
    )


@pytest.fixture
def supervisor_user(db):
    return CustomUser.objects.create_user(
        username='sup1', password='pass', full_name='Dev Malhotra', role='supervisor'
    )


@pytest.fixture
def maintenance_user(db):
    return CustomUser.objects.create_user(
        username='mt1', password='pass', full_name='Ravi Iyer', role='maintenance'
    )


@pytest.fixture
def machine(db):
    return Machine.objects.create(code='CNC-01', name='Lathe 1')


@pytest.fixture
def make_operation(db, machine):
    def factory(**kwargs):
        kwargs.setdefault('machine', machine)
        kwargs.setdefault('status', OperationStatus.ASSIGNED)
        kwargs.setdefault('planned_quantity', 100)
        kwargs.setdefault('lot_number', 'LOT-1001')
        kwargs.setdefault('item_code', 'ITM-55')
        return Operation.objects.create(**kwargs)

    return factory


@pytest.fixture
def operator_client(operator_user):
    client = Client()
    client.force_login(operator_user)
    return client


@pytest.fixture
def supervisor_client(supervisor_user):
    client = Client()
    client.force_login(supervisor_user)
    return client


@pytest.fixture
def maintenance_client(maintenance_user):
    client = Client()
    client.force_login(maintenance_user)
    return client
