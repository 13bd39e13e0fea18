from types import SimpleNamespace

import pytest

from gelato_ops.extensions import db
from gelato_ops.models import ProductionTask
from gelato_ops.services.errors import ValidationError
from gelato_ops.services.production_task_service import TRAY_WEIGHT_REQUIRED, apply_update
from gelato_ops.utils.timezone_utils import TimezoneUtils


@pytest.fixture
def factory_worker(make_user):
    return make_user('factory_worker')


@pytest.fixture
def worker_client(login_as, factory_worker):
    return login_as(factory_worker)


def _create(client, item_id, **extra):
    payload = {'date': TimezoneUtils.business_today().isoformat(), 'itemId': item_id, 'quantity': 4}
    payload.update(extra)
    resp = client.post('/api/production-tasks', json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['task']


def test_create_infers_tray_output_from_unit(worker_client, catalog, factory_worker):
    tray = _create(worker_client, catalog['vanilla'], unit='Trays')
    assert tray['outputKind'] == 'TRAY'
    assert tray['status'] == 'SCHEDULED'
    assert tray['createdByUserId'] == factory_worker

    tubs = _create(worker_client, catalog['vanilla'], unit='tubs')
    assert tubs['outputKind'] == 'UNITS'

    explicit = _create(worker_client, catalog['vanilla'], unit='batches', outputKind='TRAY')
    assert explicit['outputKind'] == 'TRAY'


def test_create_validates_payload(worker_client, catalog):
    today = TimezoneUtils.business_today().isoformat()
    resp = worker_client.post('/api/production-tasks', json={'date': today, 'quantity': 1})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'date, itemId, and quantity are required'

    resp = worker_client.post('/api/production-tasks', json={'date': today, 'itemId': 99999, 'quantity': 1})
    assert resp.status_code == 400

    resp = worker_client.post('/api/production-tasks', json={'date': today, 'itemId': catalog['vanilla'], 'quantity': -3})
    assert resp.status_code == 400

    resp = worker_client.post(
        '/api/production-tasks',
        json={'date': today, 'itemId': catalog['vanilla'], 'quantity': 1, 'outputKind': 'BUCKET'},
    )
    assert resp.status_code == 400


def test_completing_tray_task_requires_weight(app, worker_client, catalog):
    task = _create(worker_client, catalog['vanilla'], unit='trays')

    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'complete': True})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == TRAY_WEIGHT_REQUIRED

    with app.app_context():
        assert db.session.get(ProductionTask, task['id']).status == 'SCHEDULED'

    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'complete': True, 'totalWeightKg': 12.5})
    assert resp.status_code == 200
    done = resp.get_json()['task']
    assert done['status'] == 'DONE'
    assert done['totalWeightKg'] == 12.5
    assert done['completedAt'] is not None


def test_completing_unit_task_needs_no_weight(worker_client, catalog, factory_worker):
    task = _create(worker_client, catalog['chocolate'], unit='tubs')
    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'complete': True})
    assert resp.status_code == 200
    done = resp.get_json()['task']
    assert done['status'] == 'DONE'
    assert done['totalWeightKg'] is None
    assert done['assignedToUserId'] == factory_worker


def test_start_assigns_actor_and_rejects_terminal_tasks(worker_client, catalog, factory_worker):
    task = _create(worker_client, catalog['vanilla'])
    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'start': True})
    assert resp.status_code == 200
    started = resp.get_json()['task']
    assert started['status'] == 'IN_PROGRESS'
    assert started['startedAt'] is not None
    assert started['assignedToUserId'] == factory_worker

    worker_client.patch(f"/api/production-tasks/{task['id']}", json={'cancel': True})
    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'start': True})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Cannot start a task that is CANCELLED'


def test_status_override_bypasses_tray_guard(worker_client, catalog):
    task = _create(worker_client, catalog['vanilla'], unit='trays')
    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'complete': True, 'status': 'DONE'})
    assert resp.status_code == 200
    assert resp.get_json()['task']['status'] == 'DONE'
    assert resp.get_json()['task']['totalWeightKg'] is None

    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'status': 'FINISHED'})
    assert resp.status_code == 400


def test_invalid_weight_rejected(worker_client, catalog):
    task = _create(worker_client, catalog['vanilla'], unit='trays')
    resp = worker_client.patch(f"/api/production-tasks/{task['id']}", json={'complete': True, 'totalWeightKg': 0})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'totalWeightKg must be a positive number'


def test_unknown_task_returns_404(worker_client):
    resp = worker_client.patch('/api/production-tasks/31337', json={'start': True})
    assert resp.status_code == 404


def test_list_tasks_filters_by_date(worker_client, catalog):
    _create(worker_client, catalog['vanilla'])
    _create(worker_client, catalog['chocolate'], date='2030-01-15')

    resp = worker_client.get('/api/production-tasks')
    assert len(resp.get_json()['tasks']) == 2

    resp = worker_client.get('/api/production-tasks?start=2030-01-01&end=2030-01-31')
    tasks = resp.get_json()['tasks']
    assert [task['item']['name'] for task in tasks] == ['Chocolate']

    assert worker_client.get('/api/production-tasks?start=soon').status_code == 400


def test_viewer_cannot_update_tasks(login_as, make_user, worker_client, catalog):
    task = _create(worker_client, catalog['vanilla'])
    viewer_client = login_as(make_user('viewer'))
    resp = viewer_client.patch(f"/api/production-tasks/{task['id']}", json={'start': True})
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Permission denied: production:update or production:create'


# --- In-memory store ---

class FakeTaskStore:
    def __init__(self, task):
        self.task = task
        self.saved = 0

    def get_task(self, task_id):
        return self.task if task_id == self.task.id else None

    def save_task(self, task):
        self.saved += 1
        return task


def _fake_task(output_kind, status='SCHEDULED', assigned=None):
    return ProductionTask(id=1, output_kind=output_kind, status=status, assigned_to_user_id=assigned)


def test_tray_guard_does_not_save():
    store = FakeTaskStore(_fake_task('TRAY'))
    with pytest.raises(ValidationError):
        apply_update(1, {'complete': True}, SimpleNamespace(id=5), store=store)
    assert store.saved == 0
    assert store.task.status == 'SCHEDULED'


def test_complete_keeps_existing_assignee():
    store = FakeTaskStore(_fake_task('UNITS', status='IN_PROGRESS', assigned=9))
    task = apply_update(1, {'complete': True}, SimpleNamespace(id=5), store=store)
    assert task.status == 'DONE'
    assert task.assigned_to_user_id == 9
    assert store.saved == 1


def test_weight_is_only_recorded_on_tray_tasks():
    units = FakeTaskStore(_fake_task('UNITS'))
    task = apply_update(1, {'complete': True, 'totalWeightKg': 4.2}, SimpleNamespace(id=5), store=units)
    assert task.status == 'DONE'
    assert task.total_weight_kg is None

    trays = FakeTaskStore(_fake_task('TRAY'))
    task = apply_update(1, {'complete': True, 'totalWeightKg': 4.2}, SimpleNamespace(id=5), store=trays)
    assert task.total_weight_kg == 4.2
