"""Tests for RequestRepository soft-delete reads and grouped counts."""

from app.core.roles import UserRole
from app.repositories.request_repository import RequestRepository, RequestScope
from tests.fixtures.db_fixtures import future


def _create(request_service, world):
    return request_service.create(
        client_id=world.client_id,
        service_id=world.service_id,
        location_id=world.location_id,
        execution_date_time=future(),
    )


def test_soft_deleted_request_is_hidden_by_default(session, world, request_service):
    req = _create(request_service, world)
    repo = RequestRepository(session)

    assert repo.soft_delete(req.id) is True

    assert repo.get_by_id(req.id) is None
    assert repo.list_visible(scope=RequestScope(actor_id=world.admin_id, role=UserRole.ADMIN)) == []


def test_include_deleted_reads_soft_deleted_request(session, world, request_service):
    req = _create(request_service, world)
    repo = RequestRepository(session)
    repo.soft_delete(req.id)
    session.expire_all()

    found = repo.get_by_id(req.id, include_deleted=True)

    assert found is not None
    assert found.id == req.id
    assert found.deleted_at is not None


def test_second_soft_delete_is_a_no_op(session, world, request_service):
    req = _create(request_service, world)
    repo = RequestRepository(session)

    assert repo.soft_delete(req.id) is True
    assert repo.soft_delete(req.id) is False


def test_count_by_status_skips_deleted(session, world, request_service):
    kept = _create(request_service, world)
    gone = _create(request_service, world)
    repo = RequestRepository(session)
    repo.soft_delete(gone.id)

    counts = repo.count_by_status(scope=RequestScope(actor_id=world.admin_id, role=UserRole.ADMIN))

    assert counts == {kept.status: 1}
