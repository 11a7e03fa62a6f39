"""
tests/test_registry.py — Registro e rotação de base_key.
"""
import pytest
from sqlalchemy import func, select

from trust_broker.controllers.service_controller import ServiceController
from trust_broker.errors import InfrastructureError
from trust_broker.models.backend_service import BackendService


async def _count(session_factory, **filters) -> int:
    async with session_factory() as db:
        query = select(func.count(BackendService.id))
        for column, value in filters.items():
            query = query.where(getattr(BackendService, column) == value)
        return await db.scalar(query)


async def test_first_registration_creates_record(register, session_factory):
    base_key = await register("svcA", "http://a")

    async with session_factory() as db:
        service = await ServiceController.find_by_project(db, "svcA")
    assert service.url == "http://a"
    assert service.base_key == base_key


async def test_reregistration_rotates_key_in_place(register, session_factory):
    first = await register("svcA", "http://a")
    second = await register("svcA", "http://a")

    assert first != second
    assert await _count(session_factory, project="svcA") == 1

    async with session_factory() as db:
        service = await ServiceController.find_by_project(db, "svcA")
    assert service.base_key == second


async def test_rotation_bumps_updated_at(register, session_factory):
    await register("svcA", "http://a")
    async with session_factory() as db:
        before = (await ServiceController.find_by_project(db, "svcA")).updated_at

    await register("svcA", "http://a")
    async with session_factory() as db:
        after = (await ServiceController.find_by_project(db, "svcA")).updated_at

    assert after >= before


async def test_new_url_inserts_second_record(register, session_factory):
    await register("svcA", "http://a")
    await register("svcA", "http://a-new")

    assert await _count(session_factory, project="svcA") == 2


async def test_lookup_by_project_prefers_oldest_record(register, session_factory):
    await register("svcA", "http://a")
    await register("svcA", "http://a-new")

    async with session_factory() as db:
        service = await ServiceController.find_by_project(db, "svcA")
    assert service.url == "http://a"


async def test_lookup_of_unknown_or_empty_project(session_factory):
    async with session_factory() as db:
        assert await ServiceController.find_by_project(db, "nobody") is None
        assert await ServiceController.find_by_project(db, None) is None


async def test_failed_registration_leaves_no_record(register, session_factory, monkeypatch):
    # base_key NULL viola o NOT NULL no flush do commit
    monkeypatch.setattr(
        "trust_broker.controllers.service_controller.derive_base_key",
        lambda url, secret_salt: None,
    )

    with pytest.raises(InfrastructureError):
        await register("svcA", "http://a")

    assert await _count(session_factory, project="svcA") == 0


async def test_failed_rotation_keeps_previous_key(register, session_factory, monkeypatch):
    original = await register("svcA", "http://a")
    monkeypatch.setattr(
        "trust_broker.controllers.service_controller.derive_base_key",
        lambda url, secret_salt: None,
    )

    with pytest.raises(InfrastructureError):
        await register("svcA", "http://a")

    async with session_factory() as db:
        service = await ServiceController.find_by_project(db, "svcA")
    assert service.base_key == original
