"""Tests for department service."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from leancoach.models import DepartmentRole, User
from leancoach.services.department_service import DepartmentService


@pytest.fixture
def storage(department):
    storage = AsyncMock()
    storage.exists_by_name.return_value = False
    storage.create.side_effect = lambda d: d
    storage.update.side_effect = lambda d: d
    storage.add_member.side_effect = lambda m: m
    storage.get_by_id.return_value = department
    return storage


@pytest.fixture
def user_storage():
    return AsyncMock()


@pytest.fixture
def service(storage, user_storage):
    return DepartmentService(storage, user_storage)


@pytest.mark.asyncio
async def test_create_department(service, org):
    department = await service.create_department(org.id, "  Quality  ", "QA team")

    assert department.name == "Quality"
    assert department.org_id == org.id


@pytest.mark.asyncio
async def test_create_rejects_duplicate_name(service, storage, org):
    storage.exists_by_name.return_value = True

    with pytest.raises(ValueError, match="already exists"):
        await service.create_department(org.id, "Assembly")


@pytest.mark.asyncio
async def test_create_requires_name(service, org):
    with pytest.raises(ValueError, match="required"):
        await service.create_department(org.id, "")


@pytest.mark.asyncio
async def test_get_department_scoped_to_org(service, department, org):
    assert await service.get_department(department.id, org.id) is department
    assert await service.get_department(department.id, uuid4()) is None


@pytest.mark.asyncio
async def test_get_department_hides_inactive(service, department, org):
    department.is_active = False

    assert await service.get_department(department.id, org.id) is None


@pytest.mark.asyncio
async def test_update_department_rename_conflict(service, storage, department, org):
    storage.exists_by_name.return_value = True

    with pytest.raises(ValueError):
        await service.update_department(department.id, org.id, name="Logistics")


@pytest.mark.asyncio
async def test_update_department_rejects_blank_name(service, storage, department, org):
    original = department.name

    with pytest.raises(ValueError, match="required"):
        await service.update_department(department.id, org.id, name="   ")

    assert department.name == original
    storage.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_department_strips_name(service, department, org):
    updated = await service.update_department(department.id, org.id, name="  Logistics  ")

    assert updated.name == "Logistics"


@pytest.mark.asyncio
async def test_set_member_in_same_org(service, user_storage, department, colleague):
    user_storage.get_by_id.return_value = colleague

    membership = await service.set_member(department, colleague.id, DepartmentRole.MANAGER)

    assert membership.user_id == colleague.id
    assert membership.department_id == department.id
    assert membership.role == DepartmentRole.MANAGER


@pytest.mark.asyncio
async def test_set_member_rejects_other_org(service, user_storage, department):
    stranger = User(org_id=uuid4(), name="Stranger", email="s@other.test")
    user_storage.get_by_id.return_value = stranger

    with pytest.raises(ValueError, match="not found in this organization"):
        await service.set_member(department, stranger.id)


@pytest.mark.asyncio
async def test_set_member_rejects_inactive_user(service, user_storage, department, colleague):
    colleague.is_active = False
    user_storage.get_by_id.return_value = colleague

    with pytest.raises(ValueError):
        await service.set_member(department, colleague.id)


@pytest.mark.asyncio
async def test_deactivate_missing_department(service, storage, org):
    storage.get_by_id.return_value = None

    assert not await service.deactivate_department(uuid4(), org.id)
    storage.delete.assert_not_awaited()
