"""Tests for organization service."""

from unittest.mock import AsyncMock

import pytest

from leancoach.encryption import decrypt_api_key
from leancoach.models import Organization, User
from leancoach.services.org_service import OrgService


@pytest.fixture
def org_storage():
    storage = AsyncMock()
    storage.exists_by_slug.return_value = False
    storage.create.side_effect = lambda org: org
    storage.update.side_effect = lambda org: org
    storage.set_api_key.return_value = True
    return storage


@pytest.fixture
def user_storage():
    return AsyncMock()


@pytest.fixture
def service(org_storage, user_storage):
    return OrgService(org_storage, user_storage)


@pytest.fixture
def new_user():
    return User(name="Fresh User", email="fresh@acme.test")


@pytest.mark.asyncio
async def test_create_makes_creator_owner(service, user_storage, new_user):
    org = await service.create_organization(new_user, "Acme Manufacturing")

    assert org.slug == "acme-manufacturing"
    user_storage.set_organization.assert_awaited_once_with(new_user.id, org.id, is_owner=True)
    assert new_user.org_id == org.id
    assert new_user.is_owner


@pytest.mark.asyncio
async def test_create_rejects_user_with_organization(service, owner):
    with pytest.raises(ValueError, match="already belongs"):
        await service.create_organization(owner, "Second Org")


@pytest.mark.asyncio
async def test_create_rejects_taken_slug(service, org_storage, new_user):
    org_storage.exists_by_slug.return_value = True

    with pytest.raises(ValueError, match="already exists"):
        await service.create_organization(new_user, "Acme")


@pytest.mark.asyncio
async def test_create_rejects_invalid_slug(service, new_user):
    with pytest.raises(ValueError, match="Invalid slug"):
        await service.create_organization(new_user, "Acme", slug="-bad slug-")


@pytest.mark.asyncio
async def test_create_requires_name(service, new_user):
    with pytest.raises(ValueError, match="name is required"):
        await service.create_organization(new_user, "   ")


def test_generate_slug(service):
    assert service._generate_slug("  Acme  Tools & Dies ") == "acme-tools-dies"
    assert service._generate_slug("!!!") == "org"


@pytest.mark.asyncio
async def test_update_returns_none_for_missing(service, org_storage):
    org_storage.get_by_id.return_value = None

    assert await service.update_organization(Organization().id, name="X") is None


@pytest.mark.asyncio
async def test_update_changes_fields(service, org_storage, org):
    org_storage.get_by_id.return_value = org

    updated = await service.update_organization(org.id, name=" Acme Ltd ", description="Widgets")

    assert updated.name == "Acme Ltd"
    assert updated.description == "Widgets"


@pytest.mark.asyncio
async def test_set_api_key_encrypts_and_returns_mask(service, org_storage, org, encryption_key):
    masked = await service.set_api_key(org.id, "sk-test-1234567890")

    assert masked == "sk-t...7890"
    stored = org_storage.set_api_key.await_args.args[1]
    assert stored != "sk-test-1234567890"
    assert decrypt_api_key(stored) == "sk-test-1234567890"


@pytest.mark.asyncio
async def test_set_api_key_missing_org(service, org_storage, org, encryption_key):
    org_storage.set_api_key.return_value = False

    with pytest.raises(ValueError, match="not found"):
        await service.set_api_key(org.id, "sk-test-1234567890")


@pytest.mark.asyncio
async def test_set_api_key_without_encryption_key(service, org, monkeypatch):
    monkeypatch.delenv("API_KEY_ENCRYPTION_KEY", raising=False)

    with pytest.raises(RuntimeError):
        await service.set_api_key(org.id, "sk-test-1234567890")


@pytest.mark.asyncio
async def test_remove_api_key(service, org_storage, org):
    assert await service.remove_api_key(org.id)
    org_storage.set_api_key.assert_awaited_once_with(org.id, None)


def test_masked_and_plain_key(service, org, encryption_key):
    from leancoach.encryption import encrypt_api_key

    assert service.get_masked_api_key(org) is None
    assert service.get_api_key(org) is None

    org.openai_api_key_encrypted = encrypt_api_key("sk-test-1234567890")

    assert service.get_masked_api_key(org) == "sk-t...7890"
    assert service.get_api_key(org) == "sk-test-1234567890"
    assert "openai_api_key_encrypted" not in org.to_dict()
    assert org.to_dict()["has_api_key"] is True
