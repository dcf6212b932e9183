"""Tests for A3 document service."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from leancoach.models import A3Section, A3Status, ActivityAction, SectionType
from leancoach.models.a3_document import can_transition
from leancoach.services.a3_service import A3Service, MAX_SECTION_LENGTH


@pytest.fixture
def storage():
    storage = AsyncMock()
    storage.create.side_effect = lambda doc: doc
    storage.update.side_effect = lambda doc: doc
    storage.update_section.side_effect = lambda a3_id, st, content: A3Section(
        a3_id=a3_id, section_type=st, content=content
    )
    return storage


@pytest.fixture
def department_storage(department):
    storage = AsyncMock()
    storage.get_by_id.return_value = department
    return storage


@pytest.fixture
def activity():
    return AsyncMock()


@pytest.fixture
def service(storage, department_storage, activity):
    return A3Service(storage, department_storage, activity)


@pytest.mark.asyncio
async def test_create_document_records_activity(service, activity, author, department):
    document = await service.create_document(author, department.id, "  Reduce scrap  ")

    assert document.title == "Reduce scrap"
    assert document.author_id == author.id
    assert document.org_id == author.org_id
    assert document.status == A3Status.DRAFT
    activity.record.assert_awaited_once_with(
        document.id, author.id, ActivityAction.CREATED, {"title": "Reduce scrap"}
    )


@pytest.mark.asyncio
async def test_create_rejects_department_of_other_org(service, department_storage, author, department):
    department.org_id = uuid4()

    with pytest.raises(ValueError, match="Department not found"):
        await service.create_document(author, department.id, "Title")


@pytest.mark.asyncio
async def test_create_requires_title(service, author, department):
    with pytest.raises(ValueError):
        await service.create_document(author, department.id, "   ")


@pytest.mark.asyncio
async def test_get_document_scoped_to_org(service, storage, document, org):
    storage.get_by_id.return_value = document

    assert await service.get_document(document.id, org.id) is document
    assert await service.get_document(document.id, uuid4()) is None


@pytest.mark.asyncio
async def test_get_document_hides_deleted(service, storage, document, org):
    document.is_active = False
    storage.get_by_id.return_value = document

    assert await service.get_document(document.id, org.id) is None


@pytest.mark.asyncio
async def test_owner_lists_whole_org(service, storage, owner):
    await service.list_documents(owner, A3Status.DRAFT)

    storage.list_by_org.assert_awaited_once_with(owner.org_id, A3Status.DRAFT)
    storage.list_visible.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_lists_visible_only(service, storage, colleague):
    await service.list_documents(colleague)

    storage.list_visible.assert_awaited_once_with(colleague.org_id, colleague.id, None)


@pytest.mark.asyncio
async def test_update_section(service, activity, document, author):
    section = await service.update_section(document, author, SectionType.GOALS, "Scrap < 1%")

    assert section.content == "Scrap < 1%"
    action = activity.record.await_args.args[2]
    details = activity.record.await_args.args[3]
    assert action == ActivityAction.SECTION_UPDATED
    assert details == {"section_type": "goals", "length": 10}


@pytest.mark.asyncio
async def test_update_section_rejected_when_archived(service, document, author):
    document.status = A3Status.ARCHIVED

    with pytest.raises(ValueError, match="Archived"):
        await service.update_section(document, author, SectionType.GOALS, "text")


@pytest.mark.asyncio
async def test_update_section_too_long(service, document, author):
    with pytest.raises(ValueError, match="exceeds"):
        await service.update_section(document, author, SectionType.GOALS, "x" * (MAX_SECTION_LENGTH + 1))


@pytest.mark.asyncio
async def test_change_status_valid(service, storage, activity, document, author):
    updated = await service.change_status(document, author, A3Status.IN_PROGRESS)

    assert updated.status == A3Status.IN_PROGRESS
    storage.update_status.assert_awaited_once_with(document.id, A3Status.IN_PROGRESS)
    assert activity.record.await_args.args[3] == {"from": "draft", "to": "in_progress"}


@pytest.mark.asyncio
async def test_change_status_invalid(service, storage, document, author):
    with pytest.raises(ValueError, match="Cannot change status"):
        await service.change_status(document, author, A3Status.COMPLETED)
    storage.update_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_change_status_same_is_noop(service, storage, activity, document, author):
    await service.change_status(document, author, A3Status.DRAFT)

    storage.update_status.assert_not_awaited()
    activity.record.assert_not_awaited()


def test_status_transitions():
    assert can_transition(A3Status.DRAFT, A3Status.IN_PROGRESS)
    assert can_transition(A3Status.IN_PROGRESS, A3Status.COMPLETED)
    assert can_transition(A3Status.IN_PROGRESS, A3Status.DRAFT)
    assert can_transition(A3Status.COMPLETED, A3Status.IN_PROGRESS)
    assert can_transition(A3Status.COMPLETED, A3Status.ARCHIVED)
    assert can_transition(A3Status.ARCHIVED, A3Status.DRAFT)
    assert not can_transition(A3Status.DRAFT, A3Status.COMPLETED)
    assert not can_transition(A3Status.ARCHIVED, A3Status.COMPLETED)


@pytest.mark.asyncio
async def test_update_document_without_changes_skips_storage(service, storage, activity, document, author):
    result = await service.update_document(document, author)

    assert result is document
    storage.update.assert_not_awaited()
    activity.record.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_document_records_activity(service, storage, activity, document, owner):
    storage.delete.return_value = True

    assert await service.delete_document(document, owner)
    activity.record.assert_awaited_once_with(document.id, owner.id, ActivityAction.DELETED)


@pytest.mark.asyncio
async def test_update_document_rejected_when_archived(service, storage, activity, document, author):
    document.status = A3Status.ARCHIVED

    with pytest.raises(ValueError, match="Archived"):
        await service.update_document(document, author, title="New title")

    assert document.title != "New title"
    storage.update.assert_not_awaited()
    activity.record.assert_not_awaited()
