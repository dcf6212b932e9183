"""Tests for storage row mapping and query helpers (no database)."""

from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from leancoach.models import SectionType
from leancoach.storage.a3_storage import A3Storage
from leancoach.storage.chat_storage import ChatStorage
from leancoach.storage.org_storage import OrgStorage
from leancoach.storage.user_storage import UserStorage

from conftest import make_document


def _org_row(**overrides):
    row = {
        "id": uuid4(),
        "name": "Acme",
        "slug": "acme",
        "description": None,
        "is_active": True,
        "openai_api_key_encrypted": "aa:bb",
        "created_at": datetime(2024, 1, 1),
        "updated_at": datetime(2024, 1, 2),
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_org_row_mapping():
    storage = OrgStorage()
    row = _org_row()
    storage.fetchrow = AsyncMock(return_value=row)

    org = await storage.get_by_slug("acme")

    assert org.id == row["id"]
    assert org.has_api_key
    assert storage.fetchrow.await_args.args[1] == "acme"


@pytest.mark.asyncio
async def test_get_missing_returns_none():
    storage = UserStorage()
    storage.fetchrow = AsyncMock(return_value=None)

    assert await storage.get_by_id(uuid4()) is None


@pytest.mark.asyncio
async def test_soft_delete_reports_update_count():
    storage = UserStorage()
    storage.execute = AsyncMock(return_value="UPDATE 1")
    user_id = uuid4()

    assert await storage.delete(user_id)
    query, record_id, _ = storage.execute.await_args.args
    assert query.startswith("UPDATE users SET is_active = false")
    assert record_id == user_id

    storage.execute.return_value = "UPDATE 0"
    assert not await storage.delete(user_id)


@pytest.mark.asyncio
async def test_user_create_lowercases_email(author):
    storage = UserStorage()
    author.email = "Alex@ACME.test"
    storage.fetchrow = AsyncMock(side_effect=lambda query, *args: dict(zip(
        ("id", "org_id", "name", "email", "password_hash", "is_owner", "is_active",
         "created_at", "updated_at", "last_seen_at"),
        args,
    )))

    created = await storage.create(author)

    assert created.email == "alex@acme.test"


@pytest.mark.asyncio
async def test_chat_clear_parses_count():
    storage = ChatStorage()
    storage.execute = AsyncMock(return_value="DELETE 7")

    assert await storage.clear(uuid4(), uuid4()) == 7


@pytest.mark.asyncio
async def test_a3_create_inserts_all_sections_in_one_transaction(org, department, author):
    document = make_document(org.id, department.id, author.id, goals="Scrap < 1%")
    document.sections = [s for s in document.sections if s.section_type == SectionType.GOALS]

    def fetchrow(query, *args):
        if "a3_documents" in query:
            return {
                "id": args[0], "org_id": args[1], "department_id": args[2], "author_id": args[3],
                "title": args[4], "description": args[5], "status": args[6], "is_active": args[7],
                "created_at": args[8], "updated_at": args[9],
            }
        return {
            "id": args[0], "a3_id": args[1], "section_type": args[2], "content": args[3],
            "created_at": args[4], "updated_at": args[5],
        }

    conn = MagicMock()
    conn.fetchrow = AsyncMock(side_effect=fetchrow)
    transactions = []

    @asynccontextmanager
    async def transaction():
        transactions.append(conn)
        yield conn

    storage = A3Storage()
    storage.transaction = transaction

    created = await storage.create(document)

    assert len(transactions) == 1
    assert conn.fetchrow.await_count == 9
    assert [s.section_type for s in created.sections] == list(SectionType)
    assert created.get_section(SectionType.GOALS).content == "Scrap < 1%"
    assert created.get_section(SectionType.BACKGROUND).content == ""
