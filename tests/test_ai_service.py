"""Tests for the AI coach service."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from leancoach.agents.result import AgentResult
from leancoach.llm.providers.base import LLMResponse
from leancoach.llm.providers.openai_compat import OpenAICompatProvider
from leancoach.models import ChatMessage, ChatRole, SectionType
from leancoach.services.ai_service import AIResponseError, AIService
from leancoach.services.prompt_cache import PromptCache

from conftest import make_document


@pytest.fixture
def prompts_dir(tmp_path):
    (tmp_path / "coach_system.md").write_text("You are a Lean coach.", encoding="utf-8")
    (tmp_path / "section_review.md").write_text("Please review {section_title}.", encoding="utf-8")
    return tmp_path


@pytest.fixture
def chat_storage():
    storage = AsyncMock()
    storage.list_by_a3.return_value = []
    storage.create.side_effect = lambda m: m
    return storage


@pytest.fixture
def coach_agent():
    agent = MagicMock()
    agent.run = AsyncMock(return_value=AgentResult(content="Try a 5 Whys.", model="qwen2.5:7b"))
    return agent


@pytest.fixture
def service(chat_storage, prompts_dir, coach_agent):
    return AIService(chat_storage, PromptCache(prompts_dir), coach_agent)


@pytest.fixture
def filled_document(org, department, author):
    return make_document(
        org.id, department.id, author.id,
        background="Scrap costs 40k a month.",
        goals="Scrap below 1% by Q3.",
    )


@pytest.mark.asyncio
async def test_send_message_stores_both_messages(service, chat_storage, coach_agent, filled_document, author):
    reply = await service.send_message(filled_document, author, "  Where do I start?  ")

    assert reply.role == ChatRole.ASSISTANT
    assert reply.content == "Try a 5 Whys."
    assert reply.model == "qwen2.5:7b"
    stored = [c.args[0] for c in chat_storage.create.await_args_list]
    assert [m.role for m in stored] == [ChatRole.USER, ChatRole.ASSISTANT]
    assert stored[0].content == "Where do I start?"


@pytest.mark.asyncio
async def test_send_message_includes_history_and_context(service, chat_storage, coach_agent, filled_document, author):
    chat_storage.list_by_a3.return_value = [
        ChatMessage(a3_id=filled_document.id, user_id=author.id, role=ChatRole.USER, content="Hi"),
        ChatMessage(a3_id=filled_document.id, user_id=author.id, role=ChatRole.ASSISTANT, content="Hello"),
    ]

    await service.send_message(filled_document, author, "Next step?")

    kwargs = coach_agent.run.await_args.kwargs
    assert kwargs["messages"] == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
        {"role": "user", "content": "Next step?"},
    ]
    assert kwargs["system_prompt"].startswith("You are a Lean coach.")
    assert "Scrap costs 40k a month." in kwargs["system_prompt"]


@pytest.mark.asyncio
async def test_empty_message_rejected(service, chat_storage, filled_document, author):
    with pytest.raises(ValueError, match="empty"):
        await service.send_message(filled_document, author, "   ")
    chat_storage.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_agent_failure_keeps_user_message(service, chat_storage, coach_agent, filled_document, author):
    coach_agent.run.return_value = AgentResult(content="", model="m", finish_reason="error", error="down")

    with pytest.raises(AIResponseError):
        await service.send_message(filled_document, author, "Hello?")

    stored = [c.args[0] for c in chat_storage.create.await_args_list]
    assert len(stored) == 1
    assert stored[0].role == ChatRole.USER


@pytest.mark.asyncio
async def test_org_key_uses_provider(chat_storage, prompts_dir, coach_agent, filled_document, author, org):
    provider = MagicMock()
    provider.generate = AsyncMock(return_value=LLMResponse(content="Use a Pareto chart.", model="gpt-4o-mini"))
    provider.close = AsyncMock()
    factory = MagicMock(return_value=provider)

    service = AIService(
        chat_storage, PromptCache(prompts_dir), coach_agent,
        api_key_resolver=lambda o: "sk-org-key",
        provider_factory=factory,
    )
    reply = await service.send_message(filled_document, author, "Ideas?", organization=org)

    factory.assert_called_once_with("sk-org-key")
    coach_agent.run.assert_not_awaited()
    provider.close.assert_awaited_once()
    assert reply.content == "Use a Pareto chart."
    assert reply.model == "gpt-4o-mini"
    messages = provider.generate.await_args.args[0]
    assert messages[0].role == "system"
    assert messages[-1].content == "Ideas?"


@pytest.mark.asyncio
async def test_provider_failure_raises(chat_storage, prompts_dir, coach_agent, filled_document, author, org):
    provider = MagicMock()
    provider.generate = AsyncMock(return_value=LLMResponse(content="", model="m", finish_reason="timeout"))
    provider.close = AsyncMock()

    service = AIService(
        chat_storage, PromptCache(prompts_dir), coach_agent,
        api_key_resolver=lambda o: "sk-org-key",
        provider_factory=lambda key: provider,
    )
    with pytest.raises(AIResponseError, match="timeout"):
        await service.send_message(filled_document, author, "Ideas?", organization=org)
    provider.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_provider_garbled_reply_raises(chat_storage, prompts_dir, coach_agent, filled_document, author, org):
    client = httpx.AsyncClient(transport=httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html>Bad gateway</html>")
    ))
    service = AIService(
        chat_storage, PromptCache(prompts_dir), coach_agent,
        api_key_resolver=lambda o: "sk-org-key",
        provider_factory=lambda key: OpenAICompatProvider(key, base_url="https://llm.test/v1", client=client),
    )

    with pytest.raises(AIResponseError, match="error"):
        await service.send_message(filled_document, author, "Ideas?", organization=org)

    stored = [c.args[0] for c in chat_storage.create.await_args_list]
    assert [m.role for m in stored] == [ChatRole.USER]
    assert client.is_closed


@pytest.mark.asyncio
async def test_undecryptable_org_key_raises(chat_storage, prompts_dir, coach_agent, filled_document, author, org):
    def resolver(organization):
        raise ValueError("Invalid encrypted value")

    factory = MagicMock()
    service = AIService(
        chat_storage, PromptCache(prompts_dir), coach_agent,
        api_key_resolver=resolver,
        provider_factory=factory,
    )

    with pytest.raises(AIResponseError, match="decrypted"):
        await service.send_message(filled_document, author, "Ideas?", organization=org)

    factory.assert_not_called()
    coach_agent.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_org_without_key_uses_agent(chat_storage, prompts_dir, coach_agent, filled_document, author, org):
    service = AIService(
        chat_storage, PromptCache(prompts_dir), coach_agent,
        api_key_resolver=lambda o: None,
    )
    await service.send_message(filled_document, author, "Ideas?", organization=org)

    coach_agent.run.assert_awaited_once()


@pytest.mark.asyncio
async def test_review_section_uses_template(service, coach_agent, filled_document, author):
    reply = await service.review_section(filled_document, author, SectionType.GOALS)

    assert reply.section_type == SectionType.GOALS
    last = coach_agent.run.await_args.kwargs["messages"][-1]
    assert last["content"] == "Please review Goals / Target Condition."


def test_document_context_puts_focus_first(service, filled_document):
    context = service.build_document_context(filled_document, SectionType.GOALS)

    assert context.index("### Goals / Target Condition") < context.index("### Background")
    assert "The user is working on: Goals / Target Condition" in context
    assert "Empty sections: Project Information" in context


def test_document_context_without_focus(service, filled_document):
    context = service.build_document_context(filled_document)

    assert "Title: Reduce scrap on line 3" in context
    assert "Status: draft" in context
    assert context.index("### Background") < context.index("### Goals / Target Condition")


@pytest.mark.asyncio
async def test_clear_history(service, chat_storage, filled_document, author):
    chat_storage.clear.return_value = 4

    assert await service.clear_history(filled_document, author) == 4
    chat_storage.clear.assert_awaited_once_with(filled_document.id, author.id)
