"""
AI Service

Coach chat for A3 documents. Each user has a private thread per document.
The coach sees the document's current content on every turn.
"""
from __future__ import annotations

import logging
from typing import Optional, List, Callable

from ..agents.coach import CoachAgent
from ..config import Config
from ..llm.providers.base import BaseLLMProvider, LLMMessage
from ..llm.providers.openai_compat import OpenAICompatProvider
from ..models.a3_document import A3Document, SectionType, SECTION_TITLES
from ..models.chat import ChatMessage, ChatRole
from ..models.organization import Organization
from ..models.user import User
from ..storage.chat_storage import ChatStorage
from .prompt_cache import PromptCache

logger = logging.getLogger("leancoach.services.ai")

COACH_PROMPT_FILE = "coach_system.md"
SECTION_REVIEW_PROMPT_FILE = "section_review.md"

DEFAULT_COACH_PROMPT = "You are a Lean coach helping a team complete an A3 report."
DEFAULT_REVIEW_PROMPT = 'Review the "{section_title}" section of this A3 and suggest improvements.'

MAX_MESSAGE_LENGTH = 4000


class AIResponseError(Exception):
    """Raised when the coach could not produce a reply"""


class AIService:
    """Service for AI coach conversations"""

    def __init__(
        self,
        chat_storage: ChatStorage,
        prompt_cache: PromptCache,
        coach_agent: CoachAgent,
        api_key_resolver: Optional[Callable[[Organization], Optional[str]]] = None,
        provider_factory: Optional[Callable[[str], BaseLLMProvider]] = None,
    ):
        self.chat_storage = chat_storage
        self.prompt_cache = prompt_cache
        self.coach_agent = coach_agent
        self.api_key_resolver = api_key_resolver
        self.provider_factory = provider_factory or (lambda key: OpenAICompatProvider(api_key=key))

    async def send_message(
        self,
        document: A3Document,
        user: User,
        content: str,
        organization: Optional[Organization] = None,
        section_type: Optional[SectionType] = None,
    ) -> ChatMessage:
        """
        Store the user's message, ask the coach and store its reply.

        Returns:
            The assistant message

        Raises:
            ValueError: If content is empty or too long
            AIResponseError: If the LLM call failed (user message stays stored)
        """
        content = (content or "").strip()
        if not content:
            raise ValueError("Message cannot be empty")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message exceeds {MAX_MESSAGE_LENGTH} characters")

        history = await self.chat_storage.list_by_a3(
            document.id, user.id, limit=Config.CHAT_HISTORY_LIMIT
        )

        await self.chat_storage.create(ChatMessage(
            a3_id=document.id,
            user_id=user.id,
            role=ChatRole.USER,
            content=content,
            section_type=section_type,
        ))

        system_prompt = self.build_system_prompt(document, section_type)
        conversation = [{"role": m.role.value, "content": m.content} for m in history]
        conversation.append({"role": "user", "content": content})

        reply, model = await self._generate(system_prompt, conversation, organization)

        assistant = await self.chat_storage.create(ChatMessage(
            a3_id=document.id,
            user_id=user.id,
            role=ChatRole.ASSISTANT,
            content=reply,
            section_type=section_type,
            model=model,
        ))
        logger.info(f"Coach replied on A3 {document.id} for {user.email}: {len(reply)} chars ({model})")
        return assistant

    async def review_section(
        self,
        document: A3Document,
        user: User,
        section_type: SectionType,
        organization: Optional[Organization] = None,
    ) -> ChatMessage:
        """Ask the coach to review one section"""
        template = self.prompt_cache.get(SECTION_REVIEW_PROMPT_FILE, DEFAULT_REVIEW_PROMPT)
        request = template.replace("{section_title}", SECTION_TITLES[section_type])
        return await self.send_message(
            document, user, request, organization=organization, section_type=section_type
        )

    async def get_history(self, document: A3Document, user: User, limit: int = 100) -> List[ChatMessage]:
        return await self.chat_storage.list_by_a3(document.id, user.id, limit)

    async def clear_history(self, document: A3Document, user: User) -> int:
        removed = await self.chat_storage.clear(document.id, user.id)
        logger.info(f"Cleared {removed} chat messages on A3 {document.id} for {user.email}")
        return removed

    def build_system_prompt(self, document: A3Document, section_type: Optional[SectionType] = None) -> str:
        """Coach instructions followed by the current A3 content"""
        coach_prompt = self.prompt_cache.get(COACH_PROMPT_FILE, DEFAULT_COACH_PROMPT)
        return f"{coach_prompt}\n\n{self.build_document_context(document, section_type)}"

    def build_document_context(self, document: A3Document, section_type: Optional[SectionType] = None) -> str:
        """
        Render the A3 as plain text for the model.

        The focused section (if any) comes first; empty sections are listed
        by name only so the coach knows they are still missing.
        """
        lines = [
            "## Current A3",
            f"Title: {document.title}",
            f"Status: {document.status.value}",
        ]
        if document.description:
            lines.append(f"Description: {document.description}")

        sections = document.ordered_sections()
        if section_type:
            sections.sort(key=lambda s: s.section_type != section_type)
            lines.append(f"The user is working on: {SECTION_TITLES[section_type]}")

        empty = []
        for section in sections:
            text = section.content.strip()
            if not text:
                empty.append(section.title)
                continue
            lines.append(f"\n### {section.title}\n{text}")

        if empty:
            lines.append("\nEmpty sections: " + ", ".join(empty))

        return "\n".join(lines)

    async def _generate(
        self,
        system_prompt: str,
        conversation: List[dict],
        organization: Optional[Organization],
    ) -> tuple:
        """Call the organization's provider if it has a key, else the coach agent"""
        api_key = None
        if organization is not None and self.api_key_resolver is not None:
            try:
                api_key = self.api_key_resolver(organization)
            except ValueError as e:
                logger.error(f"Stored API key for organization {organization.id} is unusable: {e}")
                raise AIResponseError("Organization API key could not be decrypted") from e

        if api_key:
            provider = self.provider_factory(api_key)
            try:
                messages = [LLMMessage(role="system", content=system_prompt)]
                messages += [LLMMessage(role=m["role"], content=m["content"]) for m in conversation]
                response = await provider.generate(
                    messages,
                    temperature=Config.CHAT_TEMPERATURE,
                    max_tokens=Config.CHAT_MAX_TOKENS,
                )
            finally:
                await provider.close()

            if response.failed or not response.content.strip():
                raise AIResponseError(f"AI provider returned no answer ({response.finish_reason})")
            return response.content.strip(), response.model

        result = await self.coach_agent.run(
            system_prompt=system_prompt,
            messages=conversation,
            temperature=Config.CHAT_TEMPERATURE,
            max_tokens=Config.CHAT_MAX_TOKENS,
        )
        if result.finish_reason == "error" or not result.content.strip():
            raise AIResponseError(f"Coach agent returned no answer: {result.error or 'empty reply'}")
        return result.content.strip(), result.model
