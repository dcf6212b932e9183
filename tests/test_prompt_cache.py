"""Tests for prompt cache."""

from leancoach.config import Config
from leancoach.services.prompt_cache import PromptCache


def test_reads_once_then_caches(tmp_path):
    prompt = tmp_path / "coach.md"
    prompt.write_text("  First version \n", encoding="utf-8")
    cache = PromptCache(tmp_path)

    assert cache.get("coach.md") == "First version"
    prompt.write_text("Second version", encoding="utf-8")
    assert cache.get("coach.md") == "First version"
    assert cache.cached_count == 1


def test_clear_reloads(tmp_path):
    prompt = tmp_path / "coach.md"
    prompt.write_text("First", encoding="utf-8")
    cache = PromptCache(tmp_path)
    cache.get("coach.md")

    prompt.write_text("Second", encoding="utf-8")
    cache.clear("coach.md")

    assert cache.get("coach.md") == "Second"


def test_missing_file_returns_default(tmp_path):
    cache = PromptCache(tmp_path)

    assert cache.get("nope.md", "fallback") == "fallback"
    assert cache.cached_count == 0


def test_packaged_prompts_exist():
    cache = PromptCache(Config.PROMPTS_DIR)

    assert cache.get("coach_system.md")
    assert "{section_title}" in cache.get("section_review.md")
