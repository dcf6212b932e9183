"""
Prompt Cache

In-memory cache for coach prompt files.
Reads prompts from disk on first access, caches in memory.
"""
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger("leancoach.services.prompt_cache")


class PromptCache:
    """
    Cache for prompt templates stored as files.

    Prompts are read from disk on first access and cached in memory.
    """

    def __init__(self, prompts_dir: Union[str, Path]):
        self._cache: dict[str, str] = {}
        self._prompts_dir = Path(prompts_dir)

    def get(self, name: str, default: str = "") -> str:
        """
        Get prompt text by file name.

        Falls back to `default` when the file does not exist.
        """
        if name not in self._cache:
            path = self._prompts_dir / name
            try:
                self._cache[name] = path.read_text(encoding="utf-8").strip()
                logger.info(f"Loaded prompt from file: {name}")
            except FileNotFoundError:
                logger.warning(f"Prompt file not found: {path}")
                return default
        return self._cache[name]

    def clear(self, name: str = None):
        """Clear one cached prompt, or all of them"""
        if name:
            self._cache.pop(name, None)
            logger.info(f"Cleared prompt cache for: {name}")
        else:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared entire prompt cache ({count} entries)")

    @property
    def cached_count(self) -> int:
        """Number of cached prompts"""
        return len(self._cache)
