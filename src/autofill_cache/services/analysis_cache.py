"""Analysis cache service.

Producer-side facade used by the form analysis flow: it turns page content
into cache keys, judges how valuable an analysis is worth keeping (the
priority handed to the cache), trims bulky reasoning text before storage and
skips pages too large to be worth caching.
"""

import logging
from typing import Any

from autofill_cache.config import settings
from autofill_cache.entities import CacheEntry
from autofill_cache.utils.keys import KeyGenerator

from .cache_store import CacheStore

_logger = logging.getLogger(__name__)

JOB_URL_KEYWORDS = ("apply", "application", "job", "career", "position")

BASE_PRIORITY = 50
REASONING_LIMIT = 200
INSTRUCTION_REASONING_LIMIT = 100


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def calculate_priority(
    url: str,
    complexity: str | None = None,
    confidence: float | None = None,
    has_file_uploads: bool = False,
) -> int:
    """Estimate how valuable a cached analysis is.

    Args:
        url: Page URL; job-application-like URLs rank higher
        complexity: Estimated form complexity ("low", "medium", "high")
        confidence: Analysis confidence in percent (0-100)
        has_file_uploads: Whether the form has file inputs

    Returns:
        Priority clamped to [0, 100]
    """
    priority = BASE_PRIORITY

    lowered = url.lower()
    if any(keyword in lowered for keyword in JOB_URL_KEYWORDS):
        priority += 20

    if complexity == "high":
        priority += 15
    elif complexity == "medium":
        priority += 10

    if confidence is not None:
        if confidence > 80:
            priority += 10
        elif confidence < 50:
            priority -= 10

    if has_file_uploads:
        priority += 5

    return max(0, min(100, priority))


def compact_analysis(analysis: Any) -> Any:
    """Shorten reasoning text in an analysis before it is cached.

    Only dict analyses with string `reasoning` fields are changed; anything
    else is returned as is.
    """
    if not isinstance(analysis, dict):
        return analysis

    compacted = dict(analysis)
    if isinstance(compacted.get("reasoning"), str):
        compacted["reasoning"] = _truncate(compacted["reasoning"], REASONING_LIMIT)

    instructions = compacted.get("instructions")
    if isinstance(instructions, list):
        compacted["instructions"] = [
            {**item, "reasoning": _truncate(item["reasoning"], INSTRUCTION_REASONING_LIMIT)}
            if isinstance(item, dict) and isinstance(item.get("reasoning"), str)
            else item
            for item in instructions
        ]
    return compacted


class AnalysisCacheService:
    """Caches form analyses keyed by page content.

    Example:
        ```python
        service = AnalysisCacheService.create(cache_store=cache)

        analysis = await service.get_cached_analysis(html, url, profile_hash)
        if analysis is None:
            analysis = await analyze_with_llm(html)
            await service.set_cached_analysis(html, url, analysis, complexity="high")
        ```
    """

    def __init__(
        self,
        cache_store: CacheStore,
        key_generator: KeyGenerator,
        max_content_size: int | None = None,
        compress: bool = True,
    ) -> None:
        """Initialize the analysis cache service.

        Args:
            cache_store: The cache to read from and write to (required).
            key_generator: Key derivation (required).
            max_content_size: Content longer than this is never cached. Defaults to settings.
            compress: Trim reasoning text before caching.
        """
        self._cache = cache_store
        self._keys = key_generator
        self._max_content_size = (
            settings.cache_max_content_size if max_content_size is None else max_content_size
        )
        self._compress = compress

    @classmethod
    def create(
        cls,
        cache_store: CacheStore,
        key_generator: KeyGenerator | None = None,
        max_content_size: int | None = None,
    ) -> "AnalysisCacheService":
        """Factory method with the configured key algorithm.

        Args:
            cache_store: The cache to use (required).
            key_generator: Key derivation. If None, uses settings.
            max_content_size: Content size limit. If None, uses settings.

        Returns:
            Configured AnalysisCacheService
        """
        return cls(
            cache_store=cache_store,
            key_generator=key_generator or KeyGenerator(settings.cache_key_algorithm),
            max_content_size=max_content_size,
        )

    def cache_key(self, content: str, url: str, profile_hash: str | None = None) -> str:
        """Key for a page's content, its URL and an optional user profile."""
        return self._keys.generate(f"{content}:{url}", identity=profile_hash or "default")

    async def is_cached(self, content: str, url: str, profile_hash: str | None = None) -> bool:
        return await self._cache.contains(self.cache_key(content, url, profile_hash))

    async def get_cached_analysis(self, content: str, url: str, profile_hash: str | None = None) -> Any | None:
        """Cached analysis for a page, or None on a miss."""
        return await self._cache.get(self.cache_key(content, url, profile_hash))

    async def set_cached_analysis(
        self,
        content: str,
        url: str,
        analysis: Any,
        profile_hash: str | None = None,
        complexity: str | None = None,
        has_file_uploads: bool = False,
    ) -> str | None:
        """Cache an analysis for a page.

        Args:
            content: Sanitized page content the analysis was produced from
            url: Page URL
            analysis: The analysis to cache
            profile_hash: Optional user profile hash
            complexity: Estimated form complexity
            has_file_uploads: Whether the form has file inputs

        Returns:
            The cache key, or None if the analysis was not cached
        """
        if len(content) > self._max_content_size:
            _logger.warning(
                "Content too large for caching (%d > %d chars), skipping",
                len(content),
                self._max_content_size,
            )
            return None

        confidence = analysis.get("confidence") if isinstance(analysis, dict) else None
        if not isinstance(confidence, (int, float)) or isinstance(confidence, bool):
            confidence = None

        priority = calculate_priority(url, complexity, confidence, has_file_uploads)
        artifact = compact_analysis(analysis) if self._compress else analysis

        key = self.cache_key(content, url, profile_hash)
        if not await self._cache.set(key, artifact, source_url=url, priority=priority):
            return None
        return key

    async def find_by_url(self, pattern: str) -> list[CacheEntry]:
        return await self._cache.find_by_url(pattern)

    @property
    def cache_store(self) -> CacheStore:
        """Get the underlying cache store (for testing)."""
        return self._cache
