"""Serialization of the cache container to and from the blob store.

The container is stored as one JSON document. JSON has no time type, so
every datetime (container, entries and anything nested inside artifacts) is
written as a tagged object:

    {"__type": "datetime", "value": "2024-05-01T12:00:00.123456+00:00"}

and turned back into a datetime on decode, so timestamps round-trip exactly.

Decoding never raises: a missing, unparseable or structurally malformed blob
yields the default (empty) container.
"""

import json
import logging
from datetime import datetime
from typing import Any

from autofill_cache.config import MIN_TTL_MS, settings
from autofill_cache.entities import CacheContainer, CacheEntry, estimate_size
from autofill_cache.errors import ConfigurationError, CorruptDataError
from autofill_cache.utils.clock import Clock, utc_now

_logger = logging.getLogger(__name__)

TYPE_TAG = "__type"
DATETIME_TAG = "datetime"


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {TYPE_TAG: DATETIME_TAG, "value": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_object(obj: dict[str, Any]) -> Any:
    if obj.get(TYPE_TAG) == DATETIME_TAG and isinstance(obj.get("value"), str) and len(obj) == 2:
        return datetime.fromisoformat(obj["value"])
    return obj


def _require(raw: dict[str, Any], name: str, kind: type | tuple[type, ...]) -> Any:
    value = raw.get(name)
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise CorruptDataError(f"field {name!r} has invalid value {value!r}")
    if kind is datetime and value.utcoffset() is None:
        raise CorruptDataError(f"field {name!r} has no UTC offset")
    return value


class ContainerCodec:
    """Encodes/decodes a CacheContainer as UTF-8 JSON bytes.

    Example:
        ```python
        codec = ContainerCodec()
        blob = codec.encode(container)
        assert codec.decode(blob) == container
        ```
    """

    def __init__(
        self,
        max_entries: int | None = None,
        ttl_ms: int | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the codec.

        Args:
            max_entries: Bound of the default container. Defaults to settings.
            ttl_ms: TTL of the default container. Defaults to settings.
            clock: Time source for the default container's last_cleanup_at.
        """
        self._max_entries = settings.cache_max_entries if max_entries is None else max_entries
        self._ttl_ms = settings.cache_ttl_ms if ttl_ms is None else ttl_ms
        self._clock = clock

    def default_container(self) -> CacheContainer:
        """Build the empty container used when nothing valid is persisted."""
        return CacheContainer(
            max_entries=self._max_entries,
            ttl_ms=self._ttl_ms,
            last_cleanup_at=self._clock(),
        )

    @staticmethod
    def check_artifact(artifact: Any) -> None:
        """Make sure an artifact can be stored.

        Raises:
            ConfigurationError: If the artifact is not JSON-serializable
        """
        try:
            json.dumps(artifact, default=_encode_value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Artifact cannot be serialized: {e}") from e

    def encode(self, container: CacheContainer) -> bytes:
        """Serialize a container to bytes."""
        payload = {
            "entries": {
                key: {
                    "artifact": entry.artifact,
                    "source_url": entry.source_url,
                    "created_at": entry.created_at,
                    "last_accessed_at": entry.last_accessed_at,
                    "hit_count": entry.hit_count,
                    "priority": entry.priority,
                    "size_estimate": entry.size_estimate,
                }
                for key, entry in container.entries.items()
            },
            "max_entries": container.max_entries,
            "ttl_ms": container.ttl_ms,
            "total_hits": container.total_hits,
            "last_cleanup_at": container.last_cleanup_at,
        }
        return json.dumps(payload, default=_encode_value, ensure_ascii=False).encode("utf-8")

    def decode(self, data: bytes | str | None) -> CacheContainer:
        """Deserialize bytes into a container.

        Args:
            data: The stored blob, or None if nothing is stored

        Returns:
            The decoded container, or the default container if `data` is
            missing or corrupt
        """
        if data is None:
            return self.default_container()
        try:
            return self._decode(data)
        except CorruptDataError as e:
            _logger.warning("Failed to deserialize cache container, using default: %s", e)
            return self.default_container()

    def _decode(self, data: bytes | str) -> CacheContainer:
        try:
            text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
            parsed = json.loads(text, object_hook=_decode_object)
        except (UnicodeDecodeError, ValueError) as e:
            raise CorruptDataError(f"unparseable blob: {e}") from e

        if not isinstance(parsed, dict):
            raise CorruptDataError(f"expected a JSON object, got {type(parsed).__name__}")

        default = self.default_container()
        raw_entries = parsed.get("entries", {})
        if not isinstance(raw_entries, dict):
            raise CorruptDataError("'entries' is not an object")

        parsed.setdefault("max_entries", default.max_entries)
        parsed.setdefault("ttl_ms", default.ttl_ms)
        parsed.setdefault("total_hits", default.total_hits)
        parsed.setdefault("last_cleanup_at", default.last_cleanup_at)

        max_entries = _require(parsed, "max_entries", int)
        ttl_ms = _require(parsed, "ttl_ms", int)
        total_hits = _require(parsed, "total_hits", int)
        if max_entries < 1 or ttl_ms < MIN_TTL_MS or total_hits < 0:
            raise CorruptDataError("container bounds out of range")

        return CacheContainer(
            entries={key: self._decode_entry(key, raw) for key, raw in raw_entries.items()},
            max_entries=max_entries,
            ttl_ms=ttl_ms,
            total_hits=total_hits,
            last_cleanup_at=_require(parsed, "last_cleanup_at", datetime),
        )

    @staticmethod
    def _decode_entry(key: str, raw: Any) -> CacheEntry:
        if not isinstance(raw, dict) or "artifact" not in raw:
            raise CorruptDataError(f"entry {key!r} is malformed")

        hit_count = _require(raw, "hit_count", int)
        priority = _require(raw, "priority", int)
        if hit_count < 0 or not 0 <= priority <= 100:
            raise CorruptDataError(f"entry {key!r} counters out of range")

        size_estimate = raw.get("size_estimate")
        if size_estimate is None:
            size_estimate = estimate_size(raw["artifact"])

        return CacheEntry(
            key=key,
            artifact=raw["artifact"],
            source_url=_require(raw, "source_url", str),
            created_at=_require(raw, "created_at", datetime),
            last_accessed_at=_require(raw, "last_accessed_at", datetime),
            hit_count=hit_count,
            priority=priority,
            size_estimate=_require({"size_estimate": size_estimate}, "size_estimate", int),
        )
