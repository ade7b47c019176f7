"""Cache key generation.

Keys are short fingerprints of page content plus an optional identity (for
example a hash of the user profile). The default algorithm is a 32-bit
rolling string hash rendered in base 36. It is fast and compact but has no
collision resolution: two different pages may map to the same key. The
"sha256" algorithm trades key length for practically collision-free keys.
"""

import hashlib

from autofill_cache.errors import ConfigurationError

ALGORITHMS = ("rolling", "sha256")

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_SHA256_KEY_LENGTH = 16


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return "".join(reversed(digits))


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_string(text: str) -> str:
    """Rolling 32-bit hash of `text` in base 36.

    Characters are consumed as UTF-16 code units; the accumulator is
    multiplied by 31 and truncated to a signed 32-bit integer at each step.

    Args:
        text: The string to hash

    Returns:
        Base-36 rendering of the absolute hash value ("0" for empty input)
    """
    encoded = text.encode("utf-16-le")
    acc = 0
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        acc = _to_int32((acc << 5) - acc + code)
    return _to_base36(abs(acc))


def sha256_string(text: str) -> str:
    """Truncated SHA-256 hex digest of `text`."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:_SHA256_KEY_LENGTH]


class KeyGenerator:
    """Derives deterministic cache keys from content and optional identity.

    Example:
        ```python
        keys = KeyGenerator()
        key = keys.generate(sanitized_html, identity=profile_hash)
        ```
    """

    def __init__(self, algorithm: str = "rolling") -> None:
        """Initialize the key generator.

        Args:
            algorithm: "rolling" (default) or "sha256".

        Raises:
            ConfigurationError: If the algorithm is unknown
        """
        if algorithm not in ALGORITHMS:
            raise ConfigurationError(
                f"Unknown key algorithm {algorithm!r}, expected one of {ALGORITHMS}"
            )
        self._algorithm = algorithm
        self._hash = hash_string if algorithm == "rolling" else sha256_string

    @property
    def algorithm(self) -> str:
        """Get the configured hash algorithm."""
        return self._algorithm

    def generate(self, content: str, identity: str | None = None) -> str:
        """Generate the cache key for `content` and an optional identity.

        Args:
            content: Raw content, e.g. sanitized HTML
            identity: Optional secondary identity, e.g. a user profile hash

        Returns:
            The content hash, joined with the identity hash when given
        """
        key = self._hash(content)
        if identity is not None:
            key = f"{key}_{self._hash(identity)}"
        return key
