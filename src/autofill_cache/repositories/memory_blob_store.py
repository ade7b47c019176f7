"""In-memory implementation of BlobStore."""


class InMemoryBlobStore:
    """Dict-backed blob store for dev/test and single-process use.

    Satisfies the BlobStore protocol through structural typing. Contents are
    lost when the process exits.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = dict(initial or {})
        self.writes = 0

    async def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)
        self.writes += 1

    async def is_healthy(self) -> bool:
        return True
