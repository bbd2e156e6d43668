"""
In-memory object store for tests and dry runs.
"""

from typing import Iterable

from src.core.errors import NotFoundError
from src.storage.base import ObjectStore


class InMemoryObjectStore(ObjectStore):
    """
    Dict-backed object store with deterministic, sorted, paged listing.
    """

    def __init__(
        self,
        objects: dict[str, bytes] | None = None,
        excluded_prefixes: Iterable[str] | None = None,
        page_size: int = 1000,
    ):
        super().__init__(excluded_prefixes=excluded_prefixes, page_size=page_size)
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        for key, data in (objects or {}).items():
            self.put(key, data)

    def get(self, location: str) -> bytes:
        location = self._check_key(location)
        if location not in self.objects:
            raise NotFoundError(location)
        return self.objects[location]

    def put(self, location: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        location = self._check_key(location)
        self.objects[location] = bytes(data)
        self.content_types[location] = content_type

    def delete(self, location: str) -> None:
        location = self._check_key(location)
        if location not in self.objects:
            raise NotFoundError(location)
        del self.objects[location]
        self.content_types.pop(location, None)

    def list_page(self, prefix: str, page_token: str | None = None) -> tuple[list[str], str | None]:
        keys = sorted(k for k in self.objects if k.startswith(prefix))
        start = int(page_token) if page_token else 0
        end = start + self.page_size
        next_token = str(end) if end < len(keys) else None
        return keys[start:end], next_token
