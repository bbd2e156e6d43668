"""
Object store interface.

The pipeline talks to storage through this small contract: fetch, persist,
delete and list objects addressed by key inside one bucket. Listing is paged
by the backend but exposed to callers as one uninterrupted iteration.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator

from src.core.errors import NotFoundError, StorageError
from src.utils.validation import ValidationError, validate_object_key, validate_prefix


class ObjectStore(ABC):
    """
    Abstract base class for object stores.

    Subclasses implement the single-page primitives; ``list`` walks every page
    and hides keys under the excluded prefixes (the invalid-partition
    namespace).
    """

    def __init__(self, excluded_prefixes: Iterable[str] | None = None, page_size: int = 1000):
        """
        Initialize object store.

        Args:
            excluded_prefixes: Key prefixes never returned by list()
            page_size: Maximum number of keys returned per backend page
        """
        if page_size <= 0:
            raise ValueError("page_size must be a positive integer")
        self.excluded_prefixes = tuple(p for p in (excluded_prefixes or ()) if p)
        self.page_size = page_size

    @abstractmethod
    def get(self, location: str) -> bytes:
        """
        Fetch the content stored at ``location``.

        Raises:
            NotFoundError: If nothing is stored there
            StorageError: On any other backend failure
        """
        pass

    @abstractmethod
    def put(self, location: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """Persist ``data`` at ``location``, overwriting prior content."""
        pass

    @abstractmethod
    def delete(self, location: str) -> None:
        """
        Remove the object at ``location``.

        Raises:
            NotFoundError: If nothing is stored there
        """
        pass

    @abstractmethod
    def list_page(self, prefix: str, page_token: str | None = None) -> tuple[list[str], str | None]:
        """
        Return one page of keys under ``prefix`` and the token of the next page.

        The next-page token is None on the last page.
        """
        pass

    def exists(self, location: str) -> bool:
        try:
            self.get(location)
        except NotFoundError:
            return False
        return True

    def list(self, prefix: str = "") -> Iterator[str]:
        """
        Enumerate every key under ``prefix`` across all pages.

        Keys under an excluded prefix are skipped.
        """
        prefix = self._check_prefix(prefix)
        page_token = None
        while True:
            keys, page_token = self.list_page(prefix, page_token)
            for key in keys:
                if not self.is_excluded(key):
                    yield key
            if page_token is None:
                return

    def is_excluded(self, key: str) -> bool:
        return any(key.startswith(p) for p in self.excluded_prefixes)

    def _check_key(self, location: str) -> str:
        try:
            return validate_object_key(location, "location")
        except ValidationError as e:
            raise StorageError(str(location), str(e)) from e

    def _check_prefix(self, prefix: str) -> str:
        try:
            return validate_prefix(prefix)
        except ValidationError as e:
            raise StorageError(str(prefix), str(e)) from e
