"""
Filesystem-backed object store.

Each bucket is a directory under a storage root; keys are "/"-separated paths
relative to it.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable

from src.core.errors import NotFoundError, StorageError
from src.storage.base import ObjectStore
from src.utils.validation import ValidationError, validate_bucket_name

# Name prefix of in-flight write files; reserved, so no key segment may use it
TEMP_PREFIX = ".~put-"


class LocalObjectStore(ObjectStore):
    """
    Object store keeping each object as a file below ``root``.

    Each write lands in its own uniquely named temp file beside the target
    and is moved into place with ``os.replace``.
    Content types are accepted for interface parity but not persisted.
    """

    def __init__(
        self,
        root: str | Path,
        excluded_prefixes: Iterable[str] | None = None,
        page_size: int = 1000,
        create: bool = True,
    ):
        """
        Initialize local object store.

        Args:
            root: Bucket directory
            excluded_prefixes: Key prefixes never returned by list()
            page_size: Keys per listing page
            create: Create the bucket directory if missing
        """
        super().__init__(excluded_prefixes=excluded_prefixes, page_size=page_size)
        self.root = Path(root)
        if create:
            self.root.mkdir(parents=True, exist_ok=True)
        elif not self.root.is_dir():
            raise StorageError(str(self.root), "bucket directory does not exist")

    def _path(self, location: str) -> Path:
        segments = self._check_key(location).split("/")
        if any(segment.startswith(TEMP_PREFIX) for segment in segments):
            raise StorageError(location, f"key segments may not start with {TEMP_PREFIX!r}")
        return self.root.joinpath(*segments)

    def get(self, location: str) -> bytes:
        path = self._path(location)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError(location)
        except OSError as e:
            raise StorageError(location, str(e)) from e

    def put(self, location: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        path = self._path(location)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=path.parent, prefix=TEMP_PREFIX, delete=False) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(location, str(e)) from e

    def delete(self, location: str) -> None:
        path = self._path(location)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError(location)
        except OSError as e:
            raise StorageError(location, str(e)) from e

    def list_page(self, prefix: str, page_token: str | None = None) -> tuple[list[str], str | None]:
        try:
            keys = sorted(
                p.relative_to(self.root).as_posix()
                for p in self.root.rglob("*")
                if p.is_file() and not p.name.startswith(TEMP_PREFIX)
            )
        except OSError as e:
            raise StorageError(prefix or "/", str(e)) from e

        keys = [k for k in keys if k.startswith(prefix)]
        start = int(page_token) if page_token else 0
        end = start + self.page_size
        next_token = str(end) if end < len(keys) else None
        return keys[start:end], next_token


def open_bucket(storage_root: str | Path, bucket: str, excluded_prefixes: Iterable[str] | None = None) -> LocalObjectStore:
    """Open (creating if needed) the bucket directory ``<storage_root>/<bucket>``."""
    try:
        validate_bucket_name(bucket)
    except ValidationError as e:
        raise StorageError(bucket, str(e)) from e
    return LocalObjectStore(Path(storage_root) / bucket, excluded_prefixes=excluded_prefixes)
