"""Classpath roots: directories and jar/zip archives."""

import logging
import os
import zipfile
import zlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Set, Union

from ..core.exceptions import ArchiveReadError


logger = logging.getLogger(__name__)


@dataclass
class ClasspathResource:
    """An open resource found in a classpath root."""
    root: Path
    path: str
    stream: BinaryIO

    @property
    def location(self) -> str:
        return f"{self.root}!/{self.path}"

    def read(self) -> bytes:
        """Read the whole resource.

        Raises:
            ArchiveReadError: if the content cannot be read or inflated.
        """
        try:
            return self.stream.read()
        except (zipfile.BadZipFile, zlib.error, OSError) as e:
            raise ArchiveReadError(f"Cannot read {self.location}: {e}", path=str(self.root)) from e


class ClasspathRoot(ABC):
    """Base class for a single classpath element."""

    def __init__(self, path: Path):
        self.path = path

    @abstractmethod
    def open_resource(self, *candidates: str) -> Iterator[Optional[ClasspathResource]]:
        """Open the first of ``candidates`` present in this root.

        Used as a context manager; yields ``None`` when no candidate exists.
        """
        pass

    @abstractmethod
    def contains(self, resource_path: str) -> bool:
        """Check whether the root holds ``resource_path``."""
        pass

    @staticmethod
    def for_path(path: Union[str, Path]) -> Optional["ClasspathRoot"]:
        """Create the root matching what lives at ``path``.

        Returns ``None`` for paths that do not exist.
        """
        path = Path(path)
        if path.is_dir():
            return DirectoryRoot(path)
        if path.is_file():
            return ArchiveRoot(path)
        logger.debug(f"Skipping missing classpath element: {path}")
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"


class DirectoryRoot(ClasspathRoot):
    """An exploded directory on the classpath (e.g. ``target/classes``)."""

    def _readable(self, resource_path: str) -> Optional[Path]:
        candidate = self.path / resource_path
        if candidate.is_file() and os.access(candidate, os.R_OK):
            return candidate
        return None

    def contains(self, resource_path: str) -> bool:
        return self._readable(resource_path) is not None

    @contextmanager
    def open_resource(self, *candidates: str) -> Iterator[Optional[ClasspathResource]]:
        for resource_path in candidates:
            local = self._readable(resource_path)
            if local is not None:
                with open(local, 'rb') as stream:
                    yield ClasspathResource(root=self.path, path=resource_path, stream=stream)
                return
        yield None


class ArchiveRoot(ClasspathRoot):
    """A jar or zip archive on the classpath.

    Archives are opened for the duration of a single lookup. A corrupt
    archive raises :class:`ArchiveReadError`.
    """

    def _open_archive(self) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveReadError(f"Cannot read archive {self.path}: {e}", path=str(self.path)) from e

    def contains(self, resource_path: str) -> bool:
        with self._open_archive() as archive:
            return _has_entry(archive, resource_path)

    def entry_names(self) -> Set[str]:
        """Names of all entries in the archive."""
        with self._open_archive() as archive:
            return set(archive.namelist())

    @contextmanager
    def open_resource(self, *candidates: str) -> Iterator[Optional[ClasspathResource]]:
        with self._open_archive() as archive:
            for resource_path in candidates:
                if not _has_entry(archive, resource_path):
                    continue
                try:
                    stream = archive.open(resource_path)
                except (zipfile.BadZipFile, zlib.error, OSError) as e:
                    raise ArchiveReadError(
                        f"Cannot read {resource_path} from archive {self.path}: {e}",
                        path=str(self.path)
                    ) from e
                with stream:
                    yield ClasspathResource(root=self.path, path=resource_path, stream=stream)
                return
            yield None


def _has_entry(archive: zipfile.ZipFile, resource_path: str) -> bool:
    try:
        archive.getinfo(resource_path)
    except KeyError:
        return False
    return True
