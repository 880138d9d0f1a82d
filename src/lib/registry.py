"""
Template registries

A registry maps a document identifier (root-relative, forward-slash path)
to the document's raw text. Two backings satisfy the same contract:

- FileSystemRegistry: reads the file on every fetch, so edits show up on
  the next request without any cache invalidation
- EmbeddedRegistry: looks up an immutable table built at compile time

Both are read-only after construction and can be shared by concurrent
renders without locking.
"""

import os
import posixpath
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping

from .errors import TemplateNotFound, TemplateReadError
from .log import LOG


def identifier_normalize(raw: str) -> str:
    """
    Normalize a document reference to a registry identifier

    Args:
        raw: Path as written in an include or derived from a URL

    Returns:
        Forward-slash path relative to the registry root

    Raises:
        TemplateNotFound: If the path is empty or escapes the root

    Example:
        >>> identifier_normalize("/partials/../header.html")
        'header.html'
        >>> identifier_normalize("./blog\\\\post.html")
        'blog/post.html'
    """
    path = raw.replace("\\", "/").lstrip("/")
    if not path:
        raise TemplateNotFound(raw)

    normalized = posixpath.normpath(path)
    if normalized in (".", "..") or normalized.startswith("../"):
        raise TemplateNotFound(raw)
    return normalized


class TemplateRegistry(ABC):
    """Document identifier -> raw content"""

    @abstractmethod
    def fetch(self, identifier: str) -> str:
        """
        Return the raw content of a document

        Raises:
            TemplateNotFound: Identifier is not in the registry
            TemplateReadError: Backing storage failed
        """

    @abstractmethod
    def identifiers(self) -> List[str]:
        """Sorted list of every identifier this registry can serve"""

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str):
            return False
        try:
            self.fetch(identifier)
        except TemplateNotFound:
            return False
        return True


class FileSystemRegistry(TemplateRegistry):
    """
    Registry backed by files under a root directory

    Content is decoded as UTF-8 without newline translation so a
    filesystem render and an embedded render of the same file match byte
    for byte.
    """

    def __init__(self, root: Path, extension: str = ".html") -> None:
        """
        Args:
            root: Directory documents are resolved against
            extension: Extension of document files, used by snapshot()
        """
        self.root = Path(root)
        self.extension = extension

    def fetch(self, identifier: str) -> str:
        key = identifier_normalize(identifier)
        path = self.root / key
        try:
            return path.read_bytes().decode("utf-8")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            raise TemplateNotFound(key)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadError(key, e)

    def identifiers(self) -> List[str]:
        return sorted(self.snapshot())

    def snapshot(self) -> Dict[str, str]:
        """
        Read every document under the root into a dict

        Walks the root recursively and keeps files carrying the configured
        extension, keyed by their root-relative, slash-normalized path.

        Returns:
            Identifier -> content, in sorted identifier order

        Raises:
            FileNotFoundError: If the root directory does not exist
            TemplateReadError: If a document cannot be read
        """
        if not self.root.is_dir():
            raise FileNotFoundError(f"root directory not found: {self.root}")

        templates: Dict[str, str] = {}
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            for filename in sorted(filenames):
                if not filename.endswith(self.extension):
                    continue
                relpath = Path(dirpath, filename).relative_to(self.root).as_posix()
                templates[relpath] = self.fetch(relpath)
                LOG(f"Added template: {relpath}", level=2)

        return dict(sorted(templates.items()))


class EmbeddedRegistry(TemplateRegistry):
    """Registry backed by a fixed table, as baked into compiled programs"""

    def __init__(self, templates: Mapping[str, str]) -> None:
        self.templates: Mapping[str, str] = MappingProxyType(dict(templates))

    def fetch(self, identifier: str) -> str:
        key = identifier_normalize(identifier)
        try:
            return self.templates[key]
        except KeyError:
            raise TemplateNotFound(key)

    def identifiers(self) -> List[str]:
        return sorted(self.templates)
