"""
Loader contract and registry.

A loader turns raw document text into the ordered ContentElements the
graph builder consumes. Loaders self-register by name and file suffix.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from docgraph.core.elements import ContentElement


class LoaderError(Exception):
    """A document could not be read or classified."""

    def __init__(self, message: str, source_path: Path | None = None, details: str | None = None):
        self.source_path = source_path
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "source_path": str(self.source_path) if self.source_path else None,
            "details": self.details,
        }


def read_source(path: Path) -> str:
    """Read a UTF-8 source file.

    Raises:
        LoaderError: If the file is missing or cannot be decoded.
    """
    if not path.exists():
        raise LoaderError(f"File not found: {path}", source_path=path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoaderError(f"Failed to read {path.name}: {e}", source_path=path, details=str(e)) from e


class BaseLoader(ABC):
    """
    Abstract element loader.

    Subclasses set ``LOADER_NAME`` and ``SUPPORTED_EXTENSIONS`` and
    implement ``parse``. Messages about the last parse are exposed
    through ``warnings`` and ``info``.
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = []
    LOADER_NAME: ClassVar[str] = "base"

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {"warning": [], "info": []}

    @classmethod
    def can_load(cls, path: Path) -> bool:
        return path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def parse(self, text: str) -> list[ContentElement]:
        """
        Classify document text into elements.

        Args:
            text: Full document text

        Returns:
            Elements in document order, offsets relative to ``text``
        """

    def load(self, path: Path) -> tuple[str, list[ContentElement]]:
        """
        Read a file and classify it.

        Returns:
            Tuple of (source text, elements)

        Raises:
            LoaderError: If the file is unsupported or unreadable
        """
        if not self.can_load(path):
            raise LoaderError(
                f"{self.LOADER_NAME} loader cannot read {path.suffix or 'files without a suffix'}",
                source_path=path,
                details=f"Supported types: {', '.join(self.SUPPORTED_EXTENSIONS)}",
            )
        text = read_source(path)
        return text, self.parse(text)

    @property
    def warnings(self) -> list[str]:
        return self._messages["warning"]

    @property
    def info(self) -> list[str]:
        return self._messages["info"]

    def _add_warning(self, warning: str) -> None:
        self._messages["warning"].append(warning)

    def _add_info(self, info: str) -> None:
        self._messages["info"].append(info)

    def _reset_messages(self) -> None:
        # Rebind rather than clear: copies made for worker threads share the old lists
        self._messages = {"warning": [], "info": []}


class LoaderRegistry:
    """
    Name- and suffix-indexed loader classes.

    Use ``@LoaderRegistry.register`` on a BaseLoader subclass. A later
    registration under the same name replaces the earlier one.
    """

    _by_name: ClassVar[dict[str, type[BaseLoader]]] = {}

    @classmethod
    def register(cls, loader_class: type[BaseLoader]) -> type[BaseLoader]:
        if not loader_class.SUPPORTED_EXTENSIONS:
            raise ValueError(f"{loader_class.__name__} declares no supported extensions")
        cls._by_name[loader_class.LOADER_NAME] = loader_class
        return loader_class

    @classmethod
    def get_loader(cls, path: Path) -> BaseLoader | None:
        """A fresh loader for ``path``'s suffix, or None if none handles it."""
        loader_class = next((lc for lc in cls._by_name.values() if lc.can_load(path)), None)
        return loader_class() if loader_class is not None else None

    @classmethod
    def get_loader_by_name(cls, name: str) -> type[BaseLoader] | None:
        return cls._by_name.get(name)

    @classmethod
    def supported_extensions(cls) -> list[str]:
        return sorted({ext for lc in cls._by_name.values() for ext in lc.SUPPORTED_EXTENSIONS})

    @classmethod
    def require_loader(cls, path: Path) -> BaseLoader:
        """Like ``get_loader`` but raises LoaderError for unknown suffixes."""
        loader = cls.get_loader(path)
        if loader is None:
            raise LoaderError(
                f"No loader available for file type: {path.suffix}",
                source_path=path,
                details=f"Supported types: {', '.join(cls.supported_extensions())}",
            )
        return loader

    @classmethod
    def load(cls, path: Path) -> tuple[str, list[ContentElement]]:
        """
        Load a file with the loader registered for its suffix.

        Raises:
            LoaderError: If no loader is available or loading fails
        """
        return cls.require_loader(path).load(path)
