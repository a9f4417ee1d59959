# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Filesystem-backed include resolution.

The parser never touches the filesystem; it asks a resolver for the text of
each included file. :class:`FileSystemResolver` is the resolver used by the
command-line tools. An include path is looked up, in order:

1. as given, when it is absolute;
2. next to the including file;
3. in the project root;
4. in each configured include directory.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

# ###############
# Public Interface
# ###############


class IncludeNotFoundError(FileNotFoundError):
    """Raised when no candidate location holds the included file.

    Attributes:
        path: The include path as written in the source.
        candidates: Every location that was tried.
    """

    def __init__(self, path: str, candidates: list[Path]) -> None:
        tried = ", ".join(str(c) for c in candidates)
        super().__init__(f"Cannot resolve include '{path}' (tried: {tried})")
        self.path = path
        self.candidates = candidates


class FileSystemResolver:
    """Resolve include paths to file contents on the local filesystem.

    Instances are callables matching :data:`sadl.parser.FileResolver`.
    """

    def __init__(self, root: Path, include_paths: Sequence[Path] = ()) -> None:
        self._root = root
        self._include_paths = list(include_paths)

    def __call__(self, path: str, from_path: str | None = None) -> str:
        """Return the text of the file *path* included from *from_path*.

        Raises:
            IncludeNotFoundError: If no candidate location exists.
        """
        candidates = self.candidates(path, from_path)
        for candidate in candidates:
            if candidate.is_file():
                return candidate.read_text(encoding="utf-8")
        raise IncludeNotFoundError(path, candidates)

    def candidates(self, path: str, from_path: str | None = None) -> list[Path]:
        """Return the locations tried for *path*, in lookup order, without duplicates."""
        include = Path(path)
        if include.is_absolute():
            return [include]

        bases: list[Path] = []
        if from_path is not None:
            including = Path(from_path)
            if not including.is_absolute():
                including = self._root / including
            bases.append(including.parent)
        bases.append(self._root)
        bases.extend(self._include_paths)

        result: list[Path] = []
        for base in bases:
            candidate = base / include
            if candidate not in result:
                result.append(candidate)
        return result
