# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Local-disk implementation of the file-system collaborator."""

from __future__ import annotations

import json
import shutil
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..core.errors import FileSystemError
from ..core.models import DEFAULT_ENCODING

_JSON_INDENT: Final[int] = 2


@runtime_checkable
class FileSystem(Protocol):
    """Operations the reporting pipeline performs against storage."""

    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path, encoding: str = DEFAULT_ENCODING) -> str: ...

    def write_text(self, path: Path, content: str, *, atomic: bool = True, ensure_dir: bool = True) -> int: ...

    def write_json(
        self,
        path: Path,
        payload: Mapping[str, object] | Sequence[object],
        *,
        atomic: bool = True,
        ensure_dir: bool = True,
    ) -> int: ...

    def ensure_dir(self, path: Path) -> None: ...

    def remove_dir(self, path: Path) -> None: ...

    def read_dir(self, path: Path) -> list[Path]: ...

    def resolve_path(self, *parts: str | Path) -> Path: ...


class LocalFileSystem:
    """File-system collaborator backed by :mod:`pathlib`.

    Every failure surfaces as :class:`FileSystemError` naming the path.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root or Path.cwd()

    @property
    def root(self) -> Path:
        """Return the directory relative paths are resolved against."""

        return self._root

    def exists(self, path: Path) -> bool:
        return self.resolve_path(path).exists()

    def read_text(self, path: Path, encoding: str = DEFAULT_ENCODING) -> str:
        target = self.resolve_path(path)
        try:
            return target.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise FileSystemError(f"Failed to read {target}: {exc}", path=str(target), cause=exc) from exc

    def write_text(self, path: Path, content: str, *, atomic: bool = True, ensure_dir: bool = True) -> int:
        """Write ``content`` to ``path`` and return the number of bytes written.

        Args:
            path: Destination file.
            content: Text written as UTF-8.
            atomic: Write through a temporary sibling file renamed into place.
            ensure_dir: Create missing parent directories first.

        Returns:
            int: Number of encoded bytes written.

        Raises:
            FileSystemError: If the file cannot be written.
        """

        target = self.resolve_path(path)
        data = content.encode(DEFAULT_ENCODING)
        try:
            if ensure_dir:
                target.parent.mkdir(parents=True, exist_ok=True)
            if atomic:
                _atomic_write_bytes(target, data)
            else:
                target.write_bytes(data)
        except OSError as exc:
            raise FileSystemError(f"Failed to write {target}: {exc}", path=str(target), cause=exc) from exc
        return len(data)

    def write_json(
        self,
        path: Path,
        payload: Mapping[str, object] | Sequence[object],
        *,
        atomic: bool = True,
        ensure_dir: bool = True,
    ) -> int:
        try:
            content = json.dumps(payload, indent=_JSON_INDENT, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise FileSystemError(
                f"Payload for {path} is not JSON serialisable: {exc}",
                path=str(path),
                cause=exc,
            ) from exc
        return self.write_text(path, content, atomic=atomic, ensure_dir=ensure_dir)

    def ensure_dir(self, path: Path) -> None:
        target = self.resolve_path(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f"Failed to create directory {target}: {exc}", path=str(target), cause=exc) from exc

    def remove_dir(self, path: Path) -> None:
        """Remove ``path`` recursively; a missing directory is not an error."""

        target = self.resolve_path(path)
        if not target.exists():
            return
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise FileSystemError(f"Failed to remove directory {target}: {exc}", path=str(target), cause=exc) from exc

    def read_dir(self, path: Path) -> list[Path]:
        target = self.resolve_path(path)
        try:
            return sorted(target.iterdir())
        except OSError as exc:
            raise FileSystemError(f"Failed to list directory {target}: {exc}", path=str(target), cause=exc) from exc

    def resolve_path(self, *parts: str | Path) -> Path:
        """Join ``parts`` and anchor the result at :attr:`root` when relative."""

        candidate = Path(*parts) if parts else Path()
        return candidate if candidate.is_absolute() else self._root / candidate


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            tmp_path = Path(temp_file.name)
            temp_file.write(data)
            temp_file.flush()
        tmp_path.replace(path)
    except BaseException:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise


__all__ = ["FileSystem", "LocalFileSystem"]
