from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Protocol, Sequence

from .errors import NotFoundError, ReadError
from .paths import join_relpath, normalize_relpath, normalize_text

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Repository file-system capability.

    Every path is repository-relative and `/`-separated; `""` is the root.
    """

    def exists(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def list_directory(self, path: str, *, recursive: bool = False) -> list[str]: ...

    def read_text(self, path: str) -> str: ...

    def mtime(self, path: str) -> tuple[int, int] | None: ...


class LocalFileSystem:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _abs(self, path: str) -> Path:
        rel = normalize_relpath(path)
        return self.root / rel if rel else self.root

    def _stat(self, path: str) -> os.stat_result | None:
        try:
            return self._abs(path).stat()
        except FileNotFoundError:
            return None

    def exists(self, path: str) -> bool:
        return self._stat(path) is not None

    def is_file(self, path: str) -> bool:
        st = self._stat(path)
        return st is not None and stat.S_ISREG(st.st_mode)

    def is_directory(self, path: str) -> bool:
        st = self._stat(path)
        return st is not None and stat.S_ISDIR(st.st_mode)

    def list_directory(self, path: str, *, recursive: bool = False) -> list[str]:
        """List files under `path`; sub-directories are descended when recursive.

        Entries that disappear or cannot be inspected are skipped.
        """
        base = normalize_relpath(path)
        out: list[str] = []
        try:
            with os.scandir(self._abs(base)) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (FileNotFoundError, NotADirectoryError):
            return []

        for entry in entries:
            rel = join_relpath(base, entry.name)
            try:
                if entry.is_file():
                    out.append(rel)
                elif recursive and entry.is_dir(follow_symlinks=False):
                    out.extend(self.list_directory(rel, recursive=True))
            except OSError as exc:
                logger.warning("skipping %s: %s", rel, exc)
        return out

    def read_text(self, path: str) -> str:
        return self._abs(path).read_text(encoding="utf-8")

    def mtime(self, path: str) -> tuple[int, int] | None:
        st = self._stat(path)
        if st is None:
            return None
        return st.st_mtime_ns, st.st_size


def locate_rule_file(fs: FileSystem, candidates: Sequence[str]) -> str | None:
    for rel in candidates:
        try:
            found = fs.is_file(rel)
        except OSError as exc:
            raise ReadError(path=rel, reason=str(exc)) from exc
        if found:
            logger.debug("using rule file %s", rel)
            return normalize_relpath(rel)
    return None


def read_rule_file(fs: FileSystem, path: str) -> str:
    try:
        return normalize_text(fs.read_text(path))
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(path=path, reason=str(exc)) from exc


def require_rule_file(fs: FileSystem, candidates: Sequence[str], *, root: str) -> str:
    path = locate_rule_file(fs, candidates)
    if path is None:
        raise NotFoundError(root=root, candidates=candidates)
    return path
