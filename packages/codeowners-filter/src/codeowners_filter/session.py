from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from .config import OwnershipConfig
from .fs import FileSystem, LocalFileSystem, read_rule_file, require_rule_file
from .include import format_as_include_pattern
from .resolver import OwnerIndex, resolve
from .rules import Rule, list_owners, parse_rules
from .tree import PathNode, build_tree

logger = logging.getLogger(__name__)


class OwnershipSnapshot(BaseModel):
    """Result of one refresh for one owner."""

    model_config = ConfigDict(frozen=True)

    owner: str
    rule_file: str
    patterns: tuple[str, ...]
    include_pattern: str
    nodes: tuple[PathNode, ...]


class OwnershipSession:
    """Explicit state for resolving ownership inside one repository.

    The parsed rules and owner index are cached per rule file and its
    (mtime, size); any change to either causes a re-read on the next call.
    """

    def __init__(
        self,
        config: OwnershipConfig | None = None,
        *,
        fs: FileSystem | None = None,
    ) -> None:
        self.config = config or OwnershipConfig()
        self.fs = fs if fs is not None else LocalFileSystem(self.config.root)
        self._cache_key: tuple[str, tuple[int, int]] | None = None
        self._cached: tuple[list[Rule], OwnerIndex] | None = None

    def rule_file(self) -> str:
        return require_rule_file(self.fs, self.config.candidates, root=self.config.root)

    def _load(self) -> tuple[str, list[Rule], OwnerIndex]:
        path = self.rule_file()
        try:
            stamp = self.fs.mtime(path)
        except OSError:
            stamp = None
        key = (path, stamp) if stamp is not None else None

        if key is not None and key == self._cache_key and self._cached is not None:
            rules, index = self._cached
            return path, rules, index

        rules = parse_rules(read_rule_file(self.fs, path))
        index = resolve(rules)
        logger.debug("parsed %d rule(s) for %d owner(s) from %s", len(rules), len(index.patterns), path)
        self._cache_key = key
        self._cached = (rules, index) if key is not None else None
        return path, rules, index

    def rules(self) -> list[Rule]:
        return list(self._load()[1])

    def owner_index(self) -> OwnerIndex:
        return self._load()[2]

    def owners(self) -> list[str]:
        return list_owners(self._load()[1])

    def most_specific_owner(self, path: str) -> str | None:
        return self.owner_index().most_specific_owner(path)

    def build_tree(self, owner: str) -> list[PathNode]:
        index = self.owner_index()
        return build_tree(index.patterns_for(owner), index, owner, self.fs)

    def include_pattern(self, owner: str) -> str:
        patterns = self.owner_index().patterns_for(owner)
        return format_as_include_pattern(patterns, threshold=self.config.include_threshold)

    def refresh(self, owner: str) -> OwnershipSnapshot:
        path, _, index = self._load()
        patterns = index.patterns_for(owner)
        return OwnershipSnapshot(
            owner=owner,
            rule_file=path,
            patterns=tuple(patterns),
            include_pattern=format_as_include_pattern(
                patterns, threshold=self.config.include_threshold
            ),
            nodes=tuple(build_tree(patterns, index, owner, self.fs)),
        )
