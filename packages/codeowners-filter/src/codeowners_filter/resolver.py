from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from .matching import contains, matches
from .rules import Rule, rank_rules


@dataclass(frozen=True)
class OwnerIndex:
    """Per-owner effective patterns derived from one rule set.

    `patterns` keeps each owner's patterns in file order, unique per owner.
    `exclusions` lists, per owner, the higher-ranked rules of other owners
    that carve a subtree out of one of that owner's patterns. The mappings
    are read-only views; a changed rule set yields a new index.
    """

    rules: tuple[Rule, ...] = ()
    patterns: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    owner_rules: Mapping[str, tuple[Rule, ...]] = field(default_factory=lambda: MappingProxyType({}))
    exclusions: Mapping[str, tuple[Rule, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def owners(self) -> list[str]:
        return list(self.patterns)

    def patterns_for(self, owner: str) -> list[str]:
        return list(self.patterns.get(owner, ()))

    def as_dict(self) -> dict[str, list[str]]:
        return {owner: list(pats) for owner, pats in self.patterns.items()}

    def most_specific_rule(self, path: str) -> Rule | None:
        """Highest-ranked literal rule naming `path` or one of its ancestors."""
        for rule in self.rules:
            if rule.is_wildcard:
                continue
            if matches(path, rule.path_pattern):
                return rule
        return None

    def most_specific_owner(self, path: str) -> str | None:
        rule = self.most_specific_rule(path)
        if rule is None or not rule.owners:
            return None
        return rule.owners[0]

    def _best_rank(self, path: str, owner: str) -> tuple[int, int] | None:
        own = [r.rank for r in self.owner_rules.get(owner, ()) if matches(path, r.path_pattern)]
        return max(own, default=None)

    def is_overridden(self, path: str, owner: str) -> bool:
        """True when an excluded rule outranks every rule of `owner` matching `path`."""
        best = self._best_rank(path, owner)
        for rule in self.exclusions.get(owner, ()):
            if not matches(path, rule.path_pattern):
                continue
            if best is None or rule.rank > best:
                return True
        return False

    def resolves_to(self, path: str, owner: str) -> bool:
        """True when `owner` holds the highest-ranked rule matching `path`."""
        rule = self.most_specific_rule(path)
        if rule is not None and owner not in rule.owners:
            best = self._best_rank(path, owner)
            # A wildcard rule of `owner` can still outrank the literal one.
            if best is None or rule.rank > best:
                return False
        return not self.is_overridden(path, owner)


def _exclusions_for(owner: str, owned: Sequence[Rule], ranked: Sequence[Rule]) -> list[Rule]:
    out: list[Rule] = []
    for rule in owned:
        for other in ranked:
            if other.rank <= rule.rank:
                break
            if owner in other.owners or other in out:
                continue
            if contains(rule.path_pattern, other.path_pattern):
                out.append(other)
    return out


def resolve(rules: Sequence[Rule]) -> OwnerIndex:
    ranked = rank_rules(rules)

    patterns: dict[str, list[str]] = {}
    owner_rules: dict[str, list[Rule]] = {}
    for rule in rules:
        for owner in dict.fromkeys(rule.owners):
            owner_rules.setdefault(owner, []).append(rule)
            pats = patterns.setdefault(owner, [])
            if rule.path_pattern not in pats:
                pats.append(rule.path_pattern)

    exclusions: dict[str, tuple[Rule, ...]] = {}
    for owner, owned in owner_rules.items():
        excluded = _exclusions_for(owner, owned, ranked)
        if excluded:
            exclusions[owner] = tuple(excluded)

    return OwnerIndex(
        rules=tuple(ranked),
        patterns=MappingProxyType({o: tuple(p) for o, p in patterns.items()}),
        owner_rules=MappingProxyType({o: tuple(r) for o, r in owner_rules.items()}),
        exclusions=MappingProxyType(exclusions),
    )
