from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from .matching import has_wildcard, normalize_pattern
from .paths import normalize_text

# Weights are heuristics; only the relative ordering they produce matters.
SEGMENT_WEIGHT = 100
LITERAL_BONUS = 50
FILE_BONUS = 25

_OWNER_TRAILING_PUNCT = re.compile(r"[^@\w/-]+$")


def specificity(pattern: str) -> int:
    """Score how narrowly `pattern` targets files; higher is more specific."""
    segments = [s for s in pattern.split("/") if s]
    score = len(segments) * SEGMENT_WEIGHT
    if "*" not in pattern:
        score += LITERAL_BONUS
    if "." in pattern and not pattern.endswith("/"):
        score += FILE_BONUS
    return score


@dataclass(frozen=True)
class Rule:
    pattern: str
    owners: tuple[str, ...]
    line: int
    specificity: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "specificity", specificity(self.pattern))

    @property
    def rank(self) -> tuple[int, int]:
        # Equal scores fall back to file order: the later rule wins.
        return self.specificity, self.line

    @property
    def path_pattern(self) -> str:
        return normalize_pattern(self.pattern)

    @property
    def is_wildcard(self) -> bool:
        return has_wildcard(self.pattern)


def strip_inline_comment(line: str) -> str:
    for idx, ch in enumerate(line):
        if ch == "#" and (idx == 0 or line[idx - 1] != "\\"):
            return line[:idx]
    return line


def _clean_owner(token: str) -> str:
    return _OWNER_TRAILING_PUNCT.sub("", token).strip()


def parse_rules(text: str) -> list[Rule]:
    """Parse CODEOWNERS text into rules, in file order.

    Lines that do not look like rules are skipped; tokens after the pattern
    that do not start with `@` are ignored.
    """
    out: list[Rule] = []
    for idx, raw in enumerate(normalize_text(text).split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = strip_inline_comment(line).split()
        if not parts:
            continue

        pattern = parts[0].replace("\\#", "#")
        if pattern.startswith("/"):
            pattern = pattern[1:]
        if not pattern:
            continue

        owners = tuple(
            owner
            for owner in (_clean_owner(t) for t in parts[1:])
            if owner.startswith("@") and len(owner) > 1
        )
        out.append(Rule(pattern=pattern, owners=owners, line=idx))
    return out


def rank_rules(rules: Iterable[Rule]) -> list[Rule]:
    """Most specific first; ties keep the later-declared rule ahead."""
    return sorted(rules, key=lambda r: r.rank, reverse=True)


def list_owners(rules: Iterable[Rule]) -> list[str]:
    seen: dict[str, None] = {}
    for rule in rules:
        for owner in rule.owners:
            seen.setdefault(owner, None)
    return list(seen)
