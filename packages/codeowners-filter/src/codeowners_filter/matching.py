"""CODEOWNERS-style path matching.

Supported pattern forms:

- literal paths: match the path itself and everything beneath it
- `dir/*`: direct children of `dir` only
- `dir/**`: everything beneath `dir`, any depth
- `*` inside a segment: any run of characters except `/`
- `**`: any run of characters including `/`

A wildcard pattern without any `/` is unanchored and matches at any depth
(`*.ts` matches `src/a.ts`). Character classes, braces and negation are not
supported; `?`, `[` and `!` are literal characters.
"""

from __future__ import annotations

import re
from functools import lru_cache


def normalize_pattern(pattern: str) -> str:
    raw = pattern.replace("\\", "/").strip()
    while raw.startswith("/"):
        raw = raw[1:]
    while raw.endswith("/"):
        raw = raw[:-1]
    return raw


def has_wildcard(pattern: str) -> bool:
    return "*" in pattern


def is_anchored(pattern: str) -> bool:
    return "/" in normalize_pattern(pattern)


@lru_cache(maxsize=4096)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    p = normalize_pattern(pattern)
    parts: list[str] = []
    i = 0
    while i < len(p):
        if p.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif p.startswith("**", i):
            parts.append(".*")
            i += 2
        elif p[i] == "*":
            parts.append("[^/]*")
            i += 1
        else:
            parts.append(re.escape(p[i]))
            i += 1

    lead = "" if is_anchored(p) else "(?:.*/)?"
    # `dir/*` stops at direct children; everything else owns its subtree.
    tail = "" if p.endswith("/*") else "(?:/.*)?"
    return re.compile(f"^{lead}{''.join(parts)}{tail}$")


def matches(path: str, pattern: str) -> bool:
    """Return True when the repository-relative `path` falls under `pattern`."""
    p = normalize_pattern(pattern)
    target = normalize_pattern(path)
    if not p or not target:
        return False
    if p == target:
        return True

    if not has_wildcard(p):
        return target.startswith(p + "/")

    if p.endswith("/**") and not has_wildcard(p[:-3]):
        return target.startswith(p[:-2])

    if p.endswith("/*") and not has_wildcard(p[:-2]):
        prefix = p[:-1]
        rest = target[len(prefix) :]
        return target.startswith(prefix) and bool(rest) and "/" not in rest

    return compile_pattern(p).match(target) is not None


def contains(parent: str, child: str) -> bool:
    """True when every path `child` names is also named by `parent`.

    Approximated by matching the child pattern text as a path, which is
    exact for literal children and conservative for wildcard ones.
    """
    return matches(normalize_pattern(child), parent)


def wildcard_base(pattern: str) -> tuple[str, bool]:
    """Return (literal directory prefix, needs recursive listing) for a wildcard pattern."""
    p = normalize_pattern(pattern)
    if not is_anchored(p):
        return "", True

    segments = p.split("/")
    literal: list[str] = []
    for seg in segments:
        if has_wildcard(seg):
            break
        literal.append(seg)
    rest = segments[len(literal) :]
    recursive = "**" in p or len(rest) > 1
    return "/".join(literal), recursive
