from __future__ import annotations

from typing import Sequence

from .matching import has_wildcard

DEFAULT_INCLUDE_THRESHOLD = 3


def format_as_include_pattern(
    patterns: Sequence[str], *, threshold: int = DEFAULT_INCLUDE_THRESHOLD
) -> str:
    """Join patterns into a comma-separated include expression.

    When there are more than `threshold` patterns, any top-level directory
    holding more than `threshold` of them collapses to `<dir>/**`.
    """
    unique = list(dict.fromkeys(p for p in patterns if p))
    if len(unique) <= threshold:
        return ",".join(unique)

    grouped: dict[str, list[str]] = {}
    for pattern in unique:
        grouped.setdefault(pattern.split("/", 1)[0], []).append(pattern)

    out: list[str] = []
    for base, members in grouped.items():
        if len(members) > threshold and not has_wildcard(base):
            out.append(f"{base}/**")
        else:
            out.extend(members)
    return ",".join(out)
