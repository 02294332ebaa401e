from __future__ import annotations

CODEOWNERS_PATH_CANDIDATES: tuple[str, ...] = (
    ".github/CODEOWNERS",
    "docs/CODEOWNERS",
    "CODEOWNERS",
)


def normalize_relpath(path: str) -> str:
    """Return a repository-relative, `/`-separated path.

    Leading slashes, `.` and empty segments are dropped; `""` is the root.
    """
    raw = path.replace("\\", "/").strip()
    pieces = [p for p in raw.split("/") if p not in {"", "."}]
    if any(p == ".." for p in pieces):
        raise ValueError(f"path traversal is not allowed: {path!r}")
    return "/".join(pieces)


def join_relpath(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def normalize_text(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\r", "\n")
