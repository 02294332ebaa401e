from __future__ import annotations

from typing import Sequence


class OwnershipError(RuntimeError):
    """Base class for failures the caller can act on."""


class NotFoundError(OwnershipError):
    def __init__(self, *, root: str, candidates: Sequence[str]) -> None:
        self.root = root
        self.candidates = tuple(candidates)
        probed = ", ".join(self.candidates)
        super().__init__(f"no CODEOWNERS file found under {root!r} (probed: {probed})")


class ReadError(OwnershipError):
    def __init__(self, *, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"could not read {path!r}: {reason}")
