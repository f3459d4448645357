"""Shell completion helpers."""

from __future__ import annotations

from collections.abc import Iterable


def complete_prefix(candidates: Iterable[str], to_complete: str) -> list[str]:
    """Return the candidates that start with ``to_complete``, in their given order."""
    return [candidate for candidate in candidates if candidate.startswith(to_complete)]