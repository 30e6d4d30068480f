"""Error types raised by the contest services."""

from __future__ import annotations


class CatalogError(ValueError):
    """Catalog data that cannot be seeded or resolved."""


class ContestError(RuntimeError):
    """Base error for contest boundary operations."""


class NotFoundError(ContestError):
    """Referenced player, prop or pick does not exist."""


class UnknownPlayerNameError(ContestError):
    """Join attempted with a name outside the allow-list."""


class PicksLockedError(ContestError):
    """Pick submission after the lock time."""


class InvalidPickError(ContestError):
    """Pick that references a missing prop or option."""


class InvalidResultError(ContestError):
    """Manual resolution with a value that is not an option of the prop."""


class SeedBlockedError(ContestError):
    """Reseed refused because picks would be destroyed."""

    def __init__(self, picks_count: int) -> None:
        super().__init__(
            f"{picks_count} picks exist; reseeding would delete all of them. Pass force=true to override."
        )
        self.picks_count = picks_count
