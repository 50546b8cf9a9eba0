"""Helpers for conditional creates backed by unique constraints."""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a lost insert race apart from other integrity failures.

    Only unique/primary-key violations mean "someone else wrote it
    first"; NOT NULL, FK and CHECK failures are real bugs and must
    propagate.
    """
    orig = str(exc.orig).lower() if exc.orig else ""
    return "unique" in orig or "duplicate" in orig
