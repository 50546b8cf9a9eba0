"""Compatibility scoring and candidate filtering.

Pure functions: no I/O, no errors for well-formed input. Malformed
profiles are dropped from the deck instead of failing it.
"""

from collections.abc import Collection, Iterable, Iterator
from uuid import UUID

from domain.entities.profile import MINIMUM_AGE, Gender, InterestedIn, Profile, ScoredProfile

AGE_TERM_MAX = 10
ORIENTATION_TERM = 20
SCORE_MAX = AGE_TERM_MAX + 2 * ORIENTATION_TERM

_GENDERS = {g.value for g in Gender}
_INTERESTS = {i.value for i in InterestedIn}


def score(candidate: Profile, viewer: Profile) -> int:
    """Score how well ``candidate`` fits ``viewer``.

    Age closeness contributes up to 10 points, each orientation term 20:
    one when the candidate is the gender the viewer wants, one when the
    candidate wants the viewer's gender.
    """
    total = max(0, AGE_TERM_MAX - abs(candidate.age - viewer.age))
    if candidate.gender == viewer.interested_in:
        total += ORIENTATION_TERM
    if candidate.interested_in == viewer.gender:
        total += ORIENTATION_TERM
    return total


def is_well_formed(profile: Profile) -> bool:
    """Check that a catalog profile can be scored."""
    if not profile.name or not profile.name.strip():
        return False
    if isinstance(profile.age, bool) or not isinstance(profile.age, int):
        return False
    if profile.age < MINIMUM_AGE:
        return False
    return profile.gender in _GENDERS and profile.interested_in in _INTERESTS


def wants_to_see(viewer: Profile, candidate: Profile) -> bool:
    """Gender filter: ``everyone`` disables it."""
    if viewer.interested_in == InterestedIn.EVERYONE:
        return True
    return candidate.gender == viewer.interested_in


def filter_candidates(
    viewer: Profile,
    profiles: Iterable[Profile],
    liked_ids: Collection[UUID],
    matched_ids: Collection[UUID],
) -> Iterator[Profile]:
    """Lazily yield the profiles eligible for the viewer's deck, in input order."""
    for profile in profiles:
        if profile.id == viewer.id:
            continue
        if profile.id in liked_ids or profile.id in matched_ids:
            continue
        if not is_well_formed(profile):
            continue
        if not wants_to_see(viewer, profile):
            continue
        yield profile


def rank_candidates(
    viewer: Profile,
    profiles: Iterable[Profile],
    liked_ids: Collection[UUID],
    matched_ids: Collection[UUID],
) -> list[ScoredProfile]:
    """Build the swipe deck: eligible profiles, best score first.

    ``sorted`` is stable, so equal scores keep catalog order.
    """
    scored = (
        ScoredProfile(profile=profile, score=score(profile, viewer))
        for profile in filter_candidates(viewer, profiles, liked_ids, matched_ids)
    )
    return sorted(scored, key=lambda item: item.score, reverse=True)
