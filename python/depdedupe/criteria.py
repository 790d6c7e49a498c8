"""Classifies two versions as compatible or not under a named criterion."""

from typing import Union

from .errors import InvalidCriteriaError
from .models import Comparison, Criterion
from .version_parser import Version, VersionParser


def to_criterion(criteria: Union[str, Criterion]) -> Criterion:
    """
    Coerce a criterion name into a Criterion.

    Raises:
        InvalidCriteriaError: If the value is not one of the five recognized names
    """
    if isinstance(criteria, Criterion):
        return criteria
    try:
        return Criterion(criteria)
    except ValueError:
        raise InvalidCriteriaError(criteria) from None


def _same_line(criterion: Criterion, given: Version, cached: Version) -> bool:
    if criterion is Criterion.ANY:
        return True
    if given.major != cached.major:
        return False
    if criterion is Criterion.MINOR:
        return True
    if criterion is Criterion.PATCH:
        return given.minor == cached.minor
    # MAJOR: caret semantics, 0.x lines are incompatible across minor bumps
    return given.major > 0 or given.minor == cached.minor


def compare(criteria: Union[str, Criterion], given_version: str, cached_version: str) -> Comparison:
    """
    Compare a newly given version against a cached one.

    Args:
        criteria: One of exact | patch | minor | major | any (most to least specific)
        given_version: Version of the package just encountered
        cached_version: Version of the previously cached package

    Returns:
        NOT_SATISFIED when the versions are not compatible under the criterion,
        otherwise SATISFIED_CACHED_WINS when the cached version is the same or newer
        and SATISFIED_GIVEN_WINS when the given version is newer.

    Raises:
        InvalidCriteriaError: If the criterion is not recognized
        VersionParseError: If either version is not a well-formed semantic version
    """
    criterion = to_criterion(criteria)
    given = VersionParser.parse(given_version)
    cached = VersionParser.parse(cached_version)

    if criterion is Criterion.EXACT:
        if given.is_identical(cached):
            return Comparison.SATISFIED_CACHED_WINS
        return Comparison.NOT_SATISFIED

    if not _same_line(criterion, given, cached):
        return Comparison.NOT_SATISFIED
    if cached >= given:
        return Comparison.SATISFIED_CACHED_WINS
    return Comparison.SATISFIED_GIVEN_WINS
