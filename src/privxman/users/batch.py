"""Per-identifier batching helpers for the user commands."""

import logging
from typing import Callable, Iterable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def join_values(values: Iterable[str]) -> str:
    """Join repeated flag values into the comma list the directory expects.

    Embedded commas are passed through as-is, so a keyword containing a comma
    is indistinguishable from two keywords.
    """
    return ",".join(values)


def fetch_each(identifiers: Sequence[str], fetch: Callable[[str], T]) -> List[T]:
    """
    Call ``fetch`` once per identifier, in order, stopping at the first failure.

    Args:
        identifiers: Identifiers to fetch, in output order
        fetch: Single-identifier lookup; any exception it raises propagates unchanged

    Returns:
        One result per identifier, element i belonging to identifiers[i]
    """
    results: List[T] = []
    for position, identifier in enumerate(identifiers):
        logger.debug(f"Fetching {identifier} ({position + 1}/{len(identifiers)})")
        results.append(fetch(identifier))
    return results


def apply_each(identifiers: Sequence[str], action: Callable[[str], None]) -> None:
    """Run ``action`` for each identifier in order; the first exception aborts the rest."""
    for identifier in identifiers:
        action(identifier)
