"""Severity ranking shared by every table that orders or filters by severity.

A smaller rank is more severe: ``critical`` is 1 and anything that is not
recognized is ranked 6 (``Unknown``). The numeral strings ``"1"`` to ``"5"``
are accepted as aliases of the named levels.
"""
import logging
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from lacework_cli.utils.error_utils import UnsupportedSeverityError

logger = logging.getLogger(__name__)

T = TypeVar("T")

VALID_SEVERITIES = ["critical", "high", "medium", "low", "info"]

UNKNOWN_RANK = 6
UNKNOWN_LABEL = "Unknown"

_SEVERITY_RANKS = {
    "critical": (1, "Critical"),
    "high": (2, "High"),
    "medium": (3, "Medium"),
    "low": (4, "Low"),
    "info": (5, "Info"),
}
_SEVERITY_ALIASES = {
    str(rank): level for level, (rank, _) in _SEVERITY_RANKS.items()
}


def severity_rank(severity: Optional[str]) -> Tuple[int, str]:
    """Map a severity string to its rank and canonical label.

    Args:
        severity: Severity name or numeral, in any case

    Returns:
        Tuple[int, str]: Rank (1 most severe, 6 unknown) and display label
    """
    key = str(severity or "").strip().lower()
    key = _SEVERITY_ALIASES.get(key, key)
    return _SEVERITY_RANKS.get(key, (UNKNOWN_RANK, UNKNOWN_LABEL))


def severity_label(severity: Optional[str]) -> str:
    return severity_rank(severity)[1]


def validate_severity(threshold: str) -> int:
    """Validate a severity threshold and return its rank.

    Raises:
        UnsupportedSeverityError: If the threshold is not a recognized level
    """
    rank, _ = severity_rank(threshold)
    if rank == UNKNOWN_RANK:
        raise UnsupportedSeverityError(threshold, VALID_SEVERITIES)
    return rank


def filter_by_severity(records: Iterable[T], threshold: Optional[str],
                       key: Callable[[T], Optional[str]]) -> List[T]:
    """Keep records at least as severe as the threshold.

    Records are returned untouched when no threshold is given.

    Args:
        records: Records to filter
        threshold: Severity threshold, e.g. "medium" keeps critical, high and medium
        key: Function returning the severity string of a record

    Returns:
        List: The retained records in their original order

    Raises:
        UnsupportedSeverityError: If the threshold is not a recognized level
    """
    records = list(records)
    if not threshold:
        return records

    threshold_rank = validate_severity(threshold)
    logger.debug("filtering %d records with severity threshold %s (rank %d)",
                 len(records), threshold, threshold_rank)
    return [record for record in records if severity_rank(key(record))[0] <= threshold_rank]


def sort_by_severity(records: Iterable[T], key: Callable[[T], Optional[str]]) -> List[T]:
    """Sort records from most to least severe.

    The sort is stable, records with the same rank keep their input order.
    """
    ranked = [(severity_rank(key(record))[0], record) for record in records]
    ranked.sort(key=lambda item: item[0])
    return [record for _, record in ranked]
