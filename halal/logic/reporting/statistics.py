"""Scan statistics computed from the history log and favorites."""
from typing import Dict, Iterable

from halal.domain.ActivityRecord import ActivityRecord
from halal.utilities.constants import VERDICT_HALAL, VERDICT_HARAM


def compute_stats(history: Iterable[ActivityRecord], favorites: Iterable[ActivityRecord]) -> Dict[str, int]:
    """Return total scans, per-verdict counts and the number of favorites.

    Anything that is neither halal nor haram counts as doubtful.
    """
    records = list(history)
    total = len(records)
    halal = sum(1 for r in records if r.classification.verdict == VERDICT_HALAL)
    haram = sum(1 for r in records if r.classification.verdict == VERDICT_HARAM)
    return {
        "total": total,
        "halal": halal,
        "haram": haram,
        "doubtful": total - halal - haram,
        "favorites": len(list(favorites)),
    }
