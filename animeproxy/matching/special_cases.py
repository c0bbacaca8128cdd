"""Lookup of hand-curated overrides for titles the catalog mangles.

The override table itself lives in ``config.SPECIAL_CASES``; add entries
there as new catalog quirks are discovered.
"""

from .config import SPECIAL_CASES, SpecialCase
from .normalizer import comparable


def find_special_case(
    title: str | None, cases: list[SpecialCase] | None = None
) -> SpecialCase | None:
    """Find the override that applies to a title.

    Franchise entries with an arc sub-table only apply when one of their arcs
    is named; the franchise name alone falls through to generic matching.

    Args:
        title: Target title or query
        cases: Override table, defaults to SPECIAL_CASES

    Returns:
        Matching SpecialCase, or None if the title has no override
    """
    if not title:
        return None

    target = comparable(title)
    for case in SPECIAL_CASES if cases is None else cases:
        if not any(trigger in target for trigger in case.triggers):
            continue
        for arc in case.arcs.values():
            if any(trigger in target for trigger in arc.triggers):
                return arc
        if case.accepted:
            return case

    return None


def accepts(case: SpecialCase, title: str) -> bool:
    """Check if a candidate title satisfies the override."""
    candidate = comparable(title)
    return any(accepted in candidate for accepted in case.accepted)
