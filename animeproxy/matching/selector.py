"""Best-candidate selection among upstream search results."""

import logging
from dataclasses import dataclass

from ..models import SearchCandidate
from .config import PARTIAL_PHRASE_LENGTHS, SIMILARITY_TIE_MARGIN, SpecialCase
from .normalizer import (
    arc_keywords,
    comparable,
    contains_phrase,
    has_season,
    season_number,
    significant_words,
    strip_id_suffix,
)
from .similarity import similarity
from .special_cases import accepts, find_special_case

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Result of candidate selection."""

    candidate: SearchCandidate
    # "special_case" | "id_stem" | "exact" | "season_arc" |
    # "significant_words" | "partial" | "ranked"
    method: str
    score: float  # Similarity of the candidate title to the target


class MatchSelector:
    """Picks the one search result that best fits a target title."""

    def __init__(
        self,
        special_cases: list[SpecialCase] | None = None,
        tie_margin: float = SIMILARITY_TIE_MARGIN,
    ):
        """Initialize selector.

        Args:
            special_cases: Override table, defaults to config.SPECIAL_CASES
            tie_margin: Similarity gap under which the shorter title wins
        """
        self.special_cases = special_cases
        self.tie_margin = tie_margin

    def match(
        self, candidates: list[SearchCandidate], target_title: str
    ) -> MatchResult | None:
        """Select the best candidate for a target title.

        Rules are tried in order and the first one that yields a candidate wins:
        special-case overrides, id-stem equality, exact title equality,
        season/arc filtering, significant-word containment, partial phrase.

        Args:
            candidates: Upstream search results (never modified)
            target_title: Title the caller is looking for

        Returns:
            MatchResult, or None if no candidate is acceptable
        """
        if not candidates:
            return None

        target = comparable(target_title)

        # Priority 1: Hand-curated overrides
        case = find_special_case(target, self.special_cases)
        if case:
            for candidate in candidates:
                if accepts(case, candidate.title):
                    return self._result(candidate, target, "special_case")

        # Priority 2: Same catalog id once the numeric suffix is gone
        target_stem = comparable(strip_id_suffix(target_title))
        for candidate in candidates:
            if comparable(strip_id_suffix(candidate.id)) == target_stem:
                return self._result(candidate, target, "id_stem")

        # Priority 3: Exact title
        for candidate in candidates:
            if comparable(candidate.title) == target:
                return self._result(candidate, target, "exact")

        # Priority 4: Season and arc markers
        pool = candidates
        if season_number(target) is not None or arc_keywords(target):
            narrowed = self.filter_season_arc(candidates, target)
            if narrowed:
                return self._best(narrowed, target, "season_arc")
        else:
            # No season asked for, so the base entry is the default
            unmarked = [c for c in candidates if season_number(c.title) is None]
            if unmarked:
                pool = unmarked

        # Priority 5: Every significant word present
        words = significant_words(target)
        if words:
            containing = [
                c for c in pool if all(contains_phrase(c.title, w) for w in words)
            ]
            if containing:
                return self._best(containing, target, "significant_words")

        # Priority 6: Leading words as a phrase
        for length in PARTIAL_PHRASE_LENGTHS:
            if len(words) < length:
                continue
            phrase = " ".join(words[:length])
            partial = [c for c in pool if contains_phrase(c.title, phrase)]
            if partial:
                return self._best(partial, target, "partial")

        logger.debug(f"No acceptable candidate for '{target_title}'")
        return None

    def filter_season_arc(
        self, candidates: list[SearchCandidate], target_title: str
    ) -> list[SearchCandidate]:
        """Keep candidates carrying the target's season marker and arc keywords.

        Returns the candidates unchanged when the target names neither.
        """
        season = season_number(target_title)
        arcs = arc_keywords(target_title)

        filtered = []
        for candidate in candidates:
            if season is not None and not has_season(candidate.title, season):
                continue
            title = comparable(candidate.title)
            if any(arc not in title for arc in arcs):
                continue
            filtered.append(candidate)
        return filtered

    def rank(
        self, candidates: list[SearchCandidate], target_title: str
    ) -> SearchCandidate | None:
        """Most similar candidate; near-ties go to the shorter title.

        The base series title is normally shorter than its spin-offs and
        later seasons.
        """
        best = self._best(candidates, comparable(target_title), "ranked")
        return best.candidate if best else None

    def _best(
        self, candidates: list[SearchCandidate], target: str, method: str
    ) -> MatchResult | None:
        if not candidates:
            return None

        scored = [(similarity(comparable(c.title), target), c) for c in candidates]
        top_score = max(score for score, _ in scored)
        contenders = [
            (score, c) for score, c in scored if top_score - score <= self.tie_margin
        ]
        score, candidate = min(
            contenders, key=lambda pair: (len(pair[1].title), -pair[0])
        )
        return MatchResult(candidate=candidate, method=method, score=score)

    def _result(
        self, candidate: SearchCandidate, target: str, method: str
    ) -> MatchResult:
        score = similarity(comparable(candidate.title), target)
        return MatchResult(candidate=candidate, method=method, score=score)


def select_best(
    candidates: list[SearchCandidate], target_title: str
) -> SearchCandidate | None:
    """Best candidate for a target title, or None."""
    result = MatchSelector().match(candidates, target_title)
    return result.candidate if result else None
