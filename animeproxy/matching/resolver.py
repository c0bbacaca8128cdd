"""Multi-stage upstream search that narrows a query down to one catalog entry."""

import logging

from ..models import SearchCandidate
from ..upstream import UpstreamClient
from .normalizer import (
    arc_keywords,
    comparable,
    contains_phrase,
    season_number,
    significant_words,
)
from .selector import MatchSelector
from .special_cases import accepts, find_special_case

logger = logging.getLogger(__name__)


def verify_title(candidate: SearchCandidate, target_title: str) -> bool:
    """Guard against plausible but wrong matches from short fallback queries.

    Rejects a candidate naming a different season, missing an arc keyword the
    target names, or missing any significant word of the target.
    """
    title = comparable(candidate.title)

    target_season = season_number(target_title)
    candidate_season = season_number(title)
    if (
        target_season is not None
        and candidate_season is not None
        and target_season != candidate_season
    ):
        return False

    if any(arc not in title for arc in arc_keywords(target_title)):
        return False

    return all(
        contains_phrase(title, word) for word in significant_words(target_title)
    )


class FallbackSearch:
    """Resolves a normalized query to a single upstream search candidate.

    Upstream calls are made one at a time with progressively looser queries:
    special-case literals, the full query, its first two significant words,
    then its first significant word. Upstream failures propagate as
    UpstreamError; running out of queries is a plain None.
    """

    def __init__(
        self, upstream: UpstreamClient, selector: MatchSelector | None = None
    ):
        self.upstream = upstream
        self.selector = selector or MatchSelector()

    def resolve(
        self, query: str, original_title: str | None = None
    ) -> SearchCandidate | None:
        """Find the catalog entry for a query.

        Args:
            query: Normalized search title
            original_title: Title candidates are judged against, defaults to query

        Returns:
            The chosen SearchCandidate, or None if nothing verified matches
        """
        target = original_title or query
        searched: set[str] = set()

        # Stage 1: Special-case literals, trusted without verification
        case = find_special_case(query, self.selector.special_cases)
        if case:
            for literal in case.searches:
                searched.add(comparable(literal))
                for candidate in self.upstream.search(literal):
                    if accepts(case, candidate.title):
                        logger.info(
                            f"Resolved '{query}' via special case '{literal}': "
                            f"{candidate.title}"
                        )
                        return candidate

        # Stage 2: Full query
        if comparable(query) not in searched:
            searched.add(comparable(query))
            verified = self._verified(self.upstream.search(query), target)
            result = self.selector.match(verified, target)
            if result:
                logger.info(
                    f"Resolved '{query}' with full query: "
                    f"{result.candidate.title} ({result.method})"
                )
                return result.candidate

        words = significant_words(query)

        # Stage 3: First two significant words
        if len(words) >= 2:
            phrase = " ".join(words[:2])
            if phrase not in searched:
                searched.add(phrase)
                verified = self._verified(self.upstream.search(phrase), target)
                # Short queries return whole franchises, so season/arc decides first
                narrowed = (
                    self.selector.filter_season_arc(verified, target) or verified
                )
                result = self.selector.match(narrowed, target)
                if result:
                    logger.info(
                        f"Resolved '{query}' with fallback '{phrase}': "
                        f"{result.candidate.title} ({result.method})"
                    )
                    return result.candidate

        # Stage 4: First significant word, ranked by similarity
        if words and words[0] not in searched:
            searched.add(words[0])
            verified = self._verified(self.upstream.search(words[0]), target)
            candidate = self.selector.rank(verified, target)
            if candidate:
                logger.info(
                    f"Resolved '{query}' with fallback '{words[0]}': {candidate.title}"
                )
                return candidate

        logger.info(f"No verified match for '{query}'")
        return None

    def _verified(
        self, candidates: list[SearchCandidate], target: str
    ) -> list[SearchCandidate]:
        verified = [c for c in candidates if verify_title(c, target)]
        if len(verified) < len(candidates):
            logger.debug(
                f"Title verification kept {len(verified)}/{len(candidates)} "
                f"candidates for '{target}'"
            )
        return verified
