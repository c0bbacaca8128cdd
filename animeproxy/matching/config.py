"""Tunable data for title matching."""

from dataclasses import dataclass, field


@dataclass
class SpecialCase:
    """Override for a title the generic matcher cannot resolve."""

    triggers: tuple[str, ...]  # Substrings of the comparable target
    accepted: tuple[str, ...]  # Candidate titles must contain one of these
    searches: tuple[str, ...]  # Literal upstream queries, tried in order
    arcs: dict[str, "SpecialCase"] = field(default_factory=dict)


# Words ignored when picking the significant words of a title.
# Season markers are handled separately, so "season" is ignored here too.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "the",
        "a",
        "an",
        "of",
        "and",
        "in",
        "on",
        "to",
        "for",
        "with",
        "no",
        "wa",
        "ga",
        "wo",
        "ni",
        "de",
        "season",
        # Arc-related words, the catalog is inconsistent about these
        "arc",
        "saga",
        "part",
    }
)

# Words shorter than or equal to this are never significant
MIN_SIGNIFICANT_WORD_LENGTH = 2

# Keywords naming a specific arc; a target naming one only matches entries naming it too
ARC_KEYWORDS: tuple[str, ...] = (
    "swordsmith",
    "village",
    "mugen",
    "entertainment",
    "district",
    "hashira",
    "infinity",
    "culling",
    "shibuya",
)

# Candidates whose similarity is within this margin of the best are
# considered tied, and the shorter title wins
SIMILARITY_TIE_MARGIN = 0.1

# How many leading significant words the partial-phrase fallback tries, longest first
PARTIAL_PHRASE_LENGTHS: tuple[int, ...] = (3, 2)

# Known catalog quirks. Checked in order, first trigger hit wins.
SPECIAL_CASES: list[SpecialCase] = [
    # Upstream lists "Shangri-La Frontier" with varying punctuation and subtitles
    SpecialCase(
        triggers=("shangri",),
        accepted=("shangri",),
        searches=("shangri",),
    ),
    # "Gods' Game We Play" shows up with every possible apostrophe placement
    SpecialCase(
        triggers=("gods game", "god game", "gods' game", "god's game"),
        accepted=("gods game", "god game", "gods' game", "god's game"),
        searches=("gods game", "god's game"),
    ),
    # Demon Slayer arcs are separate catalog entries; only arc queries are special
    SpecialCase(
        triggers=("demon slayer", "kimetsu no yaiba"),
        accepted=(),
        searches=(),
        arcs={
            "swordsmith": SpecialCase(
                triggers=("swordsmith",),
                accepted=("swordsmith",),
                searches=("demon slayer swordsmith village arc",),
            ),
            "mugen": SpecialCase(
                triggers=("mugen",),
                accepted=("mugen train",),
                searches=("demon slayer mugen train arc",),
            ),
            "entertainment": SpecialCase(
                triggers=("entertainment",),
                accepted=("entertainment district",),
                searches=("demon slayer entertainment district arc",),
            ),
            "hashira": SpecialCase(
                triggers=("hashira",),
                accepted=("hashira training",),
                searches=("demon slayer hashira training arc",),
            ),
        },
    ),
]
