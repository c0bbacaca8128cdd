"""Normalized Levenshtein similarity."""

from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost insert, delete and substitute."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Similarity in [0.0, 1.0]; two empty strings are identical.

    One minus the edit distance divided by the longer length.
    """
    return Levenshtein.normalized_similarity(a, b)
