"""
Description similarity for duplicate detection.

Levenshtein edit distance with unit costs, compared case-insensitively,
normalized to a 0-100 integer score.
"""
from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between a and b, ignoring case.

    Uses the full dynamic-programming table: rows follow b, columns follow a.
    Cell [i][j] holds the distance between the first j characters of a and
    the first i characters of b.
    """
    s1 = a.lower()
    s2 = b.lower()

    matrix = [[0] * (len(s1) + 1) for _ in range(len(s2) + 1)]
    for i in range(len(s2) + 1):
        matrix[i][0] = i
    for j in range(len(s1) + 1):
        matrix[0][j] = j

    for i in range(1, len(s2) + 1):
        for j in range(1, len(s1) + 1):
            if s2[i - 1] == s1[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = min(
                    matrix[i - 1][j - 1] + 1,  # substitute
                    matrix[i][j - 1] + 1,  # insert
                    matrix[i - 1][j] + 1,  # delete
                )

    return matrix[len(s2)][len(s1)]


def description_similarity(a: str, b: str) -> int:
    """Similarity of two descriptions as an integer 0-100.

    Two empty strings are identical (100). Symmetric in its arguments.
    Lengths are taken after lower-casing, which can lengthen a string.
    """
    s1 = a.lower()
    s2 = b.lower()
    max_length = max(len(s1), len(s2))
    if max_length == 0:
        return 100
    distance = levenshtein_distance(s1, s2)
    return round_half_up((1 - distance / max_length) * 100)


__all__ = ["levenshtein_distance", "description_similarity", "round_half_up"]
