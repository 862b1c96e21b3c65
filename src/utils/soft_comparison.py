"""
Soft comparison utility using Levenshtein distance for fuzzy string matching.

Provides a normalized similarity score used to rank titles and names returned
by metadata providers against a free-text query.
"""

from utils.normalize import normalize


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein edit distance between two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The minimum number of single-character edits (insertions, deletions, substitutions)
        required to transform s1 into s2
    """
    len1, len2 = len(s1), len(s2)
    if len1 == 0:
        return len2
    if len2 == 0:
        return len1

    # Only the previous row is needed
    previous = list(range(len2 + 1))
    for i in range(1, len1 + 1):
        current = [i] + [0] * len2
        for j in range(1, len2 + 1):
            if s1[i - 1] == s2[j - 1]:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(
                    previous[j],  # deletion
                    current[j - 1],  # insertion
                    previous[j - 1],  # substitution
                )
        previous = current

    return previous[len2]


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity between two titles, in [0, 1].

    Both strings are normalized (see utils.normalize) before the edit distance
    is computed. Two empty strings are identical (score 1.0).

    Args:
        a: First title
        b: Second title

    Returns:
        1 - distance / max(len(a_norm), len(b_norm), 1)
    """
    norm_a = normalize(a)
    norm_b = normalize(b)
    max_len = max(len(norm_a), len(norm_b), 1)
    return 1 - levenshtein_distance(norm_a, norm_b) / max_len


def is_exact_match(a: str, b: str) -> bool:
    """True when both strings normalize to the same non-empty text."""
    norm_a = normalize(a)
    return bool(norm_a) and norm_a == normalize(b)
