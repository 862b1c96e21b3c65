import re

_NON_ALNUM = re.compile(r"[^a-z0-9 ]+")


def normalize(name: str) -> str:
    """
    Normalize a title or name for comparison by:
    - Converting to lowercase
    - Replacing every character outside [a-z0-9 ] with a space
    - Collapsing runs of whitespace and trimming

    Args:
        name: The title or name to normalize

    Returns:
        Normalized string ("" for empty input)
    """
    if not name:
        return ""

    normalized = _NON_ALNUM.sub(" ", name.lower())

    return " ".join(normalized.split())
