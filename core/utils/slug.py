"""Slug derivation for job titles."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    Convert text to URL-safe slug.

    Lower-cases the text, collapses every run of non-alphanumeric characters
    into a single hyphen and strips hyphens from both ends.

    Args:
        text: Text to convert

    Returns:
        URL-safe slug ("Senior Engineer" -> "senior-engineer")
    """
    return _NON_ALNUM.sub("-", text.lower()).strip("-")
