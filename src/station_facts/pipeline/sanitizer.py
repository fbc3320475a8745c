"""Citation marker removal for free-text fields."""

import re

# "[1]", "[7, 10]", "[, 3]" plus the spaces directly in front of them. The
# lookbehind anchors a match at the start of a space run, keeping long runs
# of whitespace linear.
_CITATION_RE = re.compile(r"(?<![ \t])[ \t]*\[[,\s]*\d[\d,\s]*\]")


def strip_citations(text: str | None) -> str:
    """Remove bracketed citation markers and trim the result.

    Never raises and never returns None: missing or non-string input yields
    an empty string. Removal repeats until nothing matches, so nested markers
    such as ``[[1]2]`` cannot leave a fresh marker behind.

    Example:
        >>> strip_citations("Opened [1] in 1900 [7, 10].")
        'Opened in 1900.'
    """
    if not text or not isinstance(text, str):
        return ""
    cleaned, count = _CITATION_RE.subn("", text)
    while count:
        cleaned, count = _CITATION_RE.subn("", cleaned)
    return cleaned.strip()
