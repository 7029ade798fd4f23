"""Free-text normalization applied to names and descriptions before storage."""

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(raw: str | None) -> str:
    """Trim, collapse internal whitespace runs to one space, and upper-case.

    Idempotent: ``normalize_text(normalize_text(x)) == normalize_text(x)``.
    """
    collapsed = _WHITESPACE_RUN.sub(" ", (raw or "").strip())
    return collapsed.upper()


def to_upper_strict(raw: str | None) -> str:
    """Upper-case without trimming; used for the visible state of search inputs."""
    return (raw or "").upper()
