"""Ticket key recognition and title clean-up."""

import re

_KEY_IN_TEXT = re.compile(r"\[?([A-Z]+-\d+)\]?")
_KEY_WITH_SPACING = re.compile(r"\s*\[?[A-Z]+-\d+\]?\s*")
_WHOLE_KEY = re.compile(r"^[A-Z]+-\d+$")


def extract_key(text: str) -> str:
    """Return the first ticket key found in text, or "".

    "Fix login [SRE-12]" -> "SRE-12", "no key here" -> ""
    """
    match = _KEY_IN_TEXT.search(text)
    return match.group(1) if match else ""


def remove_key(text: str) -> str:
    """Strip every ticket key (bracketed or bare) from text.

    "Fix login [SRE-12]" -> "Fix login". Stripping twice is a no-op.
    """
    return _KEY_WITH_SPACING.sub(" ", text).strip()


def is_key(text: str) -> bool:
    """True when text is exactly a ticket key such as "OBS-1"."""
    return bool(_WHOLE_KEY.match(text))


def normalize_key(key: str) -> str:
    """Upper-case and trim a key for comparisons."""
    return key.strip().upper()


def same_key(left: str, right: str) -> bool:
    """Compare two keys, ignoring case and surrounding whitespace."""
    return bool(left.strip()) and normalize_key(left) == normalize_key(right)
