"""Full-text search keyword extraction."""
import re
from typing import Iterable

# Alphanumeric runs; underscore counts as a separator.
_WORD_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Split lowercased text into words, in order, duplicates included."""
    return _WORD_RE.findall(text.lower())


def extract_keywords(subject: str, bodies: Iterable[str]) -> str:
    """Build the keyword string for a thread.

    The subject and every body are joined with single spaces, lowercased
    and tokenized. Each word is kept once, at the position of its first
    occurrence.

    Args:
        subject: The thread subject.
        bodies: Message bodies in log order.

    Returns:
        Space-joined distinct words, e.g. ``"hello world hi there alice"``.
    """
    text = " ".join([subject or "", *bodies])
    # dict preserves insertion order
    return " ".join(dict.fromkeys(tokenize(text)))
