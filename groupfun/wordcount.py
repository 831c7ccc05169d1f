"""Hot-word counting over chat history: frequent Chinese words minus stopwords."""

from __future__ import annotations

import re
from bisect import bisect_left
from collections import Counter
from typing import Iterable, Mapping, Sequence

TOP_N = 20
DEFAULT_MESSAGES = 1000
MAX_MESSAGES = 10000

_CHINESE = re.compile(r"[\u4e00-\u9fa5]+")


def load_stopwords(text: str) -> list[str]:
    """Split a stopword file into lines, dropping carriage returns, and sort them."""
    return sorted(text.replace("\r", "").split("\n"))


def is_counted(word: str, stopwords: Sequence[str]) -> bool:
    """Whether ``word`` is all Chinese characters and not in sorted ``stopwords``."""
    if not _CHINESE.fullmatch(word):
        return False
    index = bisect_left(stopwords, word)
    return index >= len(stopwords) or stopwords[index] != word


def count_words(slices: Iterable[str], stopwords: Sequence[str]) -> dict[str, int]:
    """Count the trimmed word slices that pass ``is_counted``."""
    counts: Counter[str] = Counter()
    for piece in slices:
        word = piece.strip()
        if is_counted(word, stopwords):
            counts[word] += 1
    return dict(counts)


def rank_by_word_count(frequencies: Mapping[str, int]) -> list[tuple[str, int]]:
    """Return (word, count) pairs, most frequent first."""
    return sorted(frequencies.items(), key=lambda pair: (-pair[1], pair[0]))