"""Reincarnation lottery: a weighted random birthplace and gender."""

from __future__ import annotations

import json
import random
from bisect import bisect_right
from itertools import accumulate
from typing import Iterable

SUCCESS_THRESHOLD = 1 << 27
GENDERS: tuple[tuple[str, int], ...] = (
    ("男孩子", 50707),
    ("女孩子", 48292),
    ("雌雄同体", 1001),
)
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


def load_rates(data: str | bytes) -> list[tuple[str, float]]:
    """Parse a JSON list of {"name", "weight"} objects into (name, weight) pairs."""
    items = json.loads(data)
    if not isinstance(items, list):
        raise ValueError("rate data must be a JSON array")
    rates = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("rate entry must be a JSON object")
        rates.append((str(item.get("name", "")), float(item.get("weight", 0.0))))
    return rates


class _Chooser:
    """Picks items with probability proportional to integer weights."""

    def __init__(self, choices: Iterable[tuple[str, int]]) -> None:
        pairs = [(item, weight) for item, weight in choices if weight > 0]
        if any(weight < 0 for _, weight in choices if isinstance(weight, int)):
            raise ValueError("weights must not be negative")
        self._items = [item for item, _ in pairs]
        self._totals = list(accumulate(weight for _, weight in pairs))
        if not self._totals or self._totals[-1] < 1:
            raise ValueError("no valid choices")

    def pick(self, rng: random.Random) -> str:
        roll = rng.randrange(self._totals[-1])
        return self._items[bisect_right(self._totals, roll)]


class Reborn:
    """Draws a birthplace by country weight and a gender by fixed weights."""

    def __init__(
        self, rates: Iterable[tuple[str, float]], rng: random.Random | None = None
    ) -> None:
        choices = []
        for name, weight in rates:
            if weight < 0:
                raise ValueError("weights must not be negative")
            choices.append((name, int(weight * 1e9)))
        self._countries = _Chooser(choices)
        self._genders = _Chooser(GENDERS)
        self._rng = rng or random.Random()

    def country(self) -> str:
        """Return a random country or region."""
        return self._countries.pick(self._rng)

    def gender(self) -> str:
        """Return a random gender."""
        return self._genders.pick(self._rng)

    def reborn(self) -> str:
        """Return the outcome of one reincarnation attempt."""
        if self._rng.getrandbits(31) > SUCCESS_THRESHOLD:
            return f"投胎成功！\n您出生在 {self.country()}, 是 {self.gender()}。"
        return FAILURE_TEXT