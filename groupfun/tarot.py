"""Tarot readings over the 22 cards of the major arcana."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from typing import Mapping, Sequence

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
DECK_SIZE = 22
MAX_DRAW = 20
POSITIONS = ("正位", "逆位")
REASONS = ("您抽到的是~\n", "锵锵锵，塔罗牌的预言是~\n", "诶，让我看看您抽到了~\n")


class TarotError(Exception):
    """Raised for bad draw requests or malformed card data."""


@dataclass(frozen=True)
class Card:
    """A card's name, meanings and image path."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A spread: how many cards it takes and what each position represents."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


def _load_object(data: str | bytes) -> dict:
    try:
        obj = json.loads(data)
    except ValueError as exc:
        raise TarotError(str(exc)) from exc
    if not isinstance(obj, dict):
        raise TarotError("expected a JSON object")
    return obj


def load_cards(data: str | bytes) -> dict[str, Card]:
    """Parse the card JSON, keyed by card number as a string."""
    cards = {}
    for key, entry in _load_object(data).items():
        info = entry.get("info") or {}
        cards[key] = Card(
            name=entry.get("name", ""),
            description=info.get("description", ""),
            reverse_description=info.get("reverseDescription", ""),
            img_url=info.get("imgUrl", ""),
        )
    return cards


def load_formations(data: str | bytes) -> dict[str, Formation]:
    """Parse the spread JSON, keyed by spread name."""
    return {
        name: Formation(
            cards_num=int(entry.get("cards_num", 0)),
            is_cut=bool(entry.get("is_cut", False)),
            represent=[list(row) for row in entry.get("represent", [])],
        )
        for name, entry in _load_object(data).items()
    }


def build_info_map(cards: Mapping[str, Card]) -> dict[str, Card]:
    """Index cards by their name without the parenthesised part."""
    return {card.name.split("(")[0]: card for card in cards.values()}


def parse_draw_count(match: str, in_group: bool) -> int:
    """Turn the optional "N张" part of a draw request into a card count."""
    if not match:
        return 1
    try:
        n = int(match.removesuffix("张"))
    except ValueError as exc:
        raise TarotError(str(exc)) from exc
    if n <= 0:
        raise TarotError("张数必须为正")
    if n > 1 and not in_group:
        raise TarotError("抽取多张仅支持群聊")
    if n > MAX_DRAW:
        raise TarotError("抽取张数过多")
    return n


def draw_cards(
    cards: Mapping[str, Card], n: int, rng: random.Random | None = None
) -> list[tuple[int, bool, str]]:
    """Draw ``n`` distinct cards as (number, reversed, name) triples."""
    if not 0 <= n <= DECK_SIZE:
        raise TarotError(f"cannot draw {n} cards")
    rng = rng or random.Random()
    draws = []
    for index in rng.sample(range(DECK_SIZE), n):
        reverse = rng.randrange(2) == 1
        card = cards.get(str(index))
        draws.append((index, reverse, card.name if card else ""))
    return draws


def card_image_url(index: int, reverse: bool) -> str:
    """Return the image URL of a card, upright or reversed."""
    suffix = "Reverse" if reverse else ""
    return f"{BED}MajorArcana{suffix}/{index}.png"


def formation_text(
    name: str, formation: Formation, draws: Sequence[tuple[int, bool, str]]
) -> str:
    """Describe a spread reading for ``name``, one line per position."""
    represent = formation.represent[0] if formation.represent else []
    if len(draws) > len(represent):
        raise TarotError("formation has fewer positions than cards drawn")
    lines = [name]
    for meaning, (_, reverse, card_name) in zip(represent, draws):
        lines.append(f"{meaning}: {POSITIONS[int(reverse)]} 的 {card_name}")
    return "\n".join(lines) + "\n"