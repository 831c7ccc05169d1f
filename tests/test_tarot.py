import json
import random

import pytest

from groupfun.tarot import (
    BED,
    DECK_SIZE,
    Card,
    Formation,
    TarotError,
    build_info_map,
    card_image_url,
    draw_cards,
    formation_text,
    load_cards,
    load_formations,
    parse_draw_count,
)

CARDS_JSON = json.dumps(
    {
        "0": {
            "name": "愚者(The Fool)",
            "info": {
                "description": "start",
                "reverseDescription": "reckless",
                "imgUrl": "MajorArcana/0.png",
            },
        },
        "1": {"name": "魔术师(The Magician)", "info": {"description": "skill"}},
    }
)

FORMATIONS_JSON = json.dumps(
    {"圣三角": {"cards_num": 3, "is_cut": False, "represent": [["A", "B", "C"]]}}
)


def test_load_cards():
    cards = load_cards(CARDS_JSON)
    assert cards["0"] == Card(
        "愚者(The Fool)", "start", "reckless", "MajorArcana/0.png"
    )
    assert cards["1"].reverse_description == ""


def test_load_cards_rejects_bad_json():
    with pytest.raises(TarotError):
        load_cards("not json")


def test_build_info_map_strips_parenthesis():
    info = build_info_map(load_cards(CARDS_JSON))
    assert set(info) == {"愚者", "魔术师"}
    assert info["愚者"].description == "start"


def test_load_formations():
    formations = load_formations(FORMATIONS_JSON)
    assert formations["圣三角"] == Formation(3, False, [["A", "B", "C"]])


@pytest.mark.parametrize(
    "match, in_group, expected",
    [("", False, 1), ("1张", False, 1), ("5张", True, 5), ("20张", True, 20)],
)
def test_parse_draw_count(match, in_group, expected):
    assert parse_draw_count(match, in_group) == expected


@pytest.mark.parametrize(
    "match, in_group, message",
    [
        ("0张", True, "张数必须为正"),
        ("3张", False, "抽取多张仅支持群聊"),
        ("21张", True, "抽取张数过多"),
    ],
)
def test_parse_draw_count_errors(match, in_group, message):
    with pytest.raises(TarotError, match=message):
        parse_draw_count(match, in_group)


def test_draw_cards_distinct_and_in_range():
    cards = load_cards(CARDS_JSON)
    draws = draw_cards(cards, DECK_SIZE, random.Random(1))
    indices = [index for index, _, _ in draws]
    assert sorted(indices) == list(range(DECK_SIZE))
    for index, _, name in draws:
        assert name == (cards[str(index)].name if str(index) in cards else "")


def test_draw_cards_deterministic():
    cards = load_cards(CARDS_JSON)
    draws = draw_cards(cards, 5, random.Random(7))
    assert len(draws) == 5
    assert len({index for index, _, _ in draws}) == 5
    assert all(0 <= index < DECK_SIZE for index, _, _ in draws)
    assert draws == draw_cards(cards, 5, random.Random(7))


def test_draw_cards_too_many():
    with pytest.raises(TarotError):
        draw_cards({}, DECK_SIZE + 1, random.Random(0))


def test_card_image_url():
    assert card_image_url(3, False) == BED + "MajorArcana/3.png"
    assert card_image_url(3, True) == BED + "MajorArcanaReverse/3.png"


def test_formation_text():
    formation = load_formations(FORMATIONS_JSON)["圣三角"]
    draws = [(0, False, "愚者(The Fool)"), (1, True, "魔术师(The Magician)")]
    assert formation_text("Alice", formation, draws) == (
        "Alice\nA: 正位 的 愚者(The Fool)\nB: 逆位 的 魔术师(The Magician)\n"
    )


def test_formation_text_too_many_draws():
    formation = Formation(1, False, [["A"]])
    with pytest.raises(TarotError):
        formation_text("Alice", formation, [(0, False, "x"), (1, False, "y")])