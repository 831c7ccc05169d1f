import io

import pytest
from PIL import Image

from groupfun.wordle import (
    CLASSES,
    Mark,
    TimesRunOutError,
    UnknownWordError,
    WordLengthError,
    WordleError,
    WordleGame,
    classify,
    load_wordlist,
)

DICTIONARY = ["apple", "paper", "lemon", "melon", "grape", "peach", "berry"]


def _open(data):
    return Image.open(io.BytesIO(data)).convert("RGB")


def test_classify_all_match():
    assert classify("apple", "apple") == [Mark.MATCH] * 5


def test_classify_mixed():
    assert classify("paper", "apple") == [
        Mark.EXIST,
        Mark.EXIST,
        Mark.MATCH,
        Mark.EXIST,
        Mark.NOT_EXIST,
    ]


def test_mark_colors_from_palette():
    marks = classify("paper", "apple")
    assert marks[2].color == (125, 166, 108)
    assert marks[0].color == (199, 183, 96)
    assert marks[4].color == (123, 123, 123)


def test_load_wordlist_sorts():
    assert load_wordlist("b\na\nc") == ["a", "b", "c"]


def test_six_letter_class_render_size():
    words = load_wordlist("banana\norange\ncherry")
    game = WordleGame("banana", words)
    assert len(game.target) == CLASSES["六阶"]
    assert _open(game.render()).size == (160, 184)


def test_win_is_case_insensitive():
    game = WordleGame("apple", DICTIONARY)
    assert game.guess("APPLE") is True
    assert game.guesses == ("apple",)


def test_wrong_guess_recorded():
    game = WordleGame("apple", DICTIONARY)
    assert game.guess("paper") is False
    assert game.guesses == ("paper",)


def test_empty_guess_records_nothing():
    game = WordleGame("apple", DICTIONARY)
    assert game.guess("") is False
    assert game.guesses == ()


def test_length_error():
    game = WordleGame("apple", DICTIONARY)
    with pytest.raises(WordLengthError):
        game.guess("pear")
    assert game.guesses == ()


def test_unknown_word():
    game = WordleGame("apple", DICTIONARY)
    with pytest.raises(UnknownWordError):
        game.guess("zzzzz")
    assert game.guesses == ()


def test_errors_share_base():
    game = WordleGame("apple", DICTIONARY)
    with pytest.raises(WordleError):
        game.guess("ab")


def test_times_run_out_after_length_plus_one():
    game = WordleGame("apple", DICTIONARY)
    for word in ["paper", "lemon", "melon", "grape", "peach"]:
        assert game.guess(word) is False
    with pytest.raises(TimesRunOutError):
        game.guess("berry")
    assert len(game.guesses) == 6


def test_win_on_last_try():
    game = WordleGame("apple", DICTIONARY)
    for word in ["paper", "lemon", "melon", "grape", "peach"]:
        game.guess(word)
    assert game.guess("apple") is True


def test_render_size_and_format():
    data = WordleGame("apple", DICTIONARY).render()
    assert data.startswith(b"\x89PNG")
    assert _open(data).size == (136, 160)


def test_render_colors():
    game = WordleGame("apple", DICTIONARY)
    game.guess("paper")
    image = _open(game.render())
    assert image.getpixel((10, 10)) == Mark.EXIST.color
    assert image.getpixel((11, 35)) == Mark.UNDONE.color
    assert image.getpixel((20, 44)) == (255, 255, 255)


def test_render_win_row():
    game = WordleGame("apple", DICTIONARY)
    game.guess("apple")
    image = _open(game.render())
    assert image.getpixel((10, 10)) == Mark.MATCH.color