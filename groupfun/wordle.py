"""Word-guessing game: find a hidden word within one more try than its length."""

from __future__ import annotations

import io
from enum import IntEnum
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

SIDE = 20
SPACE = 10
GAP = 4
WHITE = (255, 255, 255)

CLASSES: dict[str, int] = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}


class Mark(IntEnum):
    """How a guessed letter relates to the hidden word."""

    MATCH = 0
    EXIST = 1
    NOT_EXIST = 2
    UNDONE = 3

    @property
    def color(self) -> tuple[int, int, int]:
        """The cell colour used when drawing this mark."""
        return _COLORS[self]


_COLORS: dict[Mark, tuple[int, int, int]] = {
    Mark.MATCH: (125, 166, 108),
    Mark.EXIST: (199, 183, 96),
    Mark.NOT_EXIST: (123, 123, 123),
    Mark.UNDONE: (219, 219, 219),
}


class WordleError(Exception):
    """Base class for rejected guesses."""


class WordLengthError(WordleError):
    """The guess does not have the hidden word's length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWordError(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


class TimesRunOutError(WordleError):
    """The last allowed guess was used without finding the word."""

    def __init__(self) -> None:
        super().__init__("times run out")


def classify(guess: str, target: str) -> list[Mark]:
    """Mark each letter of ``guess`` against ``target``."""
    marks = []
    for letter, wanted in zip(guess, target):
        if letter == wanted:
            marks.append(Mark.MATCH)
        elif letter in target:
            marks.append(Mark.EXIST)
        else:
            marks.append(Mark.NOT_EXIST)
    return marks


def load_wordlist(text: str) -> list[str]:
    """Split a newline-separated word list and sort it."""
    return sorted(text.split("\n"))


class WordleGame:
    """One round of the game: a hidden word, a dictionary and the guesses so far."""

    def __init__(self, target: str, dictionary: Iterable[str]) -> None:
        self.target = target
        self._dictionary = frozenset(dictionary)
        self._guesses: list[str] = []
        self._max_attempts = len(target) + 1

    @property
    def guesses(self) -> tuple[str, ...]:
        """The accepted guesses, in order."""
        return tuple(self._guesses)

    def guess(self, word: str) -> bool:
        """Record a guess; return True when it is the hidden word.

        An empty guess records nothing. Rejected guesses raise a
        ``WordleError``; using up the last try raises ``TimesRunOutError``.
        """
        if not word:
            return False
        word = word.lower()
        win = word == self.target
        if not win:
            if len(word) != len(self.target):
                raise WordLengthError()
            if word not in self._dictionary:
                raise UnknownWordError()
        self._guesses.append(word)
        if win:
            return True
        if len(self._guesses) >= self._max_attempts:
            raise TimesRunOutError()
        return False

    def render(self) -> bytes:
        """Draw the board as PNG bytes."""
        size = len(self.target)
        width = (SIDE + GAP) * size + SPACE * 2 - GAP
        height = (SIDE + GAP) * (size + 1) + SPACE * 2 - GAP
        image = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        for row in range(size + 1):
            top = SPACE + row * (SIDE + GAP)
            if row < len(self._guesses):
                word = self._guesses[row]
                for col, mark in enumerate(classify(word, self.target)):
                    left = SPACE + col * (SIDE + GAP)
                    draw.rectangle(
                        (left, top, left + SIDE - 1, top + SIDE - 1), fill=mark.color
                    )
                    letter = word[col].upper()
                    bottom = draw.textbbox((0, 0), letter, font=font)[3]
                    draw.text(
                        (left + 7, top + 15 - bottom), letter, fill=WHITE, font=font
                    )
            else:
                for col in range(size):
                    left = SPACE + col * (SIDE + GAP) + 1
                    draw.rectangle(
                        (left, top + 1, left + SIDE - 2, top + SIDE - 1),
                        outline=Mark.UNDONE.color,
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()