"""Galgame picture sets scraped from a catalogue site and kept in SQLite."""

from __future__ import annotations

import random
import re
import sqlite3
import threading
import time
from dataclasses import dataclass
from os import PathLike
from typing import Any, Callable
from urllib.parse import quote_plus

import lxml.etree
import lxml.html

WEB_URL = "https://www.ymgal.com"
CG_TYPE = "Gal CG"
EMOTICON_TYPE = "其他"
WEB_PIC_URL = WEB_URL + "/co/picset/"
CG_URL = (
    WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(CG_TYPE) + "&page="
)
EMOTICON_URL = (
    WEB_URL
    + "/search?type=picset&sort=default&category="
    + quote_plus(EMOTICON_TYPE)
    + "&page="
)
DEFAULT_PAUSE = 0.5

_PAGE_NUMBER_XPATH = (
    "//*[@id='pager-box']/div/a[@class='icon item pager-next']"
    "/preceding-sibling::a[1]/text()"
)
_PIC_ID_XPATH = "//*[@id='picset-result-list']/ul/div/div[1]/a"
_PICTURE_COUNT_XPATH = (
    "//div[@class='meta-info']/div[@class='meta-right']/span[2]/text()"
)
_PICTURE_XPATHS = {
    CG_TYPE: (
        "//*[@id='main-picset-warp']/div/div[2]/div"
        "/div[@class='swiper-wrapper']/div[{}]"
    ),
    EMOTICON_TYPE: (
        "//*[@id='main-picset-warp']/div/div[@class='stream-list']/div[{}]/img"
    ),
}
_NUMBER = re.compile(r"\d+")
_COLUMNS = "id, title, picture_type, picture_description, picture_list"


@dataclass(frozen=True)
class Picset:
    """A picture set: its title, category, description and comma-joined URLs."""

    id: int
    title: str
    picture_type: str
    picture_description: str = ""
    picture_list: str = ""

    @property
    def pictures(self) -> list[str]:
        """The set's picture URLs."""
        return self.picture_list.split(",") if self.picture_list else []


class YmgalDB:
    """SQLite store of picture sets keyed by their site id."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._lock = threading.RLock()
        self._db = sqlite3.connect(
            str(path), isolation_level=None, check_same_thread=False
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS ymgal ("
            "id INTEGER PRIMARY KEY, title TEXT NOT NULL, "
            "picture_type TEXT NOT NULL, picture_description TEXT NOT NULL, "
            "picture_list TEXT NOT NULL)"
        )

    def __enter__(self) -> YmgalDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._db.close()

    def upsert(self, picset: Picset) -> None:
        """Insert the picture set, or update the one with the same id."""
        with self._lock:
            self._db.execute(
                f"INSERT INTO ymgal ({_COLUMNS}) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET title = excluded.title, "
                "picture_type = excluded.picture_type, "
                "picture_description = excluded.picture_description, "
                "picture_list = excluded.picture_list",
                (
                    picset.id,
                    picset.title,
                    picset.picture_type,
                    picset.picture_description,
                    picset.picture_list,
                ),
            )

    def get_by_id(self, pid: int | str) -> Picset | None:
        """Return the picture set with id ``pid``, or None."""
        try:
            key = int(pid)
        except (TypeError, ValueError):
            return None
        with self._lock:
            row = self._db.execute(
                f"SELECT {_COLUMNS} FROM ymgal WHERE id = ?", (key,)
            ).fetchone()
        return Picset(*row) if row else None

    def _pick(
        self, where: str, params: tuple[Any, ...], rng: random.Random | None
    ) -> Picset | None:
        rng = rng or random.Random()
        with self._lock:
            (count,) = self._db.execute(
                f"SELECT COUNT(*) FROM ymgal WHERE {where}", params
            ).fetchone()
            if count == 0:
                return None
            row = self._db.execute(
                f"SELECT {_COLUMNS} FROM ymgal WHERE {where} "
                "ORDER BY id LIMIT 1 OFFSET ?",
                (*params, rng.randrange(count)),
            ).fetchone()
        return Picset(*row) if row else None

    def random(
        self, picture_type: str, rng: random.Random | None = None
    ) -> Picset | None:
        """Return a random picture set of ``picture_type``, or None."""
        return self._pick("picture_type = ?", (picture_type,), rng)

    def search_by_key(
        self, picture_type: str, key: str, rng: random.Random | None = None
    ) -> Picset | None:
        """Return a random set whose title or description contains ``key``."""
        pattern = f"%{key}%"
        return self._pick(
            "picture_type = ? AND (picture_description LIKE ? OR title LIKE ?)",
            (picture_type, pattern, pattern),
            rng,
        )


def _document(html: str | bytes) -> Any:
    try:
        return lxml.html.document_fromstring(html)
    except (lxml.etree.ParserError, ValueError) as exc:
        raise ValueError(f"cannot parse page: {exc}") from exc


def _first(doc: Any, xpath: str) -> Any:
    found = doc.xpath(xpath)
    if not found:
        raise ValueError(f"nothing found at {xpath}")
    return found[0]


def _attr(element: Any, index: int) -> str:
    values = list(element.attrib.values())
    if index >= len(values):
        raise ValueError(f"element has no attribute at position {index}")
    return values[index]


def parse_page_number(html: str | bytes) -> int:
    """Return the last page number shown by a search page's pager."""
    return int(str(_first(_document(html), _PAGE_NUMBER_XPATH)))


def parse_pic_ids(html: str | bytes) -> list[str]:
    """Return the picture-set ids linked from a search page, in page order."""
    ids = []
    for link in _document(html).xpath(_PIC_ID_XPATH):
        values = list(link.attrib.values())
        match = _NUMBER.search(values[0]) if values else None
        ids.append(match.group() if match else "")
    return ids


def parse_picset(html: str | bytes, pid: int, picture_type: str) -> Picset:
    """Read a picture set's title, description and picture URLs from its page."""
    try:
        template = _PICTURE_XPATHS[picture_type]
    except KeyError:
        raise ValueError(f"unknown picture type: {picture_type!r}") from None
    doc = _document(html)
    title = _attr(_first(doc, "//meta[@name='name']"), 1)
    description = _attr(_first(doc, "//meta[@name='description']"), 1)
    match = _NUMBER.search(str(_first(doc, _PICTURE_COUNT_XPATH)))
    if match is None:
        raise ValueError("picture count not found")
    urls = [
        _attr(_first(doc, template.format(i)), 1)
        for i in range(1, int(match.group()) + 1)
    ]
    return Picset(int(pid), title, picture_type, description, ",".join(urls))


def update(
    db: YmgalDB, fetch: Callable[[str], str | bytes], pause: float = DEFAULT_PAUSE
) -> int:
    """Scrape new picture sets into ``db``; return how many were stored.

    Sets are visited oldest first and each type stops at the first set
    already stored.
    """
    cg_pages = parse_page_number(fetch(CG_URL + "1"))
    emoticon_pages = parse_page_number(fetch(EMOTICON_URL + "1"))
    listings = []
    for picture_type, base, pages in (
        (CG_TYPE, CG_URL, cg_pages),
        (EMOTICON_TYPE, EMOTICON_URL, emoticon_pages),
    ):
        ids: list[str] = []
        for page in range(1, pages + 1):
            ids.extend(parse_pic_ids(fetch(base + str(page))))
            time.sleep(pause)
        listings.append((picture_type, ids))
    stored = 0
    for picture_type, ids in listings:
        for pid_text in reversed(ids):
            existing = db.get_by_id(pid_text)
            if existing is not None and existing.picture_list:
                break
            pid = int(pid_text)
            db.upsert(parse_picset(fetch(WEB_PIC_URL + pid_text), pid, picture_type))
            stored += 1
            time.sleep(pause)
    return stored