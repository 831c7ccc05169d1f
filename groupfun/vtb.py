"""Store of vtuber voice quotations, organised as vtuber, category and clip."""

from __future__ import annotations

import json
import random
import re
import sqlite3
import threading
from dataclasses import dataclass
from os import PathLike
from typing import Any
from urllib.parse import quote_plus

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page"
DEFAULT_TIMEOUT = 15.0

FIRST_PROMPT = "请选择一个vtb并发送序号:\n"
SECOND_PROMPT = "请选择一个语录类别并发送序号:\n"
THIRD_PROMPT = "请选择一个语录并发送序号:\n"

_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:87.0) Gecko/20100101 Firefox/87.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
)

_FILENAME = re.compile(r".*/(.*)")


@dataclass(frozen=True)
class FirstCategory:
    """A vtuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class SecondCategory:
    """A category of one vtuber's quotations."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """A single voice clip."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""


_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)


def _text(value: Any) -> str:
    """Render a JSON value as text, the way a lenient JSON path lookup would."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _parse(payload: str | bytes | Any) -> Any:
    if isinstance(payload, (str, bytes, bytearray)):
        return json.loads(payload)
    return payload


def escape_record_url(url: str) -> str:
    """Percent-encode the file name part of a clip URL, spaces as %20."""
    match = _FILENAME.search(url)
    if match is None:
        return url
    filename = match.group(1)
    url = url.replace(filename, quote_plus(filename, safe=""))
    return url.replace("+", "%20")


class VtbDB:
    """SQLite store of vtubers, their quotation categories and clips."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._lock = threading.RLock()
        self._db = sqlite3.connect(
            str(path), isolation_level=None, check_same_thread=False
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS first_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "first_category_index INTEGER NOT NULL, "
            "first_category_name TEXT NOT NULL, "
            "first_category_uid TEXT NOT NULL, "
            "first_category_description TEXT NOT NULL, "
            "first_category_icon_path TEXT NOT NULL)"
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS second_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "second_category_index INTEGER NOT NULL, "
            "first_category_uid TEXT NOT NULL, "
            "second_category_name TEXT NOT NULL, "
            "second_category_author TEXT NOT NULL, "
            "second_category_description TEXT NOT NULL)"
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS third_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "third_category_index INTEGER NOT NULL, "
            "second_category_index INTEGER NOT NULL, "
            "first_category_uid TEXT NOT NULL, "
            "third_category_name TEXT NOT NULL, "
            "third_category_path TEXT NOT NULL, "
            "third_category_author TEXT NOT NULL, "
            "third_category_description TEXT NOT NULL)"
        )

    def __enter__(self) -> VtbDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._db.close()

    def _first_uid(self, first_index: int) -> str:
        row = self._db.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return row[0] if row else ""

    def first_category_message(self) -> str:
        """Return the numbered list of vtubers."""
        with self._lock:
            rows = self._db.execute(
                "SELECT first_category_index, first_category_name "
                "FROM first_category ORDER BY id"
            ).fetchall()
        return FIRST_PROMPT + "".join(f"{index}. {name}\n" for index, name in rows)

    def second_category_message(self, first_index: int) -> str:
        """Return the numbered categories of a vtuber, or "" when there are none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._db.execute(
                "SELECT second_category_index, second_category_name "
                "FROM second_category WHERE first_category_uid = ? ORDER BY id",
                (uid,),
            ).fetchall()
        if not rows:
            return ""
        return SECOND_PROMPT + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """Return the numbered clips of a category, or "" when there are none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._db.execute(
                "SELECT third_category_index, third_category_name "
                "FROM third_category WHERE first_category_uid = ? "
                "AND second_category_index = ? ORDER BY id",
                (uid, second_index),
            ).fetchall()
        if not rows:
            return ""
        return THIRD_PROMPT + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """Return the clip at the given indices, or None."""
        with self._lock:
            uid = self._first_uid(first_index)
            row = self._db.execute(
                f"SELECT {_THIRD_COLUMNS} FROM third_category "
                "WHERE first_category_uid = ? AND second_category_index = ? "
                "AND third_category_index = ? ORDER BY id LIMIT 1",
                (uid, second_index, third_index),
            ).fetchone()
        return ThirdCategory(*row) if row else None

    def random_vtb(self, rng: random.Random | None = None) -> ThirdCategory | None:
        """Return a random clip, or None when there are no clips."""
        rng = rng or random.Random()
        with self._lock:
            (count,) = self._db.execute(
                "SELECT COUNT(*) FROM third_category"
            ).fetchone()
            if count == 0:
                return None
            row = self._db.execute(
                f"SELECT {_THIRD_COLUMNS} FROM third_category "
                "ORDER BY id LIMIT 1 OFFSET ?",
                (rng.randrange(count),),
            ).fetchone()
        return ThirdCategory(*row) if row else None

    def first_category_by_uid(self, uid: str) -> FirstCategory | None:
        """Return the vtuber with ``uid``, or None."""
        with self._lock:
            row = self._db.execute(
                f"SELECT {_FIRST_COLUMNS} FROM first_category "
                "WHERE first_category_uid = ? ORDER BY id LIMIT 1",
                (uid,),
            ).fetchone()
        if row is None:
            return None
        index, name, found_uid, description, icon_path = row
        return FirstCategory(index, name, found_uid, description, icon_path)

    def store_vtb_list(self, payload: str | bytes | Any) -> list[str]:
        """Store the vtuber list JSON and return the vtubers' uids in order."""
        items = _parse(payload)
        if not isinstance(items, list):
            raise ValueError("vtb list must be a JSON array")
        uids = []
        with self._lock:
            for index, item in enumerate(items):
                name = _text(_get(item, "name"))
                description = _text(_get(item, "description"))
                icon_path = _text(_get(item, "icon_path"))
                uid = _text(_get(item, "uid"))
                exists = self._db.execute(
                    "SELECT 1 FROM first_category WHERE first_category_uid = ?",
                    (uid,),
                ).fetchone()
                if exists:
                    self._db.execute(
                        "UPDATE first_category SET first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE first_category_uid = ?",
                        (index, name, description, icon_path, uid),
                    )
                else:
                    self._db.execute(
                        f"INSERT INTO first_category ({_FIRST_COLUMNS}) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (index, name, uid, description, icon_path),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, payload: str | bytes | Any) -> None:
        """Store one vtuber's page JSON: its categories and their clips."""
        voices = _get(_parse(payload), "data", "voices")
        if not isinstance(voices, list):
            voices = []
        with self._lock:
            for second_index, second in enumerate(voices):
                self._store_second(uid, second_index, second)
                clips = _get(second, "voiceList")
                if not isinstance(clips, list):
                    continue
                for third_index, third in enumerate(clips):
                    self._store_third(uid, second_index, third_index, third)

    def _store_second(self, uid: str, second_index: int, item: Any) -> None:
        name = _text(_get(item, "categoryName"))
        author = _text(_get(item, "author"))
        description = _text(_get(item, "categoryDescription", "zh-CN"))
        key = (uid, second_index)
        exists = self._db.execute(
            "SELECT 1 FROM second_category WHERE first_category_uid = ? "
            "AND second_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._db.execute(
                "UPDATE second_category SET second_category_name = ?, "
                "second_category_author = ?, second_category_description = ? "
                "WHERE first_category_uid = ? AND second_category_index = ?",
                (name, author, description, *key),
            )
        else:
            self._db.execute(
                "INSERT INTO second_category (second_category_index, "
                "first_category_uid, second_category_name, second_category_author, "
                "second_category_description) VALUES (?, ?, ?, ?, ?)",
                (second_index, uid, name, author, description),
            )

    def _store_third(
        self, uid: str, second_index: int, third_index: int, item: Any
    ) -> None:
        name = _text(_get(item, "name"))
        description = _text(_get(item, "description", "zh-CN"))
        path = _text(_get(item, "path"))
        author = _text(_get(item, "author"))
        key = (uid, second_index, third_index)
        exists = self._db.execute(
            "SELECT 1 FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._db.execute(
                "UPDATE third_category SET third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ? WHERE first_category_uid = ? "
                "AND second_category_index = ? AND third_category_index = ?",
                (name, description, path, author, *key),
            )
        else:
            self._db.execute(
                f"INSERT INTO third_category ({_THIRD_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (third_index, second_index, uid, name, path, author, description),
            )

    def fetch_vtb_list(self) -> list[str]:
        """Download and store the vtuber list; return the uids."""
        response = requests.get(
            VTB_LIST_URL,
            headers={"User-Agent": random.choice(_USER_AGENTS)},
            timeout=DEFAULT_TIMEOUT,
        )
        return self.store_vtb_list(response.text)

    def fetch_vtb_page(self, uid: str) -> None:
        """Download and store one vtuber's page."""
        response = requests.get(
            VTB_PAGE_URL,
            params={"uid": uid},
            headers={"User-Agent": random.choice(_USER_AGENTS)},
            timeout=DEFAULT_TIMEOUT,
        )
        self.store_vtb_page(uid, response.text)