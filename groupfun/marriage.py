"""Daily group-marriage registry: one spouse per member per group per day."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from os import PathLike
from typing import Callable, Iterator

DATE_FORMAT = "%Y/%m/%d"
UPDATE_TABLE = "updateinfo"
ALL_GROUPS = "ALL"
NAME_WIDTH_LIMIT = 350
ELLIPSIS = "......"

_GROUP_COLUMNS = "user, target, username, targetname, updatetime"


class RegistryError(Exception):
    """Raised when the marriage registry database fails."""


class Status(IntEnum):
    """A member's marital status in a group for the current day."""

    WIFE = 0
    HUSBAND = 1
    SINGLE = 3


@dataclass(frozen=True)
class MarriageRecord:
    """One registered couple; ``target`` 0 marks a self-declared single."""

    user: int
    target: int
    username: str
    targetname: str
    updatetime: str


def _today() -> str:
    return date.today().strftime(DATE_FORMAT)


def _table_name(gid: int | str) -> str:
    try:
        return str(int(gid))
    except (TypeError, ValueError):
        raise RegistryError(f"invalid group id: {gid!r}") from None


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class Registry:
    """SQLite-backed store of each group's couples and its last reset date."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._lock = threading.RLock()
        try:
            self._db = sqlite3.connect(
                str(path), isolation_level=None, check_same_thread=False
            )
            self._db.execute(
                f"CREATE TABLE IF NOT EXISTS {UPDATE_TABLE} "
                "(gid INTEGER PRIMARY KEY, updatetime TEXT NOT NULL)"
            )
        except sqlite3.Error as exc:
            raise RegistryError(str(exc)) from exc

    def __enter__(self) -> Registry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._session():
            self._db.close()

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._db
            except sqlite3.Error as exc:
                raise RegistryError(str(exc)) from exc

    def _create_group(self, name: str) -> None:
        self._db.execute(
            f"CREATE TABLE IF NOT EXISTS {_quote(name)} ("
            "user INTEGER PRIMARY KEY, target INTEGER NOT NULL, "
            "username TEXT NOT NULL, targetname TEXT NOT NULL, "
            "updatetime TEXT NOT NULL)"
        )

    def _mark_updated(self, gid: int) -> None:
        self._db.execute(
            f"INSERT OR REPLACE INTO {UPDATE_TABLE} (gid, updatetime) VALUES (?, ?)",
            (gid, _today()),
        )

    def _insert(self, name: str, record: MarriageRecord) -> None:
        self._db.execute(
            f"INSERT OR REPLACE INTO {_quote(name)} ({_GROUP_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                record.user,
                record.target,
                record.username,
                record.targetname,
                record.updatetime,
            ),
        )

    def _find(self, name: str, column: str, value: int) -> MarriageRecord | None:
        row = self._db.execute(
            f"SELECT {_GROUP_COLUMNS} FROM {_quote(name)} WHERE {column} = ? LIMIT 1",
            (value,),
        ).fetchone()
        return MarriageRecord(*row) if row else None

    def check_update(self, gid: int) -> str:
        """Return the date the group was last reset, recording today if unknown."""
        with self._session() as db:
            row = db.execute(
                f"SELECT updatetime FROM {UPDATE_TABLE} WHERE gid = ?", (int(gid),)
            ).fetchone()
            if row is not None:
                return row[0]
            today = _today()
            db.execute(
                f"INSERT INTO {UPDATE_TABLE} (gid, updatetime) VALUES (?, ?)",
                (int(gid), today),
            )
            return today

    def reset(self, gid: int | str) -> None:
        """Clear one group's couples, or every group's when ``gid`` is "ALL"."""
        with self._session() as db:
            if str(gid) == ALL_GROUPS:
                names = [
                    row[0]
                    for row in db.execute(
                        "SELECT name FROM sqlite_master WHERE type = 'table' AND name != ?",
                        (UPDATE_TABLE,),
                    )
                ]
                for name in names:
                    db.execute(f"DROP TABLE {_quote(name)}")
                    try:
                        self._mark_updated(int(name))
                    except ValueError:
                        continue
                return
            name = _table_name(gid)
            exists = db.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
            ).fetchone()
            if not exists:
                self._create_group(name)
                return
            db.execute(f"DROP TABLE {_quote(name)}")
            self._mark_updated(int(name))

    def divorce(self, gid: int, target: int) -> None:
        """Remove every couple whose target is ``target``."""
        name = _table_name(gid)
        with self._session() as db:
            db.execute(f"DELETE FROM {_quote(name)} WHERE target = ?", (target,))

    def remarry(
        self, gid: int, uid: int, target: int, username: str, targetname: str
    ) -> None:
        """Register ``uid`` with ``target`` unless both already head a couple."""
        name = _table_name(gid)
        with self._session():
            if self._find(name, "user", uid) and self._find(name, "user", target):
                return
            self._insert(
                name, MarriageRecord(uid, target, username, targetname, _today())
            )

    def roster(self, gid: int) -> list[MarriageRecord]:
        """Return the group's couples, ordered by user, without singles."""
        name = _table_name(gid)
        with self._session() as db:
            self._create_group(name)
            rows = db.execute(
                f"SELECT {_GROUP_COLUMNS} FROM {_quote(name)} "
                "WHERE target != 0 ORDER BY user"
            ).fetchall()
        return [MarriageRecord(*row) for row in rows]

    def lookup(self, gid: int, uid: int) -> tuple[MarriageRecord | None, Status]:
        """Return the member's record and status; the record is None if single."""
        name = _table_name(gid)
        with self._session():
            self._create_group(name)
            record = self._find(name, "user", uid)
            if record is not None:
                return record, Status.HUSBAND
            record = self._find(name, "target", uid)
            if record is not None:
                return record, Status.WIFE
        return None, Status.SINGLE

    def register(
        self, gid: int, uid: int, target: int, username: str, targetname: str
    ) -> None:
        """Record ``uid`` as married to ``target`` today."""
        name = _table_name(gid)
        with self._session():
            self._create_group(name)
            self._insert(
                name, MarriageRecord(uid, target, username, targetname, _today())
            )


def slice_name(name: str, measure: Callable[[str], float]) -> str:
    """Shorten ``name`` with an ellipsis when its drawn width exceeds the limit."""
    width = 0
    last = 0
    overflow = False
    for index, char in enumerate(name):
        width += int(measure(char))
        if width > NAME_WIDTH_LIMIT:
            overflow = True
            break
        last = index
    if not overflow:
        return name
    return name[: max(last - 1, 0)] + ELLIPSIS


def _refresh(registry: Registry, gid: int) -> bool:
    """Reset the group if its date is stale; report whether it was reset."""
    if registry.check_update(gid) != _today():
        registry.reset(gid)
        return True
    return False


def _target_of(record: MarriageRecord | None) -> int:
    return record.target if record is not None else 0


def check_single(registry: Registry, gid: int, uid: int, fiancee: int) -> str | None:
    """Return why ``uid`` may not propose to ``fiancee``, or None if allowed."""
    if _refresh(registry, gid):
        return None
    user_record, user_status = registry.lookup(gid, uid)
    fiancee_record, fiancee_status = registry.lookup(gid, fiancee)
    if user_status is Status.SINGLE and fiancee_status is Status.SINGLE:
        return None
    user_target = _target_of(user_record)
    if user_target == fiancee:
        return "笨蛋~你们明明已经在一起了啊w"
    if user_status is not Status.SINGLE and user_target == 0:
        return "今天的你是单身贵族噢"
    if user_status is Status.HUSBAND:
        return "笨蛋~你家里还有个吃白饭的w"
    if user_status is Status.WIFE:
        return "该是0就是0，当0有什么不好"
    if fiancee_status is not Status.SINGLE and _target_of(fiancee_record) == 0:
        return "今天的ta是单身贵族噢"
    if fiancee_status is Status.HUSBAND:
        return "他有别的女人了，你该放下了"
    if fiancee_status is Status.WIFE:
        return "这是一个纯爱的世界，拒绝NTR"
    return None


def check_mistress(registry: Registry, gid: int, uid: int, fiancee: int) -> str | None:
    """Return why ``uid`` may not come between ``fiancee`` and spouse, or None."""
    if _refresh(registry, gid):
        return "ta现在还是单身哦，快向ta表白吧！"
    user_record, user_status = registry.lookup(gid, uid)
    user_target = _target_of(user_record)
    if user_target == fiancee:
        return "笨蛋~你们明明已经在一起了啊w"
    if user_status is not Status.SINGLE and user_target == 0:
        return "今天的你是单身贵族哦"
    if fiancee == uid:
        return None
    if user_status is Status.HUSBAND:
        return "打灭，不给纳小妾！"
    if user_status is Status.WIFE:
        return "该是0就是0，当0有什么不好"
    fiancee_record, fiancee_status = registry.lookup(gid, fiancee)
    if fiancee_status is Status.SINGLE:
        return "ta现在还是单身哦，快向ta表白吧！"
    if _target_of(fiancee_record) == 0:
        return "今天的ta是单身贵族哦"
    return None


def check_married(registry: Registry, gid: int, uid: int) -> str | None:
    """Return why ``uid`` cannot divorce today, or None if married."""
    if _refresh(registry, gid):
        return "今天你还没有结婚哦"
    _, status = registry.lookup(gid, uid)
    if status is Status.SINGLE:
        return "今天你还没有结婚哦"
    return None