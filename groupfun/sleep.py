"""Good-night and good-morning tracking: who slept and woke in what order."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timedelta
from os import PathLike

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def _stamp(moment: datetime) -> str:
    return moment.isoformat(timespec="microseconds")


def _strip_clock(moment: datetime, hour: int) -> datetime:
    """Move ``moment`` to ``hour`` o'clock, keeping sub-second precision."""
    return moment - timedelta(
        hours=moment.hour - hour, minutes=moment.minute, seconds=moment.second
    )


class SleepDB:
    """SQLite store of each group member's last sleep or wake time."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._lock = threading.RLock()
        self._db = sqlite3.connect(
            str(path), isolation_level=None, check_same_thread=False
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS sleep_manage ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, group_id INTEGER NOT NULL, "
            "user_id INTEGER NOT NULL, sleep_time TEXT NOT NULL)"
        )

    def __enter__(self) -> SleepDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._db.close()

    def _record(
        self, gid: int, uid: int, now: datetime, since: datetime
    ) -> tuple[int, timedelta]:
        with self._lock:
            row = self._db.execute(
                "SELECT id, sleep_time FROM sleep_manage "
                "WHERE group_id = ? AND user_id = ? ORDER BY id LIMIT 1",
                (gid, uid),
            ).fetchone()
            elapsed = timedelta(0)
            if row is None:
                self._db.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) "
                    "VALUES (?, ?, ?)",
                    (gid, uid, _stamp(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[1])
                self._db.execute(
                    "UPDATE sleep_manage SET sleep_time = ? "
                    "WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), gid, uid),
                )
            (position,) = self._db.execute(
                "SELECT COUNT(*) FROM sleep_manage WHERE group_id = ? "
                "AND sleep_time <= ? AND sleep_time >= ?",
                (gid, _stamp(now), _stamp(since)),
            ).fetchone()
        return int(position), elapsed

    def sleep(
        self, gid: int, uid: int, now: datetime | None = None
    ) -> tuple[int, timedelta]:
        """Record going to sleep; return the night's position and time awake."""
        now = now or datetime.now()
        if now.hour >= 21:
            since = _strip_clock(now, 21)
        elif now.hour <= 3:
            since = _strip_clock(now, 21) - timedelta(days=1)
        else:
            since = datetime.min
        return self._record(gid, uid, now, since)

    def get_up(
        self, gid: int, uid: int, now: datetime | None = None
    ) -> tuple[int, timedelta]:
        """Record getting up; return the morning's position and time asleep."""
        now = now or datetime.now()
        return self._record(gid, uid, now, _strip_clock(now, 6))


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def split_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split ``delta`` into whole hours, minutes and seconds, truncating to zero."""
    total = delta // timedelta(microseconds=1)
    hours = _trunc_div(total, _US_PER_HOUR)
    total -= hours * _US_PER_HOUR
    minutes = _trunc_div(total, _US_PER_MINUTE)
    total -= minutes * _US_PER_MINUTE
    seconds = _trunc_div(total, _US_PER_SECOND)
    return hours, minutes, seconds


def is_morning(hour: int) -> bool:
    """Good mornings count from 6 to 12 o'clock."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Good nights count from 21 o'clock to 3 o'clock."""
    return hour >= 21 or hour <= 3