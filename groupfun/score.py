"""Daily sign-in points with levels and a score leaderboard."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime
from os import PathLike

SCORE_MAX = 120
SIGN_IN_MAX = 1
LEVELS: tuple[int, ...] = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)


class ScoreDB:
    """SQLite store of each user's score and sign-in count."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._lock = threading.RLock()
        self._db = sqlite3.connect(
            str(path), isolation_level=None, check_same_thread=False
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS score "
            "(uid INTEGER PRIMARY KEY, score INTEGER NOT NULL DEFAULT 0)"
        )
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS sign_in "
            "(uid INTEGER PRIMARY KEY, count INTEGER NOT NULL DEFAULT 0, "
            "updated_at TEXT NOT NULL)"
        )

    def __enter__(self) -> ScoreDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._db.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero entry if absent."""
        with self._lock:
            self._db.execute(
                "INSERT OR IGNORE INTO score (uid, score) VALUES (?, 0)", (uid,)
            )
            row = self._db.execute(
                "SELECT score FROM score WHERE uid = ?", (uid,)
            ).fetchone()
        return int(row[0])

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        with self._lock:
            self._db.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (uid, score),
            )

    def get_sign_in(self, uid: int) -> tuple[int, datetime]:
        """Return the user's sign-in count and last update time, creating if absent."""
        with self._lock:
            self._db.execute(
                "INSERT OR IGNORE INTO sign_in (uid, count, updated_at) VALUES (?, 0, ?)",
                (uid, _stamp(datetime.now())),
            )
            row = self._db.execute(
                "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
            ).fetchone()
        return int(row[0]), datetime.fromisoformat(row[1])

    def set_sign_in_count(self, uid: int, count: int) -> None:
        """Insert or update the user's sign-in count, stamping the current time."""
        with self._lock:
            self._db.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (uid, count, _stamp(datetime.now())),
            )

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to ``n`` (uid, score) pairs, highest score first."""
        with self._lock:
            rows = self._db.execute(
                "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
            ).fetchall()
        return [(int(uid), int(score)) for uid, score in rows]


def _stamp(moment: datetime) -> str:
    return moment.isoformat(timespec="microseconds")


def get_level(count: int) -> int:
    """Return the level reached with ``count`` points, or -1 when out of range."""
    for level, threshold in enumerate(LEVELS):
        if count == threshold:
            return level
        if count < threshold:
            return level - 1
    return -1


def next_level_score(level: int) -> int:
    """Return the points needed for the level after ``level``."""
    if level < len(LEVELS) - 1:
        return LEVELS[level + 1]
    return SCORE_MAX


def get_hour_word(moment: datetime) -> str:
    """Return the greeting for the hour of ``moment``."""
    hour = moment.hour
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""