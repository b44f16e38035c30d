import os
import json
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from storage.errors import SaveConflictError, StorageIOError, StatsDecodeError
from utility.rwlock import ReadWriteLock
from utility.logger import get_logger
log = get_logger()


@dataclass
class PlayerStats:
    answered: Dict[str, int] = field(default_factory=dict)  # question_id -> accepted offer

    @property
    def total_money(self) -> int:
        # Recomputed every time, answer counts are bounded by the pool size
        return sum(self.answered.values())

    def copy(self) -> "PlayerStats":
        return PlayerStats(answered=dict(self.answered))

    def to_dict(self) -> dict:
        return {"answered": dict(self.answered)}

    @classmethod
    def from_dict(cls, data) -> "PlayerStats":
        """
        Build stats from one decoded JSON entry.
        Raises:
            ValueError: the entry doesn't look like {"answered": {"<id>": <uint>}}
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        answered = data.get("answered") or {}
        if not isinstance(answered, dict):
            raise ValueError(f"'answered' must be an object, got {type(answered).__name__}")
        for question_id, offer in answered.items():
            validate_offer(offer)
        return cls(answered=dict(answered))


def validate_offer(offer):
    if isinstance(offer, bool) or not isinstance(offer, int):
        raise ValueError(f"offer must be a whole number of dollars, got {offer!r}")
    if offer < 0:
        raise ValueError(f"offer can't be negative, got {offer}")


# ──────────────────────────
# File helpers
# ──────────────────────────
def save_stats_file(stats: Dict[str, PlayerStats], file_path: str, overwrite: bool):
    """
    Write the stats to file_path as JSON.
    The data goes to a temp file next to the target first and is then moved over it,
    so a crash mid-write never leaves a half written snapshot behind.
    Raises:
        SaveConflictError: file_path exists and overwrite is False
        StorageIOError: anything the filesystem complains about
    """
    try:
        exists = os.path.exists(file_path)
    except OSError as e:
        raise StorageIOError("checking", file_path, e) from e
    if exists and not overwrite:
        raise SaveConflictError(file_path)

    directory = os.path.dirname(file_path)
    tmp_path = file_path + ".tmp"
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as file:
            json.dump({player_id: s.to_dict() for player_id, s in stats.items()}, file, indent=2)
        os.replace(tmp_path, file_path)
    except OSError as e:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError as cleanup_error:
                log.warning(f"Couldn't remove {tmp_path}: {cleanup_error}")
        raise StorageIOError("writing", file_path, e) from e


def load_stats_file(file_path: str) -> Dict[str, PlayerStats]:
    """
    Read a snapshot written by save_stats_file.
    Raises:
        FileNotFoundError: there is no snapshot yet (callers decide what that means)
        StorageIOError: the file exists but can't be read
        StatsDecodeError: the file isn't valid JSON or has the wrong shape
    """
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as e:
        raise StatsDecodeError(file_path, e) from e
    except UnicodeDecodeError as e:
        raise StatsDecodeError(file_path, e) from e
    except RecursionError as e:
        # Nested deeper than the decoder can follow
        raise StatsDecodeError(file_path, e) from e
    except OSError as e:
        raise StorageIOError("reading", file_path, e) from e

    if not isinstance(data, dict):
        raise StatsDecodeError(file_path, f"top level must be an object, got {type(data).__name__}")
    stats = {}
    for player_id, entry in data.items():
        try:
            stats[player_id] = PlayerStats.from_dict(entry)
        except ValueError as e:
            raise StatsDecodeError(file_path, f"player {player_id}: {e}") from e
    return stats


class PlayerStatsStore:
    def __init__(self, save_path: str, overwrite: bool = True):
        self.save_path = save_path
        self.overwrite = overwrite
        self._lock = ReadWriteLock()
        self._stats: Dict[str, PlayerStats] = {}

    def get_stats(self, player_id: str) -> PlayerStats:
        """Returns a copy of the player's stats, empty if they never answered."""
        with self._lock.read_locked():
            stats = self._stats.get(player_id)
            return stats.copy() if stats else PlayerStats()

    def update_stats(self, question_id: str, player_id: str, offer: int) -> PlayerStats:
        """
        Stores offer as player_id's answer to question_id, replacing any earlier answer
        to the same question. Returns the player's updated stats.
        """
        validate_offer(offer)
        with self._lock.write_locked():
            stats = self._stats.setdefault(player_id, PlayerStats())
            stats.answered[question_id] = offer
            return stats.copy()

    def save_stats(self):
        with self._lock.write_locked():
            save_stats_file(self._stats, self.save_path, self.overwrite)
            log.debug(f"Saved stats for {len(self._stats)} players to {self.save_path}")

    def load_stats(self):
        """Replaces the in-memory stats with the ones on disk. A missing file means no stats yet."""
        with self._lock.write_locked():
            try:
                loaded = load_stats_file(self.save_path)
            except FileNotFoundError:
                log.info(f"No stats file at {self.save_path}, starting fresh")
                loaded = {}
            self._stats = loaded
            log.debug(f"Loaded stats for {len(loaded)} players from {self.save_path}")

    def answered_question_ids(self) -> Set[str]:
        with self._lock.read_locked():
            return {question_id for stats in self._stats.values() for question_id in stats.answered}

    def player_count(self) -> int:
        with self._lock.read_locked():
            return len(self._stats)

    def leaderboard(self, limit: int = 10) -> List[Tuple[str, PlayerStats]]:
        with self._lock.read_locked():
            ranked = [(player_id, stats.copy()) for player_id, stats in self._stats.items()]
        ranked.sort(key=lambda entry: entry[1].total_money, reverse=True)
        return ranked[:limit]
