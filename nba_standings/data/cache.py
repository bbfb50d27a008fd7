"""Time-based snapshot cache for the remote feeds.

Each dataset is cached as a single JSON file equal to the upstream payload
plus a top-level ``lastCheckedAt`` timestamp. A snapshot older than its
dataset's max age triggers a remote fetch; a successful fetch replaces the
file wholesale, a failed one leaves it untouched and the stale snapshot is
served instead.

The cache file must exist before the first request. A missing or
malformed file is a deployment error and raises CacheError.

Example:
    >>> from nba_standings.data.cache import TEAM_STATS, TimeBasedCache
    >>> cache = TimeBasedCache()
    >>> snapshot = cache.resolve(TEAM_STATS, client, max_age_hours=1.0)
"""
from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from nba_standings.config import get_settings
from nba_standings.types import CacheError, DatasetName, FetchError, Payload

if TYPE_CHECKING:
    from nba_standings.data.api import RemoteFetcher

logger = logging.getLogger(__name__)

LAST_CHECKED_FIELD = "lastCheckedAt"


@dataclass(frozen=True)
class Dataset:
    """A cached remote dataset.

    Attributes:
        name: Cache file stem, e.g. "standings".
        remote_path: Path of the dataset on the remote API.
        date_field: Payload field holding the API's own "as of" date, used
            when the snapshot has never been stamped.
    """

    name: DatasetName
    remote_path: str
    date_field: str


STANDINGS = Dataset("standings", "nba/standings.json", "standings_date")
TEAM_STATS = Dataset("team-stats", "nba/team-stats.json", "team_stats_date")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 date or timestamp.

    Date-only values are midnight; naive values are taken as UTC.

    Raises:
        ValueError: If the value is not an ISO-8601 string.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = datetime.combine(date.fromisoformat(text[:10]), datetime.min.time())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CacheSnapshot:
    """A dataset payload and when it was last checked against the remote.

    Attributes:
        dataset: Dataset this snapshot belongs to.
        payload: Upstream payload, without the ``lastCheckedAt`` stamp.
        last_checked_at: Last successful remote check, or the payload's own
            "as of" date, or None if neither is known.
        refreshed: Whether this snapshot came from the remote in this run.
    """

    dataset: Dataset
    payload: Payload
    last_checked_at: datetime | None
    refreshed: bool = False

    @classmethod
    def from_payload(cls, dataset: Dataset, data: Payload) -> CacheSnapshot:
        """Build a snapshot from a cache file's contents.

        Raises:
            CacheError: If a timestamp field cannot be parsed.
        """
        payload = {k: v for k, v in data.items() if k != LAST_CHECKED_FIELD}
        raw = data.get(LAST_CHECKED_FIELD) or data.get(dataset.date_field)
        try:
            last_checked_at = parse_timestamp(raw) if raw else None
        except ValueError as e:
            raise CacheError(
                f"Unparsable last-check timestamp in {dataset.name} cache: {raw!r}"
            ) from e
        return cls(dataset=dataset, payload=payload, last_checked_at=last_checked_at)

    def to_dict(self) -> Payload:
        """Serialize as the upstream payload plus the check stamp."""
        data = dict(self.payload)
        if self.last_checked_at is not None:
            data[LAST_CHECKED_FIELD] = self.last_checked_at.isoformat()
        return data

    def hours_since_check(self, now: datetime) -> float:
        """Hours elapsed since the last check (inf if never checked)."""
        if self.last_checked_at is None:
            return float("inf")
        return (now - self.last_checked_at).total_seconds() / 3600


# One lock per cache file, shared by every cache instance in the process
_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.Lock()
        return _locks[key]


class TimeBasedCache:
    """File-backed snapshot cache with staleness-driven refresh.

    Attributes:
        storage_path: Directory holding one ``<dataset>.json`` per dataset.
    """

    def __init__(
        self,
        storage_path: Path | None = None,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the cache.

        Args:
            storage_path: Cache directory. Defaults to settings.data_dir.
            now: Clock returning an aware datetime.
        """
        if storage_path is None:
            storage_path = get_settings().data_dir_obj

        self.storage_path = Path(storage_path)
        self._now = now

        logger.debug(f"TimeBasedCache initialized: {self.storage_path}")

    def path_for(self, dataset: Dataset) -> Path:
        """Path of a dataset's cache file."""
        return self.storage_path / f"{dataset.name}.json"

    @contextmanager
    def lock(self, dataset: Dataset) -> Iterator[None]:
        """Hold the in-process lock for a dataset's cache file."""
        with _lock_for(self.path_for(dataset)):
            yield

    def load(self, dataset: Dataset) -> CacheSnapshot:
        """Read the last persisted snapshot.

        Raises:
            CacheError: If the file is missing, not JSON, or not an object.
        """
        path = self.path_for(dataset)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CacheError(f"No cached snapshot for {dataset.name} at {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise CacheError(f"Cannot read {dataset.name} cache at {path}: {e}") from e

        if not isinstance(data, dict):
            raise CacheError(f"{dataset.name} cache at {path} is not a JSON object")

        return CacheSnapshot.from_payload(dataset, data)

    def save(self, snapshot: CacheSnapshot) -> None:
        """Persist a snapshot, overwriting the dataset's cache file."""
        path = self.path_for(snapshot.dataset)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f)
            logger.debug(f"Saved {snapshot.dataset.name} snapshot to {path}")
        except OSError as e:
            logger.error(f"Failed to save {snapshot.dataset.name} snapshot: {e}")
            raise

    def refresh_if_stale(
        self,
        snapshot: CacheSnapshot,
        max_age_hours: float,
        fetcher: RemoteFetcher,
    ) -> CacheSnapshot:
        """Refresh a snapshot from the remote if it is older than max_age_hours.

        Args:
            snapshot: Snapshot as loaded from disk.
            max_age_hours: Max age before a refresh is attempted.
            fetcher: Remote fetcher used on staleness.

        Returns:
            The new snapshot on a successful refresh, otherwise the given one.
        """
        dataset = snapshot.dataset
        now = self._now()
        hours = snapshot.hours_since_check(now)
        logger.info(f"{dataset.name}: {hours:.3f} hours since last check")

        if hours <= max_age_hours:
            logger.info(f"{dataset.name}: serving local cache")
            return snapshot

        logger.info(f"{dataset.name}: fetching from remote source")
        try:
            raw = fetcher.fetch(dataset.remote_path)
            payload = self._decode(raw) if raw.strip() else snapshot.payload
        except FetchError as e:
            logger.warning(f"{dataset.name}: refresh failed, serving stale snapshot: {e}")
            return snapshot

        if payload is snapshot.payload:
            logger.info(f"{dataset.name}: remote reports no change")

        refreshed = CacheSnapshot(
            dataset=dataset,
            payload=payload,
            last_checked_at=now,
            refreshed=True,
        )
        self.save(refreshed)
        return refreshed

    def resolve(
        self,
        dataset: Dataset,
        fetcher: RemoteFetcher,
        max_age_hours: float,
    ) -> CacheSnapshot:
        """Load a dataset and refresh it if stale, holding its lock throughout."""
        with self.lock(dataset):
            snapshot = self.load(dataset)
            return self.refresh_if_stale(snapshot, max_age_hours, fetcher)

    @staticmethod
    def _decode(raw: bytes) -> Payload:
        """Decode fetched bytes into a payload.

        Raises:
            FetchError: If the body is not a JSON object.
        """
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise FetchError(f"Fetched body is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise FetchError("Fetched body is not a JSON object")
        data.pop(LAST_CHECKED_FIELD, None)
        return data
