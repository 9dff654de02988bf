"""
Bounded history of metrics snapshots with JSON persistence
"""

import json
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Dict, Any, Optional, Callable
import logging

from a11y_monitor.models import MetricsSnapshot, ViolationTrend

logger = logging.getLogger(__name__)

STORAGE_KEY = 'accessibility-metrics-history'
MAX_HISTORY_ENTRIES = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision"""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC"""
    moment = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class StorageBackend:
    """Keyed string storage holding the serialized history"""

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str):
        raise NotImplementedError


class MemoryStorageBackend(StorageBackend):
    """Process-local storage, used in tests and for throwaway runs"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def write(self, key: str, value: str):
        self._items[key] = value


class JsonFileStorageBackend(StorageBackend):
    """Stores each key as a JSON file in a directory"""

    def __init__(self, storage_dir: str):
        """
        Initialize file storage

        Args:
            storage_dir: Directory holding one <key>.json file per key
        """
        self.storage_dir = Path(storage_dir)

    def _path(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, key: str, value: str):
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)

        # Write to a sibling temp file and swap it in so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", suffix='.tmp', dir=str(self.storage_dir))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class HistoryStore:
    """Owns the newest-first list of stored metrics snapshots"""

    def __init__(self, backend: StorageBackend = None, storage_key: str = STORAGE_KEY,
                 max_entries: int = MAX_HISTORY_ENTRIES, clock: Callable[[], datetime] = None):
        """
        Initialize history store

        Args:
            backend: Storage backend (in-memory when omitted)
            storage_key: Key the history is persisted under
            max_entries: Capacity, oldest entries are evicted first
            clock: Returns the current aware datetime, used for trend windows
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self.backend = backend if backend is not None else MemoryStorageBackend()
        self.storage_key = storage_key
        self.max_entries = max_entries
        self.clock = clock or utc_now
        self._entries: Optional[List[MetricsSnapshot]] = None

    def _read_entries(self) -> List[MetricsSnapshot]:
        """Read the persisted history, raising when it cannot be read or decoded"""
        stored = self.backend.read(self.storage_key)
        data = json.loads(stored) if stored else []
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return [MetricsSnapshot.from_dict(item) for item in data][:self.max_entries]

    def _load(self) -> List[MetricsSnapshot]:
        if self._entries is not None:
            return self._entries

        try:
            self._entries = self._read_entries()
        except Exception as e:
            # Not cached, the next call retries the backend
            logger.error(f"Failed to retrieve accessibility metrics: {e}")
            return []

        return self._entries

    def store(self, snapshot: MetricsSnapshot):
        """
        Prepend a snapshot and persist the truncated history

        Persistence failures are logged and leave the history unchanged.
        When the stored history cannot be read, nothing is written so the
        persisted entries are not replaced by the new snapshot alone.

        Args:
            snapshot: Fully computed metrics snapshot
        """
        current = self._entries
        if current is None:
            try:
                current = self._read_entries()
            except Exception as e:
                logger.error(f"Failed to store accessibility metrics: stored history is unreadable ({e})")
                return

        updated = [snapshot] + current
        updated = updated[:self.max_entries]

        try:
            payload = json.dumps([entry.to_dict() for entry in updated], ensure_ascii=False)
            self.backend.write(self.storage_key, payload)
        except Exception as e:
            logger.error(f"Failed to store accessibility metrics: {e}")
            return

        self._entries = updated
        logger.info(f"Stored metrics snapshot {snapshot.timestamp} ({len(updated)} entries in history)")

    def get_history(self) -> List[MetricsSnapshot]:
        """Return a copy of the history, newest first"""
        return list(self._load())

    def _within_window(self, days: int) -> List[MetricsSnapshot]:
        if days < 0:
            raise ValueError(f"days must not be negative, got {days}")

        now = self.clock()
        cutoff = now - timedelta(days=days)
        selected = []
        for entry in self._load():
            try:
                moment = parse_timestamp(entry.timestamp)
            except ValueError:
                logger.warning(f"Skipping snapshot with malformed timestamp '{entry.timestamp}'")
                continue
            if cutoff <= moment <= now:
                selected.append(entry)
        return selected

    def get_trend_data(self, days: int = 30) -> List[ViolationTrend]:
        """
        Get violation counts for charting

        Args:
            days: Size of the window ending now

        Returns:
            ViolationTrend points, oldest first
        """
        trends = [
            ViolationTrend(
                date=entry.timestamp.split('T')[0],
                critical=entry.violations_by_level.critical,
                serious=entry.violations_by_level.serious,
                moderate=entry.violations_by_level.moderate,
                minor=entry.violations_by_level.minor,
                total=entry.total_violations
            )
            for entry in self._within_window(days)
        ]
        trends.reverse()
        return trends

    def get_component_trends(self, component_name: str, days: int = 30) -> List[ViolationTrend]:
        """
        Get violation counts of one component for charting

        Snapshots that did not record the component are left out.

        Args:
            component_name: Component to follow
            days: Size of the window ending now

        Returns:
            ViolationTrend points, oldest first
        """
        trends = []
        for entry in self._within_window(days):
            component = entry.find_component(component_name)
            if component is None:
                continue
            trends.append(ViolationTrend(
                date=entry.timestamp.split('T')[0],
                critical=component.violations_by_level.critical,
                serious=component.violations_by_level.serious,
                moderate=component.violations_by_level.moderate,
                minor=component.violations_by_level.minor,
                total=component.violation_count
            ))
        trends.reverse()
        return trends

    def latest_component_metric(self, component_name: str):
        """Return the newest stored metric for a component, or None"""
        for entry in self._load():
            component = entry.find_component(component_name)
            if component is not None:
                return component
        return None
