"""
Local behavioral cache for learning style evidence.

Keeps the most recent behavioral data points on disk so profiles can be
recomputed without a round trip to the durable store.
Stored as one JSON file per learner, by default ~/.lumina/behavior/<user>.json
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from loguru import logger

from src.learning_style.exceptions import MalformedObservationError
from src.learning_style.models import BehavioralDataPoint

DEFAULT_CACHE_DIR = Path.home() / ".lumina" / "behavior"
DEFAULT_CACHE_PATH = DEFAULT_CACHE_DIR / "default.json"
DEFAULT_CACHE_LIMIT = 500


class BehaviorCache:
    """
    File-backed cache of behavioral data points.

    Layout: {"data_points": [...], "total_interactions": int, "last_updated": iso}
    Only the newest ``limit`` points are retained; ``total_interactions``
    keeps counting past the cap.
    """

    def __init__(self, path: Optional[Path] = None, limit: int = DEFAULT_CACHE_LIMIT):
        self.path = path or DEFAULT_CACHE_PATH
        self.limit = limit
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def for_user(
        cls,
        user_id: str,
        directory: Optional[Path] = None,
        limit: int = DEFAULT_CACHE_LIMIT,
    ) -> "BehaviorCache":
        """Cache holding only ``user_id``'s evidence, one file per learner."""
        filename = quote(user_id, safe="") + ".json"
        return cls((directory or DEFAULT_CACHE_DIR) / filename, limit=limit)

    def _read(self) -> dict:
        if not self.path.exists():
            return {"data_points": [], "total_interactions": 0, "last_updated": None}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict) or not isinstance(data.get("data_points"), list):
                raise ValueError("unexpected cache layout")
            return data
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.warning(f"Behavior cache at {self.path} unreadable, starting empty: {e}")
            return {"data_points": [], "total_interactions": 0, "last_updated": None}

    def _write(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def add(self, point: BehavioralDataPoint) -> None:
        """Append one data point, dropping the oldest beyond the limit."""
        self.extend([point])

    def extend(self, points: list[BehavioralDataPoint]) -> None:
        if not points:
            return
        data = self._read()
        data["data_points"].extend(p.to_dict() for p in points)
        if len(data["data_points"]) > self.limit:
            data["data_points"] = data["data_points"][-self.limit:]
        data["total_interactions"] = int(data.get("total_interactions", 0)) + len(points)
        data["last_updated"] = datetime.now().isoformat()
        self._write(data)

    def points(self) -> list[BehavioralDataPoint]:
        """Cached data points, oldest first. Malformed entries are skipped."""
        result = []
        for raw in self._read()["data_points"]:
            try:
                result.append(BehavioralDataPoint.from_dict(raw))
            except (MalformedObservationError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed cached data point: {e}")
        return result

    @property
    def total_interactions(self) -> int:
        return int(self._read().get("total_interactions", 0))

    def clear(self) -> None:
        """Remove the cache file."""
        if self.path.exists():
            self.path.unlink()
