"""File-based key/value cache stored inside a repository's ``.git`` directory."""

from __future__ import annotations

import contextlib
import hashlib
import json
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Mapping

CACHE_DIR_NAME = "gh-smart-commit-cache"

_FRACTION = re.compile(r"\.(\d+)")
_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


class CacheError(Exception):
    """Raised when a cache entry cannot be read or written."""


def _parse_timestamp(text: str) -> datetime:
    value = text.strip()
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    # Sub-microsecond precision is cut down to what datetime can hold.
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_timedelta(ttl: timedelta | float) -> timedelta:
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=float(ttl))


@dataclass
class CacheEntry:
    """A single cached value with its creation and expiry times."""

    key: str
    value: str
    created_at: datetime
    expires_at: datetime

    def to_dict(self) -> dict[str, str]:
        return {
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheEntry":
        created = data.get("created_at")
        expires = data.get("expires_at")
        return cls(
            key=str(data.get("key", "")),
            value=str(data.get("value", "")),
            created_at=_parse_timestamp(created) if created else _EPOCH_MIN,
            expires_at=_parse_timestamp(expires) if expires else _EPOCH_MIN,
        )


class Cache:
    """A cache of string values kept as JSON files, one per key."""

    def __init__(self, git_dir: str | Path) -> None:
        self.base_dir = Path(git_dir) / ".git" / CACHE_DIR_NAME

    def get(self, key: str) -> str | None:
        """Return the cached value for ``key``, or None if absent or expired."""
        self._ensure_dir()
        path = self._path_for(key)
        if not path.exists():
            return None

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CacheError(f"failed to open cache file: {exc}") from exc

        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("cache entry is not a JSON object")
            entry = CacheEntry.from_dict(data)
        except (ValueError, TypeError) as exc:
            raise CacheError(f"failed to decode cache entry: {exc}") from exc

        if datetime.now(timezone.utc) > entry.expires_at:
            with contextlib.suppress(OSError):
                path.unlink()
            return None

        return entry.value

    def set(self, key: str, value: str, ttl: timedelta | float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` (a timedelta or seconds)."""
        self._ensure_dir()
        now = datetime.now(timezone.utc)
        entry = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            expires_at=now + _to_timedelta(ttl),
        )
        try:
            self._path_for(key).write_text(
                json.dumps(entry.to_dict()) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise CacheError(f"failed to create cache file: {exc}") from exc

    def delete(self, key: str) -> None:
        """Remove ``key`` from the cache; a missing key is not an error."""
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise CacheError(f"failed to delete cache file: {exc}") from exc

    def clear(self) -> None:
        """Remove every cache entry."""
        if not self.base_dir.exists():
            return
        try:
            shutil.rmtree(self.base_dir)
        except OSError as exc:
            raise CacheError(f"failed to clear cache: {exc}") from exc

    def _ensure_dir(self) -> None:
        try:
            self.base_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheError(f"failed to create cache directory: {exc}") from exc

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.base_dir / f"{digest}.json"


def generate_cache_key(*args: str) -> str:
    """Build a hex cache key from several string components."""
    digest = hashlib.sha256()
    for component in args:
        digest.update(component.encode("utf-8"))
        digest.update(b"|")
    return digest.hexdigest()