"""History persistence — remote record collection with a local JSON file as safety net."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

import httpx

from omnifind.config import StoreConfig
from omnifind.models import HistoryItem

_logger = logging.getLogger(__name__)

LOCAL_LIMIT = 50
REMOTE_LIMIT = 20


class StoreError(Exception):
    """History store read/write failure."""


class HistoryStore(Protocol):
    def save(self, item: HistoryItem) -> None: ...

    def get_all(self) -> list[HistoryItem]: ...


class LocalHistoryStore:
    """Whole history as one JSON list in a single file, newest first."""

    def __init__(self, path: Path, limit: int = LOCAL_LIMIT) -> None:
        self.path = Path(path)
        self.limit = limit

    def _read_raw(self) -> list[dict]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.warning("History file %s is corrupt; starting empty", self.path)
            return []
        if not isinstance(data, list):
            _logger.warning("History file %s does not hold a list; starting empty", self.path)
            return []
        return data

    def save(self, item: HistoryItem) -> None:
        """Prepend item, keep the newest `limit`, and replace the file."""
        updated = [item.to_dict(), *self._read_raw()][: self.limit]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Whole-list replace: temp file in the same dir, then rename.
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(updated, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_all(self) -> list[HistoryItem]:
        items: list[HistoryItem] = []
        for raw in self._read_raw():
            try:
                items.append(HistoryItem.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                _logger.warning("Skipping malformed history entry: %r", raw)
        return items


class RemoteHistoryStore:
    """Supabase REST table. Every failure is raised as StoreError."""

    def __init__(
        self,
        base_url: str,
        key: str,
        table: str = "divination_history",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.key = key
        self.timeout = timeout
        self._client = client or httpx.Client()

    def _headers(self) -> dict[str, str]:
        return {"apikey": self.key, "Authorization": f"Bearer {self.key}"}

    def save(self, item: HistoryItem) -> None:
        payload = {
            "id": item.id,
            "item_name": item.input.item_name,
            "data": item.to_dict(),
        }
        headers = {
            **self._headers(),
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }
        try:
            resp = self._client.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            raise StoreError(f"Remote save failed: {e}") from e
        _logger.info("Saved history item %s to remote store", item.id)

    def get_all(self) -> list[HistoryItem]:
        params = {
            "select": "data",
            "order": "created_at.desc",
            "limit": str(REMOTE_LIMIT),
        }
        try:
            resp = self._client.get(
                self.endpoint, params=params, headers=self._headers(), timeout=self.timeout
            )
            resp.raise_for_status()
            rows = resp.json()
            return [HistoryItem.from_dict(row["data"]) for row in rows]
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            raise StoreError(f"Remote read failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Remote read returned malformed data: {e}") from e


class FallbackHistoryStore:
    """Try `primary`; on StoreError, do the same thing against `fallback`."""

    def __init__(self, primary: HistoryStore, fallback: HistoryStore) -> None:
        self.primary = primary
        self.fallback = fallback

    def save(self, item: HistoryItem) -> None:
        try:
            self.primary.save(item)
        except StoreError as e:
            _logger.warning("Falling back to local save: %s", e)
            self.fallback.save(item)

    def get_all(self) -> list[HistoryItem]:
        try:
            return self.primary.get_all()
        except StoreError as e:
            _logger.warning("Falling back to local history: %s", e)
            return self.fallback.get_all()


def build_store(config: StoreConfig, client: httpx.Client | None = None) -> HistoryStore:
    """Return the history store for `config`.

    Remote configured: remote first, local file on failure.
    Otherwise: the local file alone.
    """
    local = LocalHistoryStore(config.history_path)
    if not config.remote_enabled:
        return local
    remote = RemoteHistoryStore(
        config.supabase_url,
        config.supabase_key,
        table=config.table,
        timeout=config.timeout,
        client=client,
    )
    return FallbackHistoryStore(remote, local)
