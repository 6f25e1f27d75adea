"""Repositories responsible for persisting the asset collection."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Union

from .config import STORE_PATH
from .messages import ServiceMessage, has_errors
from .models import Asset

logger = logging.getLogger(__name__)

# A parsed asset, or a stored record that could not be parsed and is kept verbatim.
Entry = Union[Asset, Any]


class UnreadableStoreError(RuntimeError):
    """The store file exists but cannot be read back as a list of records."""


class AssetRepository:
    """Keeps the whole asset collection in a single JSON file.

    Every write replaces the full collection; there is no partial update.
    Records that fail to parse are skipped by ``load`` but written back
    untouched by ``add``, ``update`` and ``remove``.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else STORE_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> tuple[List[Asset], List[ServiceMessage]]:
        entries, messages = self._read()
        return [entry for entry in entries if isinstance(entry, Asset)], messages

    def save(self, assets: Iterable[Asset]) -> None:
        self._write(list(assets))

    def add(self, asset: Asset) -> List[Asset]:
        entries = self._read_for_write()
        if any(isinstance(e, Asset) and e.id == asset.id for e in entries):
            raise ValueError(f"an asset with id {asset.id} already exists")
        entries.append(asset)
        return self._write(entries)

    def update(self, asset: Asset) -> List[Asset]:
        """Replaces the stored record with the same id, keeping id and createdAt."""
        entries = self._read_for_write()
        found = False
        for position, existing in enumerate(entries):
            if isinstance(existing, Asset) and existing.id == asset.id:
                entries[position] = existing.replace_with(asset)
                found = True
        if not found:
            raise KeyError(asset.id)
        return self._write(entries)

    def remove(self, asset_id: int) -> List[Asset]:
        entries = self._read_for_write()
        remaining = [entry for entry in entries if _entry_id(entry) != asset_id]
        return self._write(remaining)

    def _read(self) -> tuple[List[Entry], List[ServiceMessage]]:
        messages: List[ServiceMessage] = []

        if not self._path.exists():
            return [], messages

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as exc:
            logger.error("Asset store %s is not valid JSON: %s", self._path, exc)
            messages.append(ServiceMessage.error(f"Could not read {self._path.name}: {exc}"))
            return [], messages

        if not isinstance(raw, list):
            logger.error("Asset store %s does not hold a list", self._path)
            messages.append(
                ServiceMessage.error(f"{self._path.name} does not contain a list of assets.")
            )
            return [], messages

        entries: List[Entry] = []
        for position, record in enumerate(raw):
            try:
                entries.append(Asset.from_dict(record))
            except (TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping asset record %d: %s", position, exc)
                messages.append(
                    ServiceMessage.warning(f"Skipped invalid asset record #{position + 1}: {exc}")
                )
                entries.append(record)
        return entries, messages

    def _read_for_write(self) -> List[Entry]:
        entries, messages = self._read()
        if has_errors(messages):
            raise UnreadableStoreError(
                f"refusing to overwrite {self._path}: "
                + "; ".join(message.text for message in messages)
            )
        return entries

    def _write(self, entries: List[Entry]) -> List[Asset]:
        payload = [entry.to_dict() if isinstance(entry, Asset) else entry for entry in entries]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("Saved %d records to %s", len(payload), self._path)
        return [entry for entry in entries if isinstance(entry, Asset)]


def _entry_id(entry: Entry) -> Any:
    if isinstance(entry, Asset):
        return entry.id
    if isinstance(entry, dict):
        return entry.get("id")
    return None
