"""JSON-file document store.

Each collection is a JSON object ``{doc_id: document}`` persisted in
``<data_dir>/<collection>.json``. Writes go through a temp file and a move so
a crash never leaves a half-written collection behind. Access is serialized
with a process-wide lock.

Top-level document values equal to ``SERVER_TIMESTAMP`` are replaced by the
current UTC time (ISO 8601, ``Z`` suffix) when the document is written.
"""
import json
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from kondate.infra import paths

logger = logging.getLogger(__name__)

_lock = RLock()


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class StoreError(Exception):
    """A collection could not be read or written."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _resolve_sentinels(data: dict) -> dict:
    now = None
    resolved = {}
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            now = now or utc_timestamp()
            value = now
        resolved[key] = value
    return resolved


class DocumentStore:
    def __init__(self, data_dir: Optional[Path] = None):
        # None means paths.DATA_DIR, read on every access
        self._data_dir = Path(data_dir) if data_dir is not None else None

    @property
    def data_dir(self) -> Path:
        return self._data_dir if self._data_dir is not None else Path(paths.DATA_DIR)

    # -------------------- file access --------------------
    def _load(self, collection: str) -> Dict[str, dict]:
        path = paths.collection_file(self.data_dir, collection)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read collection %s from %s: %s", collection, path, e)
            raise StoreError(f"Cannot read collection {collection}: {e}") from e
        if not isinstance(data, dict):
            logger.error("Collection file %s does not hold an object", path)
            raise StoreError(f"Collection {collection} is malformed")
        return data

    def _save(self, collection: str, documents: Dict[str, dict]) -> None:
        path = paths.collection_file(self.data_dir, collection)
        tmp_path = None
        try:
            os.makedirs(path.parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{collection}_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(documents, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, path)
        except OSError as e:
            logger.error("Failed to write collection %s to %s: %s", collection, path, e)
            raise StoreError(f"Cannot write collection {collection}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    # -------------------- document API --------------------
    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with _lock:
            doc = self._load(collection).get(doc_id)
        return dict(doc) if isinstance(doc, dict) else None

    def set(self, collection: str, doc_id: str, data: dict) -> dict:
        """Create or replace a document."""
        with _lock:
            documents = self._load(collection)
            doc = _resolve_sentinels(data)
            documents[doc_id] = doc
            self._save(collection, documents)
        return dict(doc)

    def create(self, collection: str, data: dict) -> Tuple[str, dict]:
        """Store a document under a freshly generated id."""
        doc_id = uuid4().hex[:20]
        return doc_id, self.set(collection, doc_id, data)

    def create_if_absent(self, collection: str, doc_id: str, data: dict) -> bool:
        """Write ``data`` only when ``doc_id`` does not exist yet. Returns True when written."""
        with _lock:
            documents = self._load(collection)
            if doc_id in documents:
                return False
            documents[doc_id] = _resolve_sentinels(data)
            self._save(collection, documents)
        return True

    def update(self, collection: str, doc_id: str, data: dict, remove_fields=()) -> dict:
        """Merge ``data`` into an existing document, dropping ``remove_fields``."""
        with _lock:
            documents = self._load(collection)
            if doc_id not in documents:
                raise DocumentNotFound(collection, doc_id)
            merged = {k: v for k, v in documents[doc_id].items() if k not in remove_fields}
            merged.update(_resolve_sentinels(data))
            documents[doc_id] = merged
            self._save(collection, documents)
        return dict(merged)

    def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document. Returns False when it did not exist."""
        with _lock:
            documents = self._load(collection)
            if doc_id not in documents:
                return False
            del documents[doc_id]
            self._save(collection, documents)
        return True

    def list(self, collection: str) -> List[Tuple[str, dict]]:
        with _lock:
            documents = self._load(collection)
        return [(doc_id, dict(doc)) for doc_id, doc in documents.items() if isinstance(doc, dict)]


__all__ = ['DocumentStore', 'StoreError', 'DocumentNotFound', 'SERVER_TIMESTAMP', 'utc_timestamp']
