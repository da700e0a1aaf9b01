"""JSON-file document store.

Each collection is a JSON array in ``<data_dir>/<collection>.json``. Every
document carries an opaque ``_id``, ``createdAt``/``updatedAt`` timestamps and
an integer ``revision``. ``replace`` is a compare-and-swap on ``revision``:
the caller passes the document as it was loaded (plus its changes) and the
write only succeeds if nobody else wrote in between, otherwise ConflictError.

All reads and writes of a store instance go through one re-entrant lock, and
files are replaced atomically (temp file + move) so a crash never leaves a
half-written collection.
"""
import copy
import json
import logging
import math
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from planeats.domain.errors import ConflictError, NotFoundError, PlanEatsError
from planeats.infra.paths import collection_file

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class DocumentStore:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()

    # --- File helpers -----------------------------------------------------
    def _load(self, collection: str) -> List[Document]:
        path = collection_file(self.data_dir, collection)
        if not path.exists():
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                docs = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in collection file %s: %s", path, e)
            raise PlanEatsError(f"Collection '{collection}' is corrupted") from e
        return docs if isinstance(docs, list) else []

    def _atomic_write(self, collection: str, docs: List[Document]):
        path = collection_file(self.data_dir, collection)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{collection}_", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(docs, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(path))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- Queries ----------------------------------------------------------
    def find(self, collection: str, predicate: Optional[Callable[[Document], bool]] = None) -> List[Document]:
        with self._lock:
            docs = self._load(collection)
        if predicate is not None:
            docs = [d for d in docs if predicate(d)]
        return copy.deepcopy(docs)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            for doc in self._load(collection):
                if doc.get('_id') == doc_id:
                    return copy.deepcopy(doc)
        return None

    def count(self, collection: str, predicate: Optional[Callable[[Document], bool]] = None) -> int:
        return len(self.find(collection, predicate))

    # --- Writes -----------------------------------------------------------
    def insert(self, collection: str, doc: Document) -> Document:
        new_doc = copy.deepcopy(doc)
        now = _now()
        new_doc['_id'] = new_doc.get('_id') or uuid4().hex
        new_doc['createdAt'] = now
        new_doc['updatedAt'] = now
        new_doc['revision'] = 0
        with self._lock:
            docs = self._load(collection)
            docs.append(new_doc)
            self._atomic_write(collection, docs)
        logger.debug("Inserted %s/%s", collection, new_doc['_id'])
        return copy.deepcopy(new_doc)

    def replace(self, collection: str, doc: Document) -> Document:
        """Write ``doc`` over the stored document with the same ``_id``.

        ``doc['revision']`` must equal the stored revision; the stored
        revision is then incremented.
        """
        doc_id = doc.get('_id')
        expected = doc.get('revision', 0)
        with self._lock:
            docs = self._load(collection)
            for index, current in enumerate(docs):
                if current.get('_id') != doc_id:
                    continue
                actual = current.get('revision', 0)
                if actual != expected:
                    logger.warning("Stale write on %s/%s: revision %s, expected %s",
                                   collection, doc_id, actual, expected)
                    raise ConflictError(collection, doc_id, expected, actual)
                new_doc = copy.deepcopy(doc)
                new_doc['createdAt'] = current.get('createdAt')
                new_doc['updatedAt'] = _now()
                new_doc['revision'] = actual + 1
                docs[index] = new_doc
                self._atomic_write(collection, docs)
                return copy.deepcopy(new_doc)
        raise NotFoundError(f"{collection} document {doc_id} not found")

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            docs = self._load(collection)
            remaining = [d for d in docs if d.get('_id') != doc_id]
            if len(remaining) == len(docs):
                return False
            self._atomic_write(collection, remaining)
        return True

    def delete_many(self, collection: str, predicate: Callable[[Document], bool]) -> int:
        with self._lock:
            docs = self._load(collection)
            remaining = [d for d in docs if not predicate(d)]
            removed = len(docs) - len(remaining)
            if removed:
                self._atomic_write(collection, remaining)
        return removed


class DocumentRepository:
    """Maps one collection to a domain class exposing from_dict/to_dict."""
    collection: str = ''
    model: Any = None

    def __init__(self, store: DocumentStore):
        self.store = store

    def _apply_stored(self, obj, stored: Document):
        obj.id = stored['_id']
        obj.revision = stored['revision']
        obj.created_at = stored.get('createdAt')
        obj.updated_at = stored.get('updatedAt')
        return obj

    def get(self, doc_id: str):
        doc = self.store.get(self.collection, doc_id)
        return self.model.from_dict(doc) if doc else None

    def find(self, predicate: Optional[Callable[[Document], bool]] = None) -> list:
        return [self.model.from_dict(d) for d in self.store.find(self.collection, predicate)]

    def insert(self, obj):
        doc = obj.to_dict()
        doc.pop('_id', None)
        return self._apply_stored(obj, self.store.insert(self.collection, doc))

    def save(self, obj):
        return self._apply_stored(obj, self.store.replace(self.collection, obj.to_dict()))

    def delete(self, doc_id: str) -> bool:
        return self.store.delete(self.collection, doc_id)


def paginate(items: list, page: int = 1, limit: int = 10) -> Tuple[list, int, int]:
    """Return (page_items, total, total_pages) for 1-based page numbers."""
    page = max(1, int(page or 1))
    limit = max(1, int(limit or 10))
    total = len(items)
    start = (page - 1) * limit
    return items[start:start + limit], total, math.ceil(total / limit) if total else 0


__all__ = ['DocumentStore', 'DocumentRepository', 'paginate']
