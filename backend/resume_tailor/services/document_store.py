"""
Append-only JSON document store.

Each document is one read-only file at
``<data_path>/documents/<collection>/<id>.json``. Documents are never
updated in place.
"""
import json
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

from resume_tailor.services.errors import PersistenceError
from resume_tailor.utils.filesystem import COLLECTIONS, ensure_collection_dir, resolve_documents_dir
from resume_tailor.utils.security import sha256_text

logger = logging.getLogger("app.documents")


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class DocumentStore:
    def __init__(self, data_path: Path | None = None):
        self._data_path = data_path

    @property
    def documents_dir(self) -> Path:
        return resolve_documents_dir(self._data_path)

    def _doc_path(self, collection: str, doc_id: str) -> Path:
        return self.documents_dir / collection / f"{doc_id}.json"

    def insert(self, collection: str, document: dict) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        doc_id = uuid.uuid4().hex
        record = {"_id": doc_id, "createdAt": _now(), **document}
        if "content" in record:
            record["contentHash"] = sha256_text(record["content"])
        try:
            ensure_collection_dir(collection, self._data_path)
            path = self._doc_path(collection, doc_id)
            path.write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")
            os.chmod(path, 0o444)
        except OSError as exc:
            logger.error("Document insert into %s failed: %s", collection, exc)
            raise PersistenceError(f"Failed to write {collection} document: {exc}") from exc
        return doc_id

    def get(self, collection: str, doc_id: str) -> dict | None:
        try:
            doc_id = uuid.UUID(doc_id).hex
        except (ValueError, TypeError, AttributeError):
            return None
        path = self._doc_path(collection, doc_id)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def find_by_user(self, collection: str, user_id: str) -> list[dict]:
        collection_dir = self.documents_dir / collection
        if not collection_dir.exists():
            return []
        docs = []
        for path in collection_dir.glob("*.json"):
            doc = json.loads(path.read_text(encoding="utf-8"))
            if doc.get("userId") == user_id:
                docs.append(doc)
        docs.sort(key=lambda d: d["createdAt"], reverse=True)
        return docs


document_store = DocumentStore()
