import logging
from collections import Counter
from typing import Callable

from pydantic import ValidationError

from signdesk.schemas.document import (
    VALID_STATUSES,
    Document,
    document_adapter,
    document_list_adapter,
)
from signdesk.services.kv_store import KeyValueStore
from signdesk.utils.ids import new_id
from signdesk.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

DOCUMENTS_KEY = "documents"

SAMPLE_DOCUMENTS = [
    {
        "id": "1",
        "title": "Service Contract.pdf",
        "url": "/sample-contract.pdf",
        "uploaded": "2023-06-15T10:30:00Z",
        "status": "unsigned",
    },
    {
        "id": "2",
        "title": "Non-Disclosure Agreement.pdf",
        "url": "/sample-nda.pdf",
        "uploaded": "2023-06-10T14:20:00Z",
        "status": "sent",
        "recipient": {"name": "John Smith", "email": "john.smith@example.com", "recipient_id": "1234"},
    },
    {
        "id": "3",
        "title": "Employment Contract.pdf",
        "url": "/sample-employment.pdf",
        "uploaded": "2023-05-28T09:15:00Z",
        "status": "signed",
        "recipient": {"name": "Sarah Johnson", "email": "sarah.j@example.com", "recipient_id": "5678"},
        "signature": {
            "data": "data:image/png;base64,iVBORw0KGgo=",
            "type": "draw",
            "name": "Sarah Johnson",
            "timestamp": "2023-05-29T11:42:00Z",
        },
    },
    {
        "id": "4",
        "title": "Benefits Summary.pdf",
        "url": "/sample-benefits.pdf",
        "uploaded": "2023-05-28T09:20:00Z",
        "status": "signed",
        "recipient": {"name": "Sarah Johnson", "email": "sarah.j@example.com", "recipient_id": "5678"},
        "signature": {
            "data": "data:image/png;base64,iVBORw0KGgo=",
            "type": "draw",
            "name": "Sarah Johnson",
            "timestamp": "2023-05-29T11:45:00Z",
        },
    },
]


class InvalidDocumentError(Exception):
    """An update would produce a record shape that no status allows."""


class DocumentStore:
    """
    Ordered collection of document records persisted under one key.

    ``open()`` loads the collection (seeding the demo data on first run) and
    every successful ``create``/``update`` rewrites the whole collection.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        seed: list[dict] | None = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self._kv = kv
        self._seed = SAMPLE_DOCUMENTS if seed is None else seed
        self._new_id = id_factory
        self._documents: list[Document] | None = None

    def open(self) -> "DocumentStore":
        stored = self._kv.get(DOCUMENTS_KEY)
        if stored is not None:
            self._documents = document_list_adapter.validate_python(stored)
            logger.info("Loaded %d documents", len(self._documents))
        else:
            self._documents = document_list_adapter.validate_python(self._seed)
            self._persist()
            logger.info("Seeded %d demo documents", len(self._documents))
        return self

    def close(self):
        self._documents = None

    @property
    def is_open(self) -> bool:
        return self._documents is not None

    def _require_open(self) -> list[Document]:
        if self._documents is None:
            raise RuntimeError("DocumentStore is not open")
        return self._documents

    def _persist(self):
        self._kv.set(DOCUMENTS_KEY, document_list_adapter.dump_python(self._require_open(), mode="json"))

    def all(self) -> list[Document]:
        return list(self._require_open())

    def create(self, title: str, url: str) -> Document:
        doc = document_adapter.validate_python({
            "id": self._new_id(),
            "title": title,
            "url": url,
            "uploaded": utc_now(),
            "status": "unsigned",
        })
        self._require_open().append(doc)
        self._persist()
        return doc

    def get(self, doc_id: str) -> Document | None:
        for doc in self._require_open():
            if doc.id == doc_id:
                return doc
        return None

    def get_by_recipient(self, recipient_id: str) -> list[Document]:
        return [
            doc for doc in self._require_open()
            if getattr(doc, "recipient", None) is not None and doc.recipient.recipient_id == recipient_id
        ]

    def update(self, doc_id: str, **fields) -> Document | None:
        documents = self._require_open()
        for index, doc in enumerate(documents):
            if doc.id != doc_id:
                continue
            merged = {**doc.model_dump(), **fields}
            try:
                updated = document_adapter.validate_python(merged)
            except ValidationError as exc:
                raise InvalidDocumentError(
                    f"Update of document {doc_id} to status {merged.get('status')!r} is not a valid record"
                ) from exc
            documents[index] = updated
            self._persist()
            return updated
        return None

    def search(self, q: str | None = None, status: str | None = None) -> list[Document]:
        docs = self._require_open()
        if q:
            needle = q.lower()
            docs = [d for d in docs if needle in d.title.lower()]
        if status:
            docs = [d for d in docs if d.status == status]
        return list(docs)

    def status_counts(self) -> dict[str, int]:
        docs = self._require_open()
        counts = Counter(d.status for d in docs)
        result = {"all": len(docs)}
        for status in VALID_STATUSES:
            result[status] = counts.get(status, 0)
        return result
