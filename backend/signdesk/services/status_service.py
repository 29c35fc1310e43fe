import logging

from signdesk.schemas.document import Document, Recipient, Signature, SignedDocument
from signdesk.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

STATUS_ORDER = {"unsigned": 0, "sent": 1, "viewed": 2, "signed": 3}

# current status -> statuses reachable from it
TRANSITIONS = {
    "unsigned": {"sent"},
    "sent": {"viewed", "signed"},
    "viewed": {"signed"},
    "signed": set(),
}


class DocumentNotFoundError(Exception):
    pass


class InvalidTransitionError(Exception):
    """Exception for document status transition errors"""


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, set())


def mark_sent(store: DocumentStore, doc_id: str, recipient: Recipient) -> Document | None:
    """
    Attach recipient info and move an unsigned document to sent.

    Documents already past sent keep their status and only get the new
    recipient info.
    """
    doc = store.get(doc_id)
    if doc is None:
        return None
    if STATUS_ORDER[doc.status] >= STATUS_ORDER["sent"]:
        return store.update(doc_id, recipient=recipient)
    return store.update(doc_id, status="sent", recipient=recipient)


def mark_viewed(store: DocumentStore, doc_id: str) -> Document | None:
    """Move a sent document to viewed. Any other status is left untouched."""
    doc = store.get(doc_id)
    if doc is None:
        return None
    if doc.status != "sent":
        return doc
    logger.info("Document %s viewed by %s", doc_id, doc.recipient.email)
    return store.update(doc_id, status="viewed")


def mark_signed(store: DocumentStore, doc_id: str, signature: Signature) -> SignedDocument:
    doc = store.get(doc_id)
    if doc is None:
        raise DocumentNotFoundError(f"Document {doc_id} not found")
    if not can_transition(doc.status, "signed"):
        raise InvalidTransitionError(f"Cannot sign document {doc_id} from status {doc.status}")

    signed = store.update(doc_id, status="signed", signature=signature)
    logger.info("Document %s signed by %s (%s)", doc_id, signature.name, signature.type)
    return signed
