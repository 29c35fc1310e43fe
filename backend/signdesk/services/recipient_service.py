import logging
from typing import Callable, Iterable

from signdesk.schemas.document import Document, Recipient
from signdesk.schemas.recipient import RecipientSummary
from signdesk.services.document_store import DocumentStore
from signdesk.services.status_service import mark_sent, mark_viewed
from signdesk.utils.ids import new_id

logger = logging.getLogger(__name__)


def signing_link_path(recipient_id: str) -> str:
    return f"/sign/{recipient_id}"


def signing_link_url(base_url: str, recipient_id: str) -> str:
    return base_url.rstrip("/") + signing_link_path(recipient_id)


def issue_link(
    store: DocumentStore,
    document_ids: Iterable[str],
    name: str,
    email: str,
    id_factory: Callable[[], str] = new_id,
) -> str | None:
    """
    Group documents under a fresh recipient id and mark them sent.

    Returns the recipient id, or None when no given id names a stored
    document; in that case the store is left untouched.
    """
    ids = list(dict.fromkeys(document_ids))
    if not ids:
        logger.warning("Signing link requested with no documents; nothing issued")
        return None

    recipient = Recipient(name=name, email=email, recipient_id=id_factory())
    linked = []
    for doc_id in ids:
        if mark_sent(store, doc_id, recipient) is None:
            logger.warning("Skipping unknown document %s for recipient %s", doc_id, recipient.recipient_id)
        else:
            linked.append(doc_id)

    if not linked:
        logger.warning("Signing link requested for unknown documents only; nothing issued")
        return None

    logger.info("Signature link %s issued to %s for documents %s",
                recipient.recipient_id, email, ", ".join(linked))
    return recipient.recipient_id


def resend(store: DocumentStore, recipient_id: str) -> str | None:
    docs = store.get_by_recipient(recipient_id)
    if not docs:
        return None
    recipient = docs[0].recipient
    return issue_link(store, [d.id for d in docs], recipient.name, recipient.email)


def open_for_recipient(store: DocumentStore, recipient_id: str) -> list[Document]:
    """Load a recipient's documents, marking the sent ones as viewed."""
    for doc in store.get_by_recipient(recipient_id):
        mark_viewed(store, doc.id)
    return store.get_by_recipient(recipient_id)


def list_recipients(store: DocumentStore) -> list[RecipientSummary]:
    summaries: dict[str, RecipientSummary] = {}
    for doc in store.all():
        recipient = getattr(doc, "recipient", None)
        if recipient is None:
            continue
        summary = summaries.get(recipient.recipient_id)
        if summary is None:
            summary = RecipientSummary(
                recipient_id=recipient.recipient_id,
                name=recipient.name,
                email=recipient.email,
            )
            summaries[recipient.recipient_id] = summary
        summary.document_ids.append(doc.id)
        if doc.status == "signed":
            summary.signed_count += 1

    for summary in summaries.values():
        summary.all_signed = summary.signed_count == len(summary.document_ids)
    return list(summaries.values())
