from fastapi import APIRouter, Depends, HTTPException

from signdesk.config import settings
from signdesk.dependencies import get_store, require_admin
from signdesk.schemas.recipient import RecipientSummary, SigningLinkCreate, SigningLinkResponse
from signdesk.services.document_store import DocumentStore
from signdesk.services.recipient_service import (
    issue_link,
    list_recipients,
    resend,
    signing_link_path,
    signing_link_url,
)

router = APIRouter(tags=["recipients"], dependencies=[Depends(require_admin)])


def _link_response(store: DocumentStore, recipient_id: str) -> SigningLinkResponse:
    return SigningLinkResponse(
        recipient_id=recipient_id,
        path=signing_link_path(recipient_id),
        url=signing_link_url(settings.public_base_url, recipient_id),
        document_ids=[d.id for d in store.get_by_recipient(recipient_id)],
    )


@router.post("/signing-links", response_model=SigningLinkResponse, status_code=201)
async def create_signing_link(req: SigningLinkCreate, store: DocumentStore = Depends(get_store)):
    if not req.document_ids:
        raise HTTPException(status_code=400, detail="Please select at least one document to send.")
    if not req.name.strip() or not req.email.strip():
        raise HTTPException(status_code=400, detail="Please provide recipient name and email.")

    missing = [doc_id for doc_id in req.document_ids if store.get(doc_id) is None]
    if missing:
        raise HTTPException(status_code=404, detail=f"Documents not found: {', '.join(missing)}")

    recipient_id = issue_link(store, req.document_ids, req.name.strip(), req.email.strip())
    return _link_response(store, recipient_id)


@router.get("/recipients", response_model=list[RecipientSummary])
async def recipients(store: DocumentStore = Depends(get_store)):
    return list_recipients(store)


@router.post("/recipients/{recipient_id}/resend", response_model=SigningLinkResponse)
async def resend_to_recipient(recipient_id: str, store: DocumentStore = Depends(get_store)):
    new_recipient_id = resend(store, recipient_id)
    if new_recipient_id is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    return _link_response(store, new_recipient_id)
