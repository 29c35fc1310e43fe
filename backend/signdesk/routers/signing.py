from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from signdesk.config import settings
from signdesk.dependencies import get_store
from signdesk.schemas.document import SignatureSubmit, SignedDocument
from signdesk.schemas.recipient import RecipientView
from signdesk.services.document_store import DocumentStore
from signdesk.services.latency import SimulatedOperationError
from signdesk.services.recipient_service import open_for_recipient
from signdesk.services.signature_service import (
    SignatureTooLargeError,
    SignatureValidationError,
    read_upload_as_data_url,
    submit_signature,
)
from signdesk.services.status_service import DocumentNotFoundError, InvalidTransitionError

# Public: anyone holding the link can view and sign.
router = APIRouter(prefix="/sign", tags=["signing"])


async def sign_or_raise(store: DocumentStore, doc_id: str, name: str, data: str, capture_type: str) -> SignedDocument:
    try:
        return await submit_signature(
            store,
            doc_id,
            name,
            data,
            capture_type,
            delay_seconds=settings.sign_delay_seconds,
            failure_rate=settings.simulated_failure_rate,
        )
    except SignatureValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except SimulatedOperationError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


def _require_recipient_document(store: DocumentStore, recipient_id: str, doc_id: str):
    if not any(d.id == doc_id for d in store.get_by_recipient(recipient_id)):
        raise HTTPException(status_code=404, detail="Document not found for this signing link")


@router.get("/{recipient_id}", response_model=RecipientView)
async def recipient_view(recipient_id: str, store: DocumentStore = Depends(get_store)):
    documents = open_for_recipient(store, recipient_id)
    if not documents:
        raise HTTPException(status_code=404, detail="Signing link not found")
    return RecipientView(
        recipient_id=recipient_id,
        documents=documents,
        remaining=sum(1 for d in documents if d.status != "signed"),
    )


@router.post("/{recipient_id}/documents/{doc_id}", response_model=SignedDocument)
async def sign_recipient_document(
    recipient_id: str,
    doc_id: str,
    req: SignatureSubmit,
    store: DocumentStore = Depends(get_store),
):
    _require_recipient_document(store, recipient_id, doc_id)
    return await sign_or_raise(store, doc_id, req.name, req.data, req.type)


@router.post("/{recipient_id}/documents/{doc_id}/upload", response_model=SignedDocument)
async def sign_recipient_document_with_file(
    recipient_id: str,
    doc_id: str,
    name: str = Form(...),
    file: UploadFile = File(...),
    store: DocumentStore = Depends(get_store),
):
    _require_recipient_document(store, recipient_id, doc_id)
    try:
        data = await read_upload_as_data_url(file, settings.max_upload_bytes)
    except SignatureTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc))
    except SignatureValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return await sign_or_raise(store, doc_id, name, data, "upload")
