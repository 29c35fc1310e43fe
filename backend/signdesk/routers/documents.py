from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from signdesk.config import settings
from signdesk.dependencies import get_store, require_admin
from signdesk.routers.signing import sign_or_raise
from signdesk.schemas.document import (
    VALID_STATUSES,
    Document,
    DocumentCreate,
    DocumentStats,
    SignatureSubmit,
    SignedDocument,
)
from signdesk.services.document_service import (
    UploadTooLargeError,
    UploadValidationError,
    get_document_full_path,
    read_upload_bytes,
    store_document,
    validate_pdf_upload,
)
from signdesk.services.document_store import DocumentStore
from signdesk.services.latency import SimulatedOperationError, simulate_network
from signdesk.services.status_service import mark_viewed

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    dependencies=[Depends(require_admin)],
)


def _get_or_404(store: DocumentStore, doc_id: str) -> Document:
    doc = store.get(doc_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc


@router.get("", response_model=list[Document])
async def list_documents(
    q: str | None = None,
    status: str | None = None,
    store: DocumentStore = Depends(get_store),
):
    if status and status not in VALID_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {VALID_STATUSES}")
    return store.search(q=q, status=status)


@router.get("/stats", response_model=DocumentStats)
async def document_stats(store: DocumentStore = Depends(get_store)):
    return DocumentStats(**store.status_counts())


@router.post("", response_model=Document, status_code=201)
async def create_document(req: DocumentCreate, store: DocumentStore = Depends(get_store)):
    return store.create(title=req.title, url=req.url)


@router.post("/upload", response_model=list[Document], status_code=201)
async def upload_documents(
    files: list[UploadFile] = File(...),
    store: DocumentStore = Depends(get_store),
):
    accepted: list[tuple[str, bytes]] = []
    for file in files:
        try:
            content = await read_upload_bytes(file, settings.max_upload_bytes)
        except UploadTooLargeError as exc:
            raise HTTPException(status_code=413, detail=str(exc))
        try:
            validate_pdf_upload(file.filename, file.content_type, content)
        except UploadValidationError as exc:
            raise HTTPException(status_code=400, detail=f"{file.filename}: {exc}")
        accepted.append((file.filename, content))

    try:
        await simulate_network("Upload", settings.upload_delay_seconds, settings.simulated_failure_rate)
    except SimulatedOperationError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    created = []
    for filename, content in accepted:
        stored_path, _file_hash, _size = store_document(filename, content)
        created.append(store.create(title=filename, url=stored_path))
    return created


@router.get("/{doc_id}", response_model=Document)
async def get_document(doc_id: str, store: DocumentStore = Depends(get_store)):
    return _get_or_404(store, doc_id)


@router.get("/{doc_id}/content")
async def download_document(doc_id: str, store: DocumentStore = Depends(get_store)):
    doc = _get_or_404(store, doc_id)
    full_path = get_document_full_path(doc.url)
    if full_path is None or not full_path.exists():
        raise HTTPException(status_code=404, detail="Document file missing from data directory")

    return FileResponse(path=str(full_path), filename=doc.title, media_type="application/pdf")


@router.post("/{doc_id}/view", response_model=Document)
async def view_document(doc_id: str, store: DocumentStore = Depends(get_store)):
    _get_or_404(store, doc_id)
    return mark_viewed(store, doc_id)


@router.post("/{doc_id}/sign", response_model=SignedDocument)
async def sign_document(doc_id: str, req: SignatureSubmit, store: DocumentStore = Depends(get_store)):
    _get_or_404(store, doc_id)
    return await sign_or_raise(store, doc_id, req.name, req.data, req.type)
