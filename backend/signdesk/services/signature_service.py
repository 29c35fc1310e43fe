import base64
import binascii
import re

from fastapi import UploadFile

from signdesk.schemas.document import VALID_SIGNATURE_TYPES, Signature, SignedDocument
from signdesk.services.document_service import UploadTooLargeError, read_upload_bytes
from signdesk.services.document_store import DocumentStore
from signdesk.services.latency import simulate_network
from signdesk.services.status_service import mark_signed
from signdesk.utils.timestamps import utc_now

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w-]+=[^;,]+)*);base64,(?P<data>.*)$", re.S)

UPLOAD_MIME_PREFIXES = ("image/", "application/pdf")


class SignatureValidationError(Exception):
    pass


class SignatureTooLargeError(SignatureValidationError):
    pass


def encode_data_url(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def parse_data_url(payload: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (mime type, decoded bytes)."""
    match = DATA_URL_RE.match(payload or "")
    if not match:
        raise SignatureValidationError("Signature payload must be a base64 data URL")
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SignatureValidationError("Signature payload is not valid base64") from exc
    if not content:
        raise SignatureValidationError("Signature payload is empty")
    return match.group("mime") or "text/plain", content


def validate_signature(signer_name: str, payload: str, capture_type: str):
    if not signer_name or not signer_name.strip():
        raise SignatureValidationError("Signer name is required")
    if capture_type not in VALID_SIGNATURE_TYPES:
        raise SignatureValidationError(
            f"Invalid signature type. Must be one of: {sorted(VALID_SIGNATURE_TYPES)}"
        )

    if capture_type == "type":
        if not payload or not payload.strip():
            raise SignatureValidationError("Typed signature is empty")
        return

    mime, _ = parse_data_url(payload)
    if capture_type == "draw" and not mime.startswith("image/"):
        raise SignatureValidationError("Drawn signature must be an image")
    if capture_type == "upload" and not mime.startswith(UPLOAD_MIME_PREFIXES):
        raise SignatureValidationError("Uploaded signature must be an image or PDF")


def build_signature(signer_name: str, payload: str, capture_type: str) -> Signature:
    validate_signature(signer_name, payload, capture_type)
    return Signature(
        data=payload,
        type=capture_type,
        name=signer_name.strip(),
        timestamp=utc_now(),
    )


async def read_upload_as_data_url(file: UploadFile, max_bytes: int) -> str:
    """Read the whole uploaded file and encode it as a data URL."""
    try:
        content = await read_upload_bytes(file, max_bytes)
    except UploadTooLargeError as exc:
        raise SignatureTooLargeError(f"Signature file too large (max {max_bytes} bytes)") from exc
    if not content:
        raise SignatureValidationError("Signature file is empty")
    return encode_data_url(content, file.content_type or "application/octet-stream")


async def submit_signature(
    store: DocumentStore,
    doc_id: str,
    signer_name: str,
    payload: str,
    capture_type: str,
    delay_seconds: float = 0.0,
    failure_rate: float = 0.0,
) -> SignedDocument:
    """
    Validate a captured signature and record it on the document.

    The signature and the signed status are written in one store update,
    after the simulated round trip; a failure or cancellation before that
    point leaves the document as it was.
    """
    validate_signature(signer_name, payload, capture_type)
    await simulate_network("Signing", delay_seconds, failure_rate)
    signature = build_signature(signer_name, payload, capture_type)
    return mark_signed(store, doc_id, signature)
