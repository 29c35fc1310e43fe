import os
from pathlib import Path

from fastapi import UploadFile

from signdesk.config import settings
from signdesk.utils.filesystem import ensure_data_dirs, sanitize_filename
from signdesk.utils.hashing import sha256_bytes

PDF_MIME_TYPE = "application/pdf"


class UploadValidationError(Exception):
    pass


class UploadTooLargeError(UploadValidationError):
    pass


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """Read an uploaded file in chunks, failing as soon as it exceeds max_bytes."""
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise UploadTooLargeError(f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)
    return b"".join(chunks)


def validate_pdf_upload(filename: str | None, content_type: str | None, content: bytes):
    if content_type != PDF_MIME_TYPE:
        raise UploadValidationError("Only PDF files are supported.")
    if not filename or not filename.lower().endswith(".pdf"):
        raise UploadValidationError("The file extension must be .pdf")
    if not content:
        raise UploadValidationError("Empty file")


def store_document(filename: str, content: bytes, data_path: Path | None = None) -> tuple[str, str, int]:
    """Store an uploaded file immutably. Returns (relative_path, file_hash, file_size)."""
    file_hash = sha256_bytes(content)
    stored_name = f"{file_hash[:8]}_{sanitize_filename(filename)}"

    root = ensure_data_dirs(data_path)
    doc_path = root / "documents" / stored_name
    if not doc_path.exists():
        doc_path.write_bytes(content)
        os.chmod(doc_path, 0o444)

    return f"documents/{stored_name}", file_hash, len(content)


def get_document_full_path(url: str, data_path: Path | None = None) -> Path | None:
    """Resolve a stored content locator, or None for locators outside the documents directory."""
    root = (data_path or settings.data_path).resolve()
    documents_dir = root / "documents"
    candidate = (root / url.lstrip("/")).resolve()
    if documents_dir not in candidate.parents:
        return None
    return candidate
