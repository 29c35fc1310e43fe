import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signdesk.config import settings
from signdesk.database import get_session_factory, init_db, integrity_check
from signdesk.routers import auth, documents, recipients, signing
from signdesk.services.auth_service import AuthService
from signdesk.services.document_store import DocumentStore
from signdesk.services.kv_store import KeyValueStore
from signdesk.utils.filesystem import ensure_data_dirs

logger = logging.getLogger("signdesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: open the key-value store and load (or seed) the documents
    ensure_data_dirs()
    init_db()
    if integrity_check():
        logger.info("Database integrity check passed.")
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED for %s; stored documents may be corrupt.", settings.db_path)

    kv = KeyValueStore(get_session_factory())
    app.state.store = DocumentStore(kv).open()
    app.state.auth = AuthService(kv, settings)
    yield
    # Shutdown: every mutation is already flushed, just drop the in-memory view
    app.state.store.close()


app = FastAPI(
    title="SignDesk",
    description="Document signing demo: upload, share signing links, collect signatures",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(recipients.router, prefix=settings.api_prefix)
app.include_router(signing.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}


def run():
    uvicorn.run("signdesk.main:app", host=settings.host, port=settings.port)
