from pydantic import BaseModel, Field

from signdesk.schemas.document import Document


class SigningLinkCreate(BaseModel):
    document_ids: list[str]
    name: str
    email: str


class SigningLinkResponse(BaseModel):
    recipient_id: str
    path: str
    url: str
    document_ids: list[str]


class RecipientSummary(BaseModel):
    recipient_id: str
    name: str
    email: str
    document_ids: list[str] = Field(default_factory=list)
    signed_count: int = 0
    all_signed: bool = False


class RecipientView(BaseModel):
    recipient_id: str
    documents: list[Document]
    remaining: int
