"""
Document records, one model per lifecycle status.

The ``status`` field discriminates the union, and every model forbids extra
fields, so a record can only carry a recipient once it has been sent and a
signature once it has been signed.
"""
from typing import Annotated, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

VALID_STATUSES = ("unsigned", "sent", "viewed", "signed")

SignatureType = Literal["draw", "type", "upload"]
VALID_SIGNATURE_TYPES = set(get_args(SignatureType))


class Recipient(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    email: str
    recipient_id: str


class Signature(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    data: str
    type: SignatureType
    name: str
    timestamp: str


class _DocumentBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    title: str
    url: str
    uploaded: str


class UnsignedDocument(_DocumentBase):
    status: Literal["unsigned"] = "unsigned"


class SentDocument(_DocumentBase):
    status: Literal["sent"] = "sent"
    recipient: Recipient


class ViewedDocument(_DocumentBase):
    status: Literal["viewed"] = "viewed"
    recipient: Recipient


class SignedDocument(_DocumentBase):
    status: Literal["signed"] = "signed"
    recipient: Recipient
    signature: Signature


Document = Annotated[
    Union[UnsignedDocument, SentDocument, ViewedDocument, SignedDocument],
    Field(discriminator="status"),
]

document_adapter = TypeAdapter(Document)
document_list_adapter = TypeAdapter(list[Document])


class DocumentCreate(BaseModel):
    title: str
    url: str


class DocumentStats(BaseModel):
    all: int
    unsigned: int
    sent: int
    viewed: int
    signed: int


class SignatureSubmit(BaseModel):
    name: str
    type: SignatureType
    data: str
