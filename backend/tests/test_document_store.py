import pytest

from signdesk.schemas.document import Recipient, SentDocument, UnsignedDocument
from signdesk.services.document_store import (
    DOCUMENTS_KEY,
    SAMPLE_DOCUMENTS,
    DocumentStore,
    InvalidDocumentError,
)
from signdesk.utils.ids import TimeIdGenerator


def _recipient(recipient_id="r-1"):
    return Recipient(name="Jane Doe", email="jane@example.com", recipient_id=recipient_id)


class TestCreate:
    def test_new_document_is_unsigned(self, store):
        doc = store.create(title="Contract.pdf", url="/contract.pdf")
        assert isinstance(doc, UnsignedDocument)
        assert doc.status == "unsigned"
        assert not hasattr(doc, "recipient")
        assert not hasattr(doc, "signature")
        assert doc.uploaded.endswith("Z")

    def test_ids_are_unique(self, store):
        ids = {store.create(title="Same.pdf", url="/same.pdf").id for _ in range(20)}
        assert len(ids) == 20

    def test_empty_and_duplicate_titles_allowed(self, store):
        store.create(title="", url="")
        store.create(title="", url="")
        assert len(store.all()) == 2

    def test_create_persists(self, store, kv):
        doc = store.create(title="Contract.pdf", url="/contract.pdf")
        stored = kv.get(DOCUMENTS_KEY)
        assert [d["id"] for d in stored] == [doc.id]


class TestGet:
    def test_get_missing_returns_none(self, store):
        assert store.get("does-not-exist") is None

    def test_get_by_recipient_in_creation_order(self, store):
        a = store.create(title="A.pdf", url="/a.pdf")
        b = store.create(title="B.pdf", url="/b.pdf")
        c = store.create(title="C.pdf", url="/c.pdf")
        store.update(b.id, status="sent", recipient=_recipient("group"))
        store.update(a.id, status="sent", recipient=_recipient("group"))
        store.update(c.id, status="sent", recipient=_recipient("other"))

        assert [d.id for d in store.get_by_recipient("group")] == [a.id, b.id]

    def test_get_by_unknown_recipient_is_empty(self, store):
        store.create(title="A.pdf", url="/a.pdf")
        assert store.get_by_recipient("nobody") == []


class TestUpdate:
    def test_shallow_merge(self, store):
        doc = store.create(title="A.pdf", url="/a.pdf")
        updated = store.update(doc.id, title="Renamed.pdf")
        assert updated.title == "Renamed.pdf"
        assert updated.url == "/a.pdf"
        assert store.get(doc.id) == updated

    def test_update_to_sent_with_recipient(self, store):
        doc = store.create(title="A.pdf", url="/a.pdf")
        updated = store.update(doc.id, status="sent", recipient=_recipient())
        assert isinstance(updated, SentDocument)
        assert updated.recipient.name == "Jane Doe"

    def test_update_missing_is_noop(self, store, kv):
        store.create(title="A.pdf", url="/a.pdf")
        before = kv.get(DOCUMENTS_KEY)
        assert store.update("missing", title="x") is None
        assert kv.get(DOCUMENTS_KEY) == before

    def test_sent_without_recipient_rejected(self, store):
        doc = store.create(title="A.pdf", url="/a.pdf")
        with pytest.raises(InvalidDocumentError):
            store.update(doc.id, status="sent")
        assert store.get(doc.id).status == "unsigned"

    def test_signed_without_signature_rejected(self, store):
        doc = store.create(title="A.pdf", url="/a.pdf")
        store.update(doc.id, status="sent", recipient=_recipient())
        with pytest.raises(InvalidDocumentError):
            store.update(doc.id, status="signed")
        assert store.get(doc.id).status == "sent"


class TestPersistence:
    def test_first_open_seeds_demo_documents(self, kv):
        store = DocumentStore(kv).open()
        assert [d.id for d in store.all()] == [d["id"] for d in SAMPLE_DOCUMENTS]
        assert kv.get(DOCUMENTS_KEY) is not None

    def test_reopen_does_not_reseed(self, kv):
        DocumentStore(kv, seed=[]).open().create(title="Mine.pdf", url="/mine.pdf")
        reopened = DocumentStore(kv).open()
        assert [d.title for d in reopened.all()] == ["Mine.pdf"]

    def test_round_trip(self, store, kv):
        a = store.create(title="A.pdf", url="/a.pdf")
        store.create(title="B.pdf", url="/b.pdf")
        store.update(a.id, status="sent", recipient=_recipient())
        before = store.all()

        store.close()
        reloaded = DocumentStore(kv).open()
        assert reloaded.all() == before

    def test_closed_store_refuses_access(self, store):
        store.close()
        assert not store.is_open
        with pytest.raises(RuntimeError):
            store.all()


class TestQueries:
    def test_search_by_title_and_status(self, store):
        a = store.create(title="Service Contract.pdf", url="/a.pdf")
        store.create(title="NDA.pdf", url="/b.pdf")
        store.update(a.id, status="sent", recipient=_recipient())

        assert [d.id for d in store.search(q="contract")] == [a.id]
        assert [d.id for d in store.search(status="sent")] == [a.id]
        assert store.search(q="contract", status="unsigned") == []

    def test_status_counts(self, kv):
        store = DocumentStore(kv).open()
        assert store.status_counts() == {"all": 4, "unsigned": 1, "sent": 1, "viewed": 0, "signed": 2}


class TestTimeIdGenerator:
    def test_bumps_when_clock_stalls(self):
        gen = TimeIdGenerator(clock=lambda: 1700000000.0)
        assert [gen(), gen(), gen()] == ["1700000000000", "1700000000001", "1700000000002"]

    def test_follows_clock(self):
        ticks = iter([1.0, 2.0])
        gen = TimeIdGenerator(clock=lambda: next(ticks))
        assert gen() == "1000"
        assert gen() == "2000"
