from __future__ import annotations

from datetime import date

from src.salon_studio.salon_studio.clients.firestore_client_repository import FirestoreClientRepository, _to_instance
from src.salon_studio.salon_studio.core.enums import PackageInstanceStatus


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = True

    def to_dict(self):
        return dict(self._data)


class FakeCollection:
    def __init__(self, docs=None, subcollections=None):
        self._docs = docs or {}
        self._subcollections = subcollections or {}

    def stream(self):
        return [FakeSnapshot(doc_id, data) for doc_id, data in self._docs.items()]

    def document(self, doc_id):
        return FakeDocument(self, doc_id)


class FakeDocument:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self._id = doc_id

    def get(self):
        data = self._collection._docs.get(self._id)
        snap = FakeSnapshot(self._id, data or {})
        snap.exists = data is not None
        return snap

    def collection(self, name):
        return self._collection._subcollections.get((self._id, name), FakeCollection())


class FakeConn:
    def __init__(self, collections):
        self._collections = collections

    def collection(self, name):
        return self._collections[name]


def test_unreadable_expiry_is_treated_as_missing():
    inst = _to_instance({"id": "i1", "status": "Ativo", "services": [], "expiryDate": "31/12/2026"})

    assert inst.expiry_date is None
    assert not inst.is_expired(date(2030, 1, 1))


def test_malformed_instance_is_skipped_without_failing_the_client_list():
    packages = FakeCollection(
        {
            "good": {
                "packageName": "Pacote Essencial",
                "status": "Ativo",
                "services": [{"serviceId": "svc1", "remainingQuantity": 2}],
                "purchaseDate": "2026-03-01",
                "expiryDate": "2026-05-30",
            },
            "bad-status": {"status": "Pausado", "services": []},
            "bad-services": {"status": "Ativo", "services": [{"remainingQuantity": 1}]},
        }
    )
    clients = FakeCollection(
        {"c1": {"name": "Maria Silva", "stampsEarned": 3}, "c2": {"name": "Joana"}},
        {("c1", "purchasedPackages"): packages},
    )
    repo = FirestoreClientRepository(FakeConn({"clients": clients}))

    listed = repo.list_all()

    assert [c.name for c in listed] == ["Joana", "Maria Silva"]
    maria = repo.get_by_id("c1")
    assert [i.instance_id for i in maria.purchased_packages] == ["good"]
    assert maria.purchased_packages[0].status == PackageInstanceStatus.ACTIVE
    assert maria.purchased_packages[0].remaining_for("svc1") == 2
