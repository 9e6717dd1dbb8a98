from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import firestore

from ..core.exceptions import DomainError, ExternalServiceError

logger = logging.getLogger(__name__)

SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP

# Firestore caps a write batch at 500 operations.
MAX_BATCH_WRITES = 500


@contextmanager
def firestore_call(operation: str) -> Iterator[None]:
    """Wrap one round trip to Firestore.

    Domain errors pass through; anything raised by the client library is logged and
    re-raised as ExternalServiceError so controllers can report it to the operator.
    """

    try:
        yield
    except DomainError:
        raise
    except Exception as e:
        logger.exception("Firestore call failed: %s", operation)
        raise ExternalServiceError(f"Falha ao acessar o banco de dados ({operation}).") from e


def snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
    if snapshot is None or not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


def snapshots_to_dicts(snapshots) -> List[Dict[str, Any]]:
    out: list[dict] = []
    for snap in snapshots:
        row = snapshot_to_dict(snap)
        if row is not None:
            out.append(row)
    return out


def stamped(data: Dict[str, Any], *, created: bool = False) -> Dict[str, Any]:
    """Add server-side createdAt/updatedAt markers to a write payload."""

    out = dict(data)
    out["updatedAt"] = SERVER_TIMESTAMP
    if created:
        out["createdAt"] = SERVER_TIMESTAMP
    return out


def delete_all(db, collection_name: str) -> int:
    """Delete every document of a collection in batches. Returns the number removed."""

    deleted = 0
    batch = db.batch()
    pending = 0
    for snap in db.collection(collection_name).stream():
        batch.delete(snap.reference)
        pending += 1
        deleted += 1
        if pending >= MAX_BATCH_WRITES:
            batch.commit()
            batch = db.batch()
            pending = 0
    if pending:
        batch.commit()
    return deleted
