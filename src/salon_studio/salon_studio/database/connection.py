from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    project_id: str
    credentials_path: Optional[str] = None


class DatabaseConnection:
    """Singleton-like Firestore client factory.

    Note: firebase_admin keeps one default app per process; the client is created lazily
    so importing the package never touches the network.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: FirestoreConfig):
        self._config = config
        self._client: Any = None

    @classmethod
    def get_instance(cls, config: FirestoreConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def _ensure_app(self) -> None:
        try:
            firebase_admin.get_app()
            return
        except ValueError:
            pass

        options = {"projectId": self._config.project_id}
        if self._config.credentials_path:
            cred = credentials.Certificate(self._config.credentials_path)
            firebase_admin.initialize_app(cred, options)
            logger.info("Firebase Admin initialized with service account %s", self._config.credentials_path)
        else:
            cred = credentials.ApplicationDefault()
            firebase_admin.initialize_app(cred, options)
            logger.info("Firebase Admin initialized with default credentials")

    def client(self):
        if self._client is None:
            self._ensure_app()
            self._client = firestore.client()
        return self._client

    def collection(self, name: str):
        return self.client().collection(name)
