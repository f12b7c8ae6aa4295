"""Firebase Admin SDK bootstrap for the blog backend."""

import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from blogapp.config import settings

logger = logging.getLogger(__name__)


class FirebaseService:
    """
    Owns the Firebase Admin app and hands out Firestore clients.

    Credentials are resolved in order: service account file, inline
    client email and private key, then application default credentials.
    """

    def __init__(self):
        self._app: Optional[firebase_admin.App] = None
        self._db: Optional[Any] = None
        self._initialized: bool = False

    def _build_credential(self) -> credentials.Base:
        if settings.FIREBASE_CREDENTIALS_PATH:
            return credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)

        if settings.FIREBASE_CLIENT_EMAIL and settings.FIREBASE_PRIVATE_KEY:
            service_account: Dict[str, str] = {
                "type": "service_account",
                "project_id": settings.FIREBASE_PROJECT_ID or "",
                "client_email": settings.FIREBASE_CLIENT_EMAIL,
                # Keys pasted into env files carry escaped newlines
                "private_key": settings.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
                "token_uri": "https://oauth2.googleapis.com/token",
            }
            return credentials.Certificate(service_account)

        return credentials.ApplicationDefault()

    def initialize(self) -> firebase_admin.App:
        """
        Initialize the Firebase Admin SDK once per process.

        Returns:
            firebase_admin.App: The default app.

        Raises:
            FileNotFoundError: If the configured credentials file is missing.
            ValueError: If the credentials are malformed.
        """
        if self._initialized and self._app is not None:
            logger.debug("Firebase already initialized, skipping.")
            return self._app

        options = {}
        if settings.FIREBASE_PROJECT_ID:
            options["projectId"] = settings.FIREBASE_PROJECT_ID

        try:
            self._app = firebase_admin.get_app()
        except ValueError:
            try:
                self._app = firebase_admin.initialize_app(self._build_credential(), options)
            except FileNotFoundError:
                logger.error(
                    f"Firebase credentials file not found: {settings.FIREBASE_CREDENTIALS_PATH}"
                )
                raise
            except ValueError as e:
                logger.error(f"Failed to initialize Firebase: {e}")
                raise

        self._initialized = True
        logger.info(f"Firebase initialized for project: {self._app.project_id}")
        return self._app

    def is_initialized(self) -> bool:
        """Check whether Firebase Admin SDK is ready."""
        return self._initialized

    @property
    def app(self) -> firebase_admin.App:
        return self.initialize()

    def get_firestore(self) -> Any:
        """Return the shared Firestore client, creating it on first use."""
        if self._db is None:
            self._db = firestore.client(app=self.app)
        return self._db


# Singleton instance
firebase_service = FirebaseService()
