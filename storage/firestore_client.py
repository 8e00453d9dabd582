from __future__ import annotations

from functools import lru_cache

from google.cloud import firestore
from config.settings import settings


@lru_cache(maxsize=1)
def get_firestore_client() -> firestore.Client:
    # Listeners and writes share one client (one gRPC channel) per process.
    # If FIRESTORE_PROJECT_ID is empty, the library will use ADC default project.
    if settings.FIRESTORE_PROJECT_ID:
        return firestore.Client(project=settings.FIRESTORE_PROJECT_ID)
    return firestore.Client()
