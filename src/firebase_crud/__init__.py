"""CRUD-style helpers over Firebase Auth, Firestore, Realtime Database and Storage."""

from firebase_crud.auth.authentication import Authentication
from firebase_crud.firebase_app import configure_firebase, get_services
from firebase_crud.outcome import NO_PAYLOAD, Outcome, ServiceCallFailure
from firebase_crud.storage.blob_model import StorageModel
from firebase_crud.storage.firestore_model import FirestoreModel
from firebase_crud.storage.realtime_model import RealTimeModel

__all__ = [
    "Authentication",
    "FirestoreModel",
    "NO_PAYLOAD",
    "Outcome",
    "RealTimeModel",
    "ServiceCallFailure",
    "StorageModel",
    "configure_firebase",
    "get_services",
]
