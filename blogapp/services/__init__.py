"""Services package for the blog backend."""

from .firebase_service import firebase_service
from .identity_service import identity_service

__all__ = ["firebase_service", "identity_service"]
