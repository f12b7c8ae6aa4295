"""Blog backend on Firestore and Firebase Authentication."""

__version__ = "1.0.0"
