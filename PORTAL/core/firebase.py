# file: PORTAL/core/firebase.py

import os
import json
import logging
import firebase_admin
from firebase_admin import credentials, firestore

from PORTAL.core.config import AppConfig

logger = logging.getLogger("core.firebase")
logger.setLevel(logging.INFO)


# ------------------------------
# Firestore (profile image records)
# ------------------------------
def init_firestore(config: AppConfig):
    """
    Initialise the default Firebase app once and return a Firestore client.
    GOOGLE_APPLICATION_CREDENTIALS may hold a file path or raw JSON.
    """
    source = config.credential_source

    try:
        if not source:
            raise ValueError("GOOGLE_APPLICATION_CREDENTIALS env var is not set")

        # Case 1: it's a file path
        if os.path.exists(source):
            logger.info("Loading Firebase credentials from file: %s", source)
            cred = credentials.Certificate(source)
        else:
            # Case 2: it's a raw JSON string
            logger.info("Loading Firebase credentials from raw JSON string")
            cred = credentials.Certificate(json.loads(source))

        if not firebase_admin._apps:
            options = {"projectId": config.firebase_project_id} if config.firebase_project_id else None
            app = firebase_admin.initialize_app(cred, options)
            logger.info("Firebase initialized with project: %s", app.project_id)

        db = firestore.client()
        logger.info("Firestore client project: %s", db.project)
        return db

    except Exception as e:
        logger.exception("Failed to initialize Firebase Firestore: %s", e)
        raise


__all__ = ["init_firestore"]
