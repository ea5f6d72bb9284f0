import json
import logging

import firebase_admin
from firebase_admin import credentials

from tripsmith.core.config import settings

logger = logging.getLogger(__name__)

def initialize_firebase():
    """Initializes the Firebase Admin SDK. Returns True when the app is ready."""
    if firebase_admin._apps:
        return True

    if not settings.FIREBASE_SERVICE_ACCOUNT_KEY_JSON:
        logger.warning("FIREBASE_SERVICE_ACCOUNT_KEY_JSON is not set; auth and trip storage are unavailable.")
        return False

    try:
        # The service account key is expected to be a JSON string in the environment variable.
        service_account_info = json.loads(settings.FIREBASE_SERVICE_ACCOUNT_KEY_JSON)
        cred = credentials.Certificate(service_account_info)

        firebase_admin.initialize_app(cred, {
            'databaseURL': settings.FIREBASE_DATABASE_URL
        })
        logger.info("Firebase initialized successfully.")
        return True
    except (ValueError, IOError) as e:
        # The app keeps serving the stateless parsing endpoints; storage calls will fail.
        logger.error("Error initializing Firebase: %s", e)
        return False
