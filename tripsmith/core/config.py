import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    """Application settings and configuration."""
    # Firebase service account key, as a JSON string
    FIREBASE_SERVICE_ACCOUNT_KEY_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_JSON")

    # Trips are stored in the Realtime Database
    FIREBASE_DATABASE_URL = os.getenv("FIREBASE_DATABASE_URL")

    # Text generation (Google Gemini REST API)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")

    # Retry policy for generation calls: attempts, and the first delay in seconds (doubles each retry)
    GENERATION_MAX_RETRIES = int(os.getenv("GENERATION_MAX_RETRIES", "3"))
    GENERATION_INITIAL_DELAY = float(os.getenv("GENERATION_INITIAL_DELAY", "1.0"))
    GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "60.0"))

    # Deployed frontend, added to the CORS origins when set
    FRONTEND_URL = os.getenv("FRONTEND_URL")

    # Bind address for the `tripsmith` console script
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", "8000"))

settings = Settings()
