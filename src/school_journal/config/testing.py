import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_journal_test"),
}

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

API_BASE_URL = "http://testserver"
CLIENT_DATA_DIR = os.getenv("CLIENT_DATA_DIR", ".school_journal_test")
POLL_INTERVAL_SECONDS = 0.05
BOOTSTRAP_TIMEOUT_SECONDS = 2.0
HTTP_TIMEOUT_SECONDS = 5.0
