import os

SECRET_KEY = "test-secret"

FIRESTORE_CONFIG = {
    "project_id": os.getenv("FIRESTORE_PROJECT_ID", "nailstudio-test"),
    "credentials_path": "",
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

WHATSAPP_NUMBER = "19996959490"
ADMIN_EMAIL = "admin@nailstudio.ai"
PACKAGE_DEBIT_POLICY = "first_debit_only"
