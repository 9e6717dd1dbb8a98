import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

FIRESTORE_CONFIG = {
    "project_id": os.getenv("FIRESTORE_PROJECT_ID", ""),
    "credentials_path": os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "19996959490")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@nailstudio.ai")
PACKAGE_DEBIT_POLICY = os.getenv("PACKAGE_DEBIT_POLICY", "first_debit_only")
