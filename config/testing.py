import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "studio_ledger_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

CHURN_WINDOW = 5
CHURN_THRESHOLD = 3
PAYMENT_REMINDER_DAYS = 7

LOG_DIR = None
