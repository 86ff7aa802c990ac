import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "studio_ledger"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Churn risk: how many recent occurrences to look at, and how many consecutive absences flag a person
CHURN_WINDOW = int(os.getenv("CHURN_WINDOW", "5"))
CHURN_THRESHOLD = int(os.getenv("CHURN_THRESHOLD", "3"))

# Look-ahead window (days) for upcoming payment reminders
PAYMENT_REMINDER_DAYS = int(os.getenv("PAYMENT_REMINDER_DAYS", "7"))

LOG_DIR = os.getenv("LOG_DIR", "logs")
