import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "studio_ledger"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

CHURN_WINDOW = int(os.getenv("CHURN_WINDOW", "5"))
CHURN_THRESHOLD = int(os.getenv("CHURN_THRESHOLD", "3"))
PAYMENT_REMINDER_DAYS = int(os.getenv("PAYMENT_REMINDER_DAYS", "7"))

LOG_DIR = os.getenv("LOG_DIR", "logs")
