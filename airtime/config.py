import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./airtime.db")

# Firebase Configuration (ID token verification)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Shared secret for the external scheduler hitting /api/cron/update-job-status.
# When unset the endpoint is open, like the original deployment.
CRON_SECRET = os.getenv("CRON_SECRET")

# How often the worker runs the status sync pass (minutes)
STATUS_SYNC_INTERVAL_MINUTES = int(os.getenv("STATUS_SYNC_INTERVAL_MINUTES", "1"))

# Raise a pending invoice automatically when the sync pass completes a job
AUTO_INVOICE_COMPLETED_JOBS = os.getenv("AUTO_INVOICE_COMPLETED_JOBS", "false").lower() == "true"
INVOICE_DUE_DAYS = int(os.getenv("INVOICE_DUE_DAYS", "30"))
INVOICE_CURRENCY = os.getenv("INVOICE_CURRENCY", "NGN")

# Company header printed on invoice PDFs
COMPANY_NAME = os.getenv("COMPANY_NAME", "Your Company")
COMPANY_ADDRESS = os.getenv("COMPANY_ADDRESS", "Lagos, Nigeria")
COMPANY_EMAIL = os.getenv("COMPANY_EMAIL", "contact@yourcompany.com")
COMPANY_PHONE = os.getenv("COMPANY_PHONE", "+234 123 456 7890")

# Frontend base URL (dashboard)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Publish job/invoice change events to Redis for the dashboard
REALTIME_ENABLED = os.getenv("REALTIME_ENABLED", "true").lower() == "true"
