"""Configuration loader for the check-in kiosk with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

server_dir = Path(__file__).parent.parent.parent
env_path = server_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    # "sheets" (Google Sheets) or "sql" (SQLModel engine at database_url)
    "attendee_store": os.getenv("ATTENDEE_STORE", "sql"),
    "database_url": os.getenv("DATABASE_URL", "sqlite:///./attendees.db"),
    "redis_url": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    "google_service_account_file": os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE"),
    "spreadsheet_id": os.getenv("SPREADSHEET_ID"),
    "sheet_name": os.getenv("SHEET_NAME", "Attendees"),
    "cache_key": os.getenv("CACHE_KEY", "SHEET_DATA"),
    "cache_ttl_seconds": int(os.getenv("CACHE_TTL_SECONDS", "600")),
    # Snapshots larger than this are served uncached
    "cache_max_bytes": int(os.getenv("CACHE_MAX_BYTES", "100000")),
    # Rehearsal account: check-ins are simulated and never persisted
    "test_phone": os.getenv("TEST_PHONE", "0987654321"),
    "phone_country_code": os.getenv("PHONE_COUNTRY_CODE", "886"),
    "time_zone": os.getenv("TIME_ZONE", "Asia/Taipei"),
    "allowed_origins": os.getenv("ALLOWED_ORIGINS", "*"),
    "port": int(os.getenv("PORT", "8080")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "kiosk_api_url": os.getenv("KIOSK_API_URL", "http://localhost:8080/api"),
    "environment": os.getenv("ENVIRONMENT"),
}
