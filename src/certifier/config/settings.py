import os
import logging
from typing import FrozenSet, Iterable, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./interns.db")

# Whether an allow-listed email without a record gets one created on request.
# When disabled, only pre-provisioned records can receive certificates.
ALLOW_LIST_PROVISIONING = os.getenv("ALLOW_LIST_PROVISIONING", "true").lower() in ("1", "true", "yes")

SIGNED_URL_EXPIRES_IN = int(os.getenv("SIGNED_URL_EXPIRES_IN", "3600"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

VERIFIED_EMAILS = os.getenv("VERIFIED_EMAILS", "")
VERIFIED_EMAILS_FILE = os.getenv("VERIFIED_EMAILS_FILE")


def normalize_email(email: str) -> str:
    return email.lower().strip()


def parse_verified_emails(lines: Iterable[str]) -> FrozenSet[str]:
    """Normalise raw allow-list entries, skipping blanks and `#` comments."""
    emails = set()
    for line in lines:
        entry = line.split("#", 1)[0].strip()
        if entry:
            emails.add(normalize_email(entry))
    return frozenset(emails)


def load_verified_emails(raw: Optional[str] = None, path: Optional[str] = None) -> FrozenSet[str]:
    """
    Build the allow-list from the comma-separated VERIFIED_EMAILS value and
    the optional VERIFIED_EMAILS_FILE (one email per line).
    """
    raw = VERIFIED_EMAILS if raw is None else raw
    path = VERIFIED_EMAILS_FILE if path is None else path

    emails = set(parse_verified_emails(raw.split(",")))
    if path:
        with open(path, encoding="utf-8") as f:
            emails.update(parse_verified_emails(f))
    logger.info(f"Loaded {len(emails)} verified emails")
    return frozenset(emails)
