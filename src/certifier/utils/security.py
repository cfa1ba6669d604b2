# File location: src/certifier/utils/security.py
import os
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Response
from dotenv import load_dotenv
from src.certifier.utils.time import get_utc_time

# Load environment variables
load_dotenv()

# Security settings
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
IS_PRODUCTION = os.getenv("ENVIRONMENT") == "production"

ADMIN_SESSION_COOKIE = "admin_session_token"
SESSION_DURATION = timedelta(hours=24)


def verify_admin_credentials(username: str, password: str) -> bool:
    username_ok = hmac.compare_digest(username.encode(), ADMIN_USERNAME.encode())
    password_ok = hmac.compare_digest(password.encode(), ADMIN_PASSWORD.encode())
    return username_ok and password_ok


def create_session_token(now: Optional[datetime] = None) -> str:
    """Signed token carrying its issuance time and a random id."""
    issued_at = now or get_utc_time()
    to_encode = {
        "sub": "admin",
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + SESSION_DURATION).timestamp()),
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def is_valid_session_token(token: Optional[str], now: Optional[datetime] = None) -> bool:
    """A token is valid while less than SESSION_DURATION has passed since it was issued."""
    if not token:
        return False
    try:
        # Expiry is checked below against `now`
        payload = jwt.decode(
            token, SECRET_KEY, algorithms=[ALGORITHM],
            options={"verify_exp": False, "verify_iat": False},
        )
    except JWTError:
        return False

    issued_at = payload.get("iat")
    if not isinstance(issued_at, int) or payload.get("sub") != "admin":
        return False
    age = (now or get_utc_time()).timestamp() - issued_at
    return 0 <= age < SESSION_DURATION.total_seconds()


def set_admin_session_cookie(response: Response, token: str) -> Response:
    response.set_cookie(
        key=ADMIN_SESSION_COOKIE,
        value=token,
        httponly=True,
        max_age=int(SESSION_DURATION.total_seconds()),
        samesite="strict",
        secure=IS_PRODUCTION,  # Only send over HTTPS in production
        path="/",
    )
    return response


def clear_admin_session_cookie(response: Response) -> Response:
    response.delete_cookie(
        key=ADMIN_SESSION_COOKIE,
        path="/",
        httponly=True,
        samesite="strict",
        secure=IS_PRODUCTION,
    )
    return response
