from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core.config import get_settings

settings = get_settings()


def create_access_token(subject: str, role: str = "user", expires_minutes: int | None = None) -> str:
    # Tokens are minted by the auth service in production; this mirrors its
    # claim layout for ops scripts and tests.
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    claims = {"sub": str(subject), "role": role, "type": "access", "exp": expire}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
