# server/core/security.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from config import settings


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# -------------------------------
# Password hashing
# -------------------------------

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------
# Access tokens
# -------------------------------

@dataclass(frozen=True)
class TokenCheck:
    """
    Outcome of verifying a bearer token. Exactly one of user_id / error is set;
    error is "expired" or "invalid".
    """
    user_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def issue(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Signs a token for user_id that expires after ACCESS_TOKEN_EXPIRE_MINUTES
    unless expires_delta says otherwise.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": user_id, "iat": now, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify(token: str) -> TokenCheck:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        return TokenCheck(error="expired")
    except JWTError as e:
        logger.debug("Rejected token: %s", e)
        return TokenCheck(error="invalid")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return TokenCheck(error="invalid")
    return TokenCheck(user_id=user_id)
