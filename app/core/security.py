from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta
from app.core.config import settings
import uuid

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def dummy_verify() -> None:
    """Spend the same time as a real verification when no hash exists."""
    pwd_context.dummy_verify()


def _encode(claims: dict, secret: str, lifetime: timedelta, token_type: str) -> str:
    to_encode = claims.copy()
    to_encode.update({
        "exp": datetime.utcnow() + lifetime,
        "jti": str(uuid.uuid4()),
        "type": token_type,
    })
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)

def create_access_token(claims: dict) -> str:
    return _encode(claims, settings.JWT_SECRET, settings.access_token_lifetime, ACCESS_TOKEN_TYPE)

def create_refresh_token(claims: dict) -> str:
    return _encode(claims, settings.REFRESH_SECRET, settings.refresh_token_lifetime, REFRESH_TOKEN_TYPE)


def _decode(token: str, secret: str, token_type: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != token_type:
        raise JWTError(f"Expected a {token_type} token")
    return payload

def decode_access_token(token: str) -> dict:
    """Verify signature, expiry and type; raises JWTError on any failure."""
    return _decode(token, settings.JWT_SECRET, ACCESS_TOKEN_TYPE)

def decode_refresh_token(token: str) -> dict:
    return _decode(token, settings.REFRESH_SECRET, REFRESH_TOKEN_TYPE)
