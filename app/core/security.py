
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core import errors
from app.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """Claims carried by a bearer token."""
    user_id: int
    is_artist: bool = False
    artist_id: Optional[int] = None


class IdentityProvider:
    """Issues and verifies the HS256 bearer tokens used by the API."""

    def __init__(self, secret_key: str, expire_minutes: int):
        self.secret_key = secret_key
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityProvider":
        return cls(settings.SECRET_KEY, settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(
        self,
        user_id: int,
        is_artist: bool = False,
        artist_id: Optional[int] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.expire_minutes)
        )
        to_encode = {
            "exp": expire,
            "sub": str(user_id),
            "isArtist": is_artist,
        }
        if artist_id is not None:
            to_encode["artistId"] = artist_id
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> Identity:
        if not token:
            raise errors.Unauthenticated()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
            user_id = int(payload["sub"])
        except (JWTError, KeyError, TypeError, ValueError):
            raise errors.InvalidToken()
        artist_id = payload.get("artistId")
        return Identity(
            user_id=user_id,
            is_artist=bool(payload.get("isArtist", False)),
            artist_id=int(artist_id) if artist_id is not None else None,
        )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
