from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import settings
from app.schemas.user import SessionUser, TokenPayload

ALGORITHM = "HS256"


def create_access_token(user: SessionUser) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode = {
        "sub": user.user_id,
        "username": user.username,
        "avatar_url": user.avatar_url,
        "exp": int(expire.timestamp()),
    }
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> TokenPayload | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        return TokenPayload(
            sub=payload["sub"],
            username=payload["username"],
            avatar_url=payload.get("avatar_url"),
            exp=payload["exp"],
        )
    except (JWTError, KeyError):
        return None
