from pydantic import BaseModel


class SessionUser(BaseModel):
    """GitHub identity of the signed-in user"""

    user_id: str  # GitHub numeric account id
    username: str
    avatar_url: str | None = None


class SessionResponse(BaseModel):
    user: SessionUser


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    sub: str
    username: str
    avatar_url: str | None = None
    exp: int
