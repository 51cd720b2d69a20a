from pydantic import BaseModel


class MagicLinkRequest(BaseModel):
    email: str


class MagicLinkResponse(BaseModel):
    message: str


class VerifyRequest(BaseModel):
    email: str
    token: str


class SessionResponse(BaseModel):
    token: str
    user_id: str
    email: str
    expires_in_seconds: int


class MeResponse(BaseModel):
    user_id: str
    email: str
