from pydantic import BaseModel


class Token(BaseModel):
    """
    Returned by /auth/login and /auth/refresh: a short-lived access token
    and a long-lived refresh token for the admin dashboard.
    """
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenBody(BaseModel):
    refresh_token: str
