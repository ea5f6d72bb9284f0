from pydantic import BaseModel, EmailStr

class UserInfo(BaseModel):
    """Schema for returning the authenticated user's identity."""
    uid: str
    email: EmailStr | None = None
    full_name: str | None = None
