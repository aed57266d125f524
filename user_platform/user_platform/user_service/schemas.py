from pydantic import BaseModel, ConfigDict

from typing import Optional

# Fields are optional so that missing values reach the service layer and
# fail with the same errors as empty or short ones.
class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    # Accepted for compatibility, always overwritten with the default role
    role: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    username: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class AuthenticationRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthenticationResponse(BaseModel):
    token: str


class HealthResponse(BaseModel):
    status: str = "ok"
