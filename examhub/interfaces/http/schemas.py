from pydantic import BaseModel, EmailStr
from ...domain.entities import Role

class RegisterReq(BaseModel):
    email: EmailStr
    password: str
    name: str | None = None

class LoginReq(BaseModel):
    email: EmailStr
    password: str

class UserResp(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: Role

class TokenResp(BaseModel):
    access_token: str
    token_type: str = "bearer"

class SessionRefreshReq(BaseModel):
    patch: dict | None = None

class SessionResp(TokenResp):
    user: UserResp

# Role arrives as a raw string and is parsed by the use case so that bad
# values are reported as 400 rather than a schema error.
class ProfileUpdateReq(BaseModel):
    name: str | None = None
    role: str | None = None

class RoleUpdateReq(BaseModel):
    role: str | None = None

class ProfileView(BaseModel):
    name: str
    email: EmailStr
    role: Role

class ProfileUpdateResp(BaseModel):
    message: str
    user: ProfileView

class RoleUpdateResp(BaseModel):
    message: str
    user: UserResp

class RoleResp(BaseModel):
    role: Role

class DashboardResp(BaseModel):
    role: Role
    view: str
    sections: list[str]
