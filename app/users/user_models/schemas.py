# app/users/user_models/schemas.py


from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.system_models.base_schemas import blank_to_none

# Allowed values as constants
ROLES = Literal["patient", "doctor", "receptionist"]


class AuthSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ✅ Request schema for self-registration (role is always patient)
class UserRegister(AuthSchema):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        # sourcery skip: assign-if-exp, reintroduce-else
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("phone", "address", "date_of_birth", "gender", mode="before")
    def empty_as_missing(cls, v):
        return blank_to_none(v)


# ✅ User login request
class UserLogin(AuthSchema):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Account created by the clinic (seed data, staff onboarding)
class AccountCreate(AuthSchema):
    email: EmailStr
    password: str
    role: ROLES
    name: str
    phone: Optional[str] = None
    subject_id: Optional[int] = None

    @model_validator(mode="after")
    def linked_to_record(self):
        # Patients and doctors act as exactly one clinic record
        if self.role in ("patient", "doctor") and self.subject_id is None:
            raise ValueError(f"A {self.role} account needs a subject_id")
        return self


# ✅ Response schema for user info
class UserResponse(AuthSchema):
    id: int
    email: str
    role: ROLES
    name: str
    phone: Optional[str] = None
    subject_id: Optional[int] = None
    is_active: bool = True


# ✅ Response schema for user login / registration
class UserLoginResponse(AuthSchema):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
