"""Pydantic schemas for limit-guarded resource creation."""

from typing import Optional
from pydantic import BaseModel, Field, EmailStr

from leasehold.models.enums import MemberRole


class BusinessCreateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class PropertyCreateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=300)


class UnitCreateSchema(BaseModel):
    unit_number: str = Field(..., min_length=1, max_length=50)


class TenantAccessCreateSchema(BaseModel):
    tenant_name: str = Field(..., min_length=1, max_length=200)
    tenant_email: Optional[EmailStr] = None


class MemberCreateSchema(BaseModel):
    email: EmailStr
    role: MemberRole = Field(default=MemberRole.MEMBER)
