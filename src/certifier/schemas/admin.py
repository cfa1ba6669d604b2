# File location: src/certifier/schemas/admin.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class AdminLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    expires_in: str = "24 hours"

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FieldCount(BaseModel):
    field: str
    count: int


class RecentIntern(BaseModel):
    id: int
    name: str
    college: str
    email: str
    field: str
    start_date: date
    end_date: date
    certificate_key: Optional[str] = None
    has_certificate: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class AdminStats(BaseModel):
    total_interns: int
    interns_with_certificates: int
    interns_without_certificates: int
    recent_certificates: int
    completion_rate: int
    field_breakdown: List[FieldCount]
    recent_interns: List[RecentIntern]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class AdminStatsResponse(BaseModel):
    success: bool = True
    data: AdminStats
