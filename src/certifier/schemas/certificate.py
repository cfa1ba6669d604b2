# File location: src/certifier/schemas/certificate.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel


class CertificateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    college: str = Field(..., min_length=1, max_length=200)
    email: EmailStr

    class Config:
        str_strip_whitespace = True


class CertificateResponse(BaseModel):
    success: bool = True
    message: str
    download_url: str
    preview_url: str
    is_existing: bool
    certificate_id: Optional[str] = None
    student_name: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VerifyStudentRequest(BaseModel):
    email: EmailStr


class StudentRead(BaseModel):
    id: int
    name: str
    college: str
    email: str
    field: str
    start_date: date
    end_date: date
    has_existing_certificate: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VerifyStudentResponse(BaseModel):
    verified: bool
    student: Optional[StudentRead] = None
