# File: src/certifier/models/intern.py
from sqlmodel import SQLModel, Field
from datetime import date, datetime
from sqlalchemy import DateTime
from typing import Optional
from src.certifier.utils.time import get_utc_time


class Intern(SQLModel, table=True):
    __tablename__ = "intern"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)  # lowercased and trimmed
    name: str
    college: str
    field: str = Field(index=True)
    start_date: date
    end_date: date
    certificate_key: Optional[str] = Field(default=None)  # S3 key of the latest PDF
    created_at: datetime = Field(default_factory=get_utc_time, sa_type=DateTime(timezone=True))
