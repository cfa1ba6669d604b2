# File: src/certifier/config/internship_config.py
"""
Static program details printed on every certificate, plus the defaults used
when a record is created for an allow-listed email.
"""
import os
from datetime import date, datetime
from dotenv import load_dotenv
from pydantic import BaseModel

from src.certifier.utils.time import get_utc_time

load_dotenv()


class Coordinator(BaseModel):
    name: str
    title: str
    organization: str


class CompanyAddress(BaseModel):
    line1: str
    line2: str
    line3: str


class Company(BaseModel):
    full_name: str
    address: CompanyAddress
    website: str
    email: str
    phone: str


class InternshipConfig(BaseModel):
    coordinator: Coordinator
    company: Company


INTERNSHIP_CONFIG = InternshipConfig(
    coordinator=Coordinator(
        name=os.getenv("COORDINATOR_NAME", "Harshdeepsinh"),
        title=os.getenv("COORDINATOR_TITLE", "Internship Coordinator"),
        organization=os.getenv("COORDINATOR_ORGANIZATION", "LinkVerse Labs, Ahmedabad"),
    ),
    company=Company(
        full_name="LinkVerse Labs Private LTD",
        address=CompanyAddress(
            line1="E-703, Ganesh Glory 11,",
            line2="SG Highway, Ahmedabad",
            line3="CIN: U62099GJ2025PTC158752",
        ),
        website="www.linkverselabs.com",
        email="info@linkverselabs.com",
        phone="+91 6354035567",
    ),
)


def _env_date(name: str, default: str) -> date:
    return datetime.strptime(os.getenv(name, default), "%Y-%m-%d").date()


# Program metadata for records created lazily from the allow-list
DEFAULT_FIELD = os.getenv("DEFAULT_FIELD", "Web Development")
DEFAULT_START_DATE = _env_date("DEFAULT_START_DATE", "2024-01-01")
DEFAULT_END_DATE = _env_date("DEFAULT_END_DATE", "2024-12-31")


def get_current_date() -> str:
    return get_utc_time().strftime("%B %d, %Y")


def get_internship_config(**customizations) -> InternshipConfig:
    """Return the program config with top-level fields overridden."""
    return INTERNSHIP_CONFIG.model_copy(update=customizations)
