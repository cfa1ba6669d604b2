# File location: src/certifier/utils/dependencies.py
from typing import AbstractSet, Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from src.certifier.config import settings
from src.certifier.config.internship_config import DEFAULT_END_DATE, DEFAULT_FIELD, DEFAULT_START_DATE
from src.certifier.db.session import get_db
from src.certifier.repositories.intern_repository import InternRepository
from src.certifier.services.issuance import CertificateIssuer, ProgramDefaults
from src.certifier.utils.exceptions import AdminUnauthorized
from src.certifier.utils.file import S3BlobStore
from src.certifier.utils.security import ADMIN_SESSION_COOKIE, is_valid_session_token


def get_intern_repository(session: Annotated[Session, Depends(get_db)]) -> InternRepository:
    return InternRepository(session)


def get_blob_store(request: Request) -> S3BlobStore:
    return request.app.state.blob_store


def get_allow_list(request: Request) -> AbstractSet[str]:
    return request.app.state.allow_list


def get_provisioning_enabled() -> bool:
    return settings.ALLOW_LIST_PROVISIONING


def get_certificate_issuer(
    repository: Annotated[InternRepository, Depends(get_intern_repository)],
    blob_store: Annotated[S3BlobStore, Depends(get_blob_store)],
    allow_list: Annotated[AbstractSet[str], Depends(get_allow_list)],
    provisioning_enabled: Annotated[bool, Depends(get_provisioning_enabled)],
) -> CertificateIssuer:
    return CertificateIssuer(
        repository=repository,
        blob_store=blob_store,
        allow_list=allow_list,
        defaults=ProgramDefaults(
            field=DEFAULT_FIELD,
            start_date=DEFAULT_START_DATE,
            end_date=DEFAULT_END_DATE,
        ),
        provisioning_enabled=provisioning_enabled,
    )


async def get_current_admin(request: Request) -> str:
    """
    Dependency that admits only requests carrying a live admin session cookie.
    """
    token = request.cookies.get(ADMIN_SESSION_COOKIE)
    if not is_valid_session_token(token):
        raise AdminUnauthorized()
    return "admin"
