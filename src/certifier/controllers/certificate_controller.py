# File: src/certifier/controllers/certificate_controller.py
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.certifier.repositories.intern_repository import InternRepository
from src.certifier.schemas.certificate import (
    CertificateRequest,
    CertificateResponse,
    StudentRead,
    VerifyStudentRequest,
    VerifyStudentResponse,
)
from src.certifier.services.issuance import CertificateIssuer
from src.certifier.utils.dependencies import get_certificate_issuer, get_intern_repository
from src.certifier.utils.exceptions import CertificateError, error_response

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post(
    "/generate-certificate",
    response_model=CertificateResponse,
    response_model_exclude_none=True,
    summary="Issue or re-issue an internship certificate",
)
async def generate_certificate(
    data: CertificateRequest,
    issuer: Annotated[CertificateIssuer, Depends(get_certificate_issuer)],
):
    """
    Verify the requester against the intern records and return signed
    download and preview links. A stored certificate is reused when it is
    still present in storage.
    """
    try:
        result = await issuer.issue(data)
    except CertificateError:
        raise
    except Exception as e:
        logger.error(f"Error generating certificate: {e}", exc_info=True)
        raise CertificateError() from e

    if result.is_existing:
        message = "Certificate already exists. Download link generated."
    else:
        message = "Certificate generated successfully."
    return CertificateResponse(
        message=message,
        download_url=result.download_url,
        preview_url=result.preview_url,
        is_existing=result.is_existing,
        certificate_id=result.certificate_id,
        student_name=result.student_name,
    )


@router.post("/verify-student", response_model=VerifyStudentResponse, summary="Check whether an email is registered")
def verify_student(
    data: VerifyStudentRequest,
    repository: Annotated[InternRepository, Depends(get_intern_repository)],
):
    logger.info(f"Verifying student email: {data.email}")
    intern = repository.find_by_email(data.email)
    if intern is None:
        logger.info(f"Student not found: {data.email}")
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "Email not registered. Please contact support for assistance.",
            verified=False,
        )

    return VerifyStudentResponse(
        verified=True,
        student=StudentRead(
            id=intern.id,
            name=intern.name,
            college=intern.college,
            email=intern.email,
            field=intern.field,
            start_date=intern.start_date,
            end_date=intern.end_date,
            has_existing_certificate=bool(intern.certificate_key),
        ),
    )
