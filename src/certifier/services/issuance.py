import asyncio
import functools
import logging
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Callable, Optional

from src.certifier.config.settings import normalize_email
from src.certifier.models.intern import Intern
from src.certifier.repositories.intern_repository import InternRepository
from src.certifier.schemas.certificate import CertificateRequest
from src.certifier.services.certificate_renderer import CertificateData, render_certificate_pdf
from src.certifier.utils.exceptions import CertificateError, DetailMismatch, NotAuthorized, RenderFailure
from src.certifier.utils.file import S3BlobStore

logger = logging.getLogger(__name__)


@dataclass
class ProgramDefaults:
    """Field and dates given to records created from the allow-list."""
    field: str
    start_date: date
    end_date: date


@dataclass
class IssuanceResult:
    download_url: str
    preview_url: str
    is_existing: bool
    student_name: str
    certificate_id: Optional[str] = None


def _same(a: str, b: str) -> bool:
    return a.lower().strip() == b.lower().strip()


class CertificateIssuer:
    """
    Verifies a requester against the record store and hands back a signed
    link to their certificate, rendering and uploading one only when no
    stored PDF is available.

    Requests for the same email are not serialised: two concurrent first-time
    requests both render and upload, and the record keeps whichever key is
    written last.
    """

    def __init__(
        self,
        repository: InternRepository,
        blob_store: S3BlobStore,
        allow_list: AbstractSet[str],
        defaults: ProgramDefaults,
        provisioning_enabled: bool = True,
        renderer: Callable[[CertificateData], bytes] = render_certificate_pdf,
    ):
        self.repository = repository
        self.blob_store = blob_store
        self.allow_list = allow_list
        self.defaults = defaults
        self.provisioning_enabled = provisioning_enabled
        self.renderer = renderer

    async def _run(self, func, *args, **kwargs):
        # repository and renderer calls block
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    def _resolve_intern(self, request: CertificateRequest) -> Intern:
        email = normalize_email(request.email)
        intern = self.repository.find_by_email(email)

        if intern is None:
            if not (self.provisioning_enabled and email in self.allow_list):
                logger.info(f"Email not in verified list: {email}")
                raise NotAuthorized()
            logger.info(f"Email verified in authorized list, creating record: {email}")
            return self.repository.create(
                name=request.name,
                college=request.college,
                email=email,
                field=self.defaults.field,
                start_date=self.defaults.start_date,
                end_date=self.defaults.end_date,
            )

        if not (_same(intern.name, request.name) and _same(intern.college, request.college)):
            logger.info(f"Provided details don't match database records for: {email}")
            raise DetailMismatch()

        logger.info(f"Student details verified: {intern.name} from {intern.college}")
        return intern

    async def _existing_certificate(self, intern: Intern) -> Optional[IssuanceResult]:
        if not intern.certificate_key:
            return None
        key = intern.certificate_key
        try:
            if not await self.blob_store.exists(key):
                logger.warning(f"Certificate key {key} is recorded but missing from storage, regenerating")
                return None
        except Exception as e:
            # Treat an unreachable existence check as a missing blob.
            logger.warning(f"Error checking existing certificate {key}, regenerating: {e}")
            return None

        logger.info(f"Certificate already exists for {intern.email}, generating new links")
        return IssuanceResult(
            download_url=await self.blob_store.generate_signed_url(key),
            preview_url=await self.blob_store.generate_preview_url(key),
            is_existing=True,
            student_name=intern.name,
        )

    async def _render(self, intern: Intern) -> bytes:
        data = CertificateData(
            student_name=intern.name,
            college=intern.college,
            email=intern.email,
            field=intern.field,
            start_date=intern.start_date,
            end_date=intern.end_date,
        )
        try:
            return await self._run(self.renderer, data)
        except CertificateError:
            raise
        except Exception as e:
            logger.error(f"Certificate renderer failed for {intern.email}: {e}", exc_info=True)
            raise RenderFailure() from e

    async def issue(self, request: CertificateRequest) -> IssuanceResult:
        logger.info(f"Processing certificate request for: {request.email}")
        intern = await self._run(self._resolve_intern, request)

        existing = await self._existing_certificate(intern)
        if existing is not None:
            return existing

        logger.info(f"Generating PDF certificate for {intern.name}")
        pdf_bytes = await self._render(intern)

        key = await self.blob_store.upload_pdf(pdf_bytes, intern.email)
        await self._run(self.repository.update_certificate_key, intern.email, key)

        result = IssuanceResult(
            download_url=await self.blob_store.generate_signed_url(key),
            preview_url=await self.blob_store.generate_preview_url(key),
            is_existing=False,
            student_name=intern.name,
            certificate_id=key,
        )
        logger.info(f"Certificate generation completed successfully for {intern.name}")
        return result
