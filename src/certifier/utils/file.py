# File: src/certifier/utils/file.py
import re
import uuid
import asyncio
import functools
import logging
from datetime import datetime
from io import BytesIO
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from src.certifier.config.settings import SIGNED_URL_EXPIRES_IN
from src.certifier.utils.exceptions import StorageUnavailable
from src.certifier.utils.time import get_utc_time

# Configure logging
logger = logging.getLogger(__name__)

CERTIFICATE_PREFIX = "certificates"
_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def sanitize_email(email: str) -> str:
    return _UNSAFE_KEY_CHARS.sub("_", email)


def build_certificate_key(email: str, now: Optional[datetime] = None, unique_id: Optional[str] = None) -> str:
    """
    Derive a fresh object key: certificates/<YYYY-MM-DD>/<sanitized-email>_<unique>.pdf

    The unique suffix keeps every upload under its own key, so an earlier
    certificate is never overwritten.
    """
    now = now or get_utc_time()
    unique_id = unique_id or uuid.uuid4().hex[:8]
    return f"{CERTIFICATE_PREFIX}/{now.strftime('%Y-%m-%d')}/{sanitize_email(email)}_{unique_id}.pdf"


class S3BlobStore:
    """Certificate PDF storage backed by one S3 bucket."""

    def __init__(self, s3_client, bucket_name: str):
        self.s3_client = s3_client
        self.bucket_name = bucket_name

    def _require_client(self):
        if self.s3_client is None or not self.bucket_name:
            logger.error("S3 client is not initialized. Check your AWS configuration.")
            raise StorageUnavailable(
                "Certificate storage is not configured. Please try again later."
            )
        return self.s3_client

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    async def upload_pdf(self, pdf_bytes: bytes, intern_email: str) -> str:
        """Upload a rendered certificate and return its new key."""
        s3_client = self._require_client()
        key = build_certificate_key(intern_email)
        extra_args = {
            "ContentType": "application/pdf",
            "ServerSideEncryption": "AES256",
            "Metadata": {
                "intern-email": intern_email,
                "upload-date": get_utc_time().isoformat(),
            },
        }

        logger.info(f"Uploading certificate to S3: {key}")
        try:
            await self._run(
                s3_client.upload_fileobj,
                BytesIO(pdf_bytes),
                self.bucket_name,
                key,
                ExtraArgs=extra_args,
            )
        except NoCredentialsError as e:
            logger.error("AWS credentials not found")
            raise StorageUnavailable("Failed to upload certificate. Please try again later.") from e
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed: {str(e)}")
            raise StorageUnavailable("Failed to upload certificate. Please try again later.") from e

        logger.info(f"Certificate uploaded successfully: {key}")
        return key

    async def exists(self, key: str) -> bool:
        s3_client = self._require_client()
        try:
            await self._run(s3_client.head_object, Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            error_code = str(e.response.get("Error", {}).get("Code", ""))
            if error_code in _MISSING_OBJECT_CODES:
                return False
            logger.error(f"Error checking certificate existence: {str(e)}")
            raise

    async def _presign(self, key: str, disposition: str, expires_in: int) -> str:
        s3_client = self._require_client()
        try:
            url = await self._run(
                s3_client.generate_presigned_url,
                "get_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": key,
                    "ResponseContentDisposition": disposition,
                    "ResponseContentType": "application/pdf",
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error generating signed URL: {str(e)}")
            raise StorageUnavailable("Failed to generate download link. Please try again later.") from e
        logger.debug(f"Signed URL generated for {key} (expires in {expires_in}s)")
        return url

    async def generate_signed_url(self, key: str, expires_in: int = SIGNED_URL_EXPIRES_IN) -> str:
        """Download link: forces the browser to save the PDF."""
        return await self._presign(key, "attachment", expires_in)

    async def generate_preview_url(self, key: str, expires_in: int = SIGNED_URL_EXPIRES_IN) -> str:
        """Preview link: lets the browser display the PDF inline."""
        return await self._presign(key, "inline", expires_in)
