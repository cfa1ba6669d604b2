import math
import logging
from datetime import datetime, timedelta
from typing import AbstractSet, Optional

from src.certifier.repositories.intern_repository import InternRepository
from src.certifier.schemas.admin import AdminStats, FieldCount, RecentIntern
from src.certifier.utils.time import get_utc_time

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 30
RECENT_INTERNS_LIMIT = 10


def completion_rate(with_certificates: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up, so 2 of 8 reports 25 and 1 of 8 reports 13
    return int(math.floor(100 * with_certificates / total + 0.5))


def compute_admin_stats(
    repository: InternRepository,
    allow_list: AbstractSet[str],
    provisioning_enabled: bool = True,
    now: Optional[datetime] = None,
) -> AdminStats:
    """
    Read-only summary of certificate issuance.

    With allow-list provisioning every allow-listed email counts as eligible;
    otherwise only stored records do.
    """
    now = now or get_utc_time()
    total = len(allow_list) if provisioning_enabled else repository.count_all()
    with_certificates = repository.count_with_certificate()
    recent_certificates = repository.count_recent_certificates(now - timedelta(days=RECENT_WINDOW_DAYS))

    recent_interns = [
        RecentIntern(
            id=intern.id,
            name=intern.name,
            college=intern.college,
            email=intern.email,
            field=intern.field,
            start_date=intern.start_date,
            end_date=intern.end_date,
            certificate_key=intern.certificate_key,
            has_certificate=bool(intern.certificate_key),
        )
        for intern in repository.recent(RECENT_INTERNS_LIMIT)
    ]

    logger.info(f"Stats generated: {with_certificates}/{total} certificates")
    return AdminStats(
        total_interns=total,
        interns_with_certificates=with_certificates,
        interns_without_certificates=total - with_certificates,
        recent_certificates=recent_certificates,
        completion_rate=completion_rate(with_certificates, total),
        field_breakdown=[FieldCount(**row) for row in repository.field_breakdown()],
        recent_interns=recent_interns,
    )
