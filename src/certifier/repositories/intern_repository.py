# File: src/certifier/repositories/intern_repository.py
import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.certifier.config.settings import normalize_email
from src.certifier.models.intern import Intern
from src.certifier.utils.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE = "Database connection failed. Please try again later."


class InternRepository:
    """Keyed access to intern records by email, plus the aggregate reads used by the admin stats."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Error {action}: {e}", exc_info=True)
            self.session.rollback()
            raise StorageUnavailable(DATABASE_UNAVAILABLE) from e

    def find_by_email(self, email: str) -> Optional[Intern]:
        with self._guard("finding intern by email"):
            return self.session.exec(
                select(Intern).where(Intern.email == normalize_email(email))
            ).first()

    def create(
        self,
        name: str,
        college: str,
        email: str,
        field: str,
        start_date: date,
        end_date: date,
    ) -> Intern:
        intern = Intern(
            name=name.strip(),
            college=college.strip(),
            email=normalize_email(email),
            field=field,
            start_date=start_date,
            end_date=end_date,
        )
        with self._guard("creating intern record"):
            self.session.add(intern)
            self.session.commit()
            self.session.refresh(intern)
        logger.info(f"Intern record created successfully: {intern.name}")
        return intern

    def update_certificate_key(self, email: str, certificate_key: str) -> Intern:
        # Unconditional write: concurrent issuances for one email leave the last key written.
        with self._guard("updating intern certificate key"):
            intern = self.session.exec(
                select(Intern).where(Intern.email == normalize_email(email))
            ).one()
            intern.certificate_key = certificate_key
            self.session.add(intern)
            self.session.commit()
            self.session.refresh(intern)
        return intern

    def count_all(self) -> int:
        with self._guard("counting interns"):
            return self.session.exec(select(func.count()).select_from(Intern)).one()

    def count_with_certificate(self) -> int:
        with self._guard("counting certificates"):
            return self.session.exec(
                select(func.count()).select_from(Intern).where(Intern.certificate_key.is_not(None))
            ).one()

    def count_recent_certificates(self, since: datetime) -> int:
        with self._guard("counting recent certificates"):
            return self.session.exec(
                select(func.count()).select_from(Intern).where(
                    Intern.certificate_key.is_not(None),
                    Intern.end_date >= since.date(),
                )
            ).one()

    def field_breakdown(self) -> List[Dict[str, object]]:
        with self._guard("grouping certificates by field"):
            rows = self.session.exec(
                select(Intern.field, func.count(Intern.id))
                .where(Intern.certificate_key.is_not(None))
                .group_by(Intern.field)
                .order_by(Intern.field)
            ).all()
        return [{"field": field, "count": count} for field, count in rows]

    def recent(self, limit: int = 10) -> List[Intern]:
        with self._guard("listing recent interns"):
            return list(self.session.exec(
                select(Intern).order_by(Intern.id.desc()).limit(limit)
            ).all())
