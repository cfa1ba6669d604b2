# Standard Library Imports
import logging
from typing import AbstractSet, Annotated

# Third-party Imports
from fastapi import APIRouter, Depends, Response

# Application-specific Imports
from src.certifier.repositories.intern_repository import InternRepository
from src.certifier.schemas.admin import AdminLogin, AdminLoginResponse, AdminStatsResponse
from src.certifier.services.stats import compute_admin_stats
from src.certifier.utils.dependencies import (
    get_allow_list,
    get_current_admin,
    get_intern_repository,
    get_provisioning_enabled,
)
from src.certifier.utils.exceptions import AdminUnauthorized
from src.certifier.utils.security import (
    clear_admin_session_cookie,
    create_session_token,
    set_admin_session_cookie,
    verify_admin_credentials,
)

router = APIRouter()

logger = logging.getLogger(__name__)


# ─── Session ───────────────────────────────────────────────────

@router.post("/login", response_model=AdminLoginResponse)
def admin_login(data: AdminLogin, response: Response):
    logger.info(f"Admin login attempt for username: {data.username}")
    if not verify_admin_credentials(data.username, data.password):
        logger.info("Invalid admin credentials")
        raise AdminUnauthorized("Invalid username or password")

    set_admin_session_cookie(response, create_session_token())
    logger.info("Admin login successful")
    return AdminLoginResponse()


@router.post("/logout")
def admin_logout(response: Response):
    clear_admin_session_cookie(response)
    logger.info("Admin logout successful")
    return {"success": True, "message": "Logout successful"}


# ─── Statistics ────────────────────────────────────────────────

@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(
    admin: Annotated[str, Depends(get_current_admin)],
    repository: Annotated[InternRepository, Depends(get_intern_repository)],
    allow_list: Annotated[AbstractSet[str], Depends(get_allow_list)],
    provisioning_enabled: Annotated[bool, Depends(get_provisioning_enabled)],
):
    logger.info("Admin authenticated, fetching statistics")
    stats = compute_admin_stats(repository, allow_list, provisioning_enabled)
    return AdminStatsResponse(data=stats)
