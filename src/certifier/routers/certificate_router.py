from fastapi import APIRouter
from src.certifier.controllers import certificate_controller

router = APIRouter()
router.include_router(certificate_controller.router)
