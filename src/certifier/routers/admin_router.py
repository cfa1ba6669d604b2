from fastapi import APIRouter
from src.certifier.controllers import admin_controller

router = APIRouter()
router.include_router(admin_controller.router)
