# src/certifier/schemas/__init__.py

from .certificate import (
    CertificateRequest,
    CertificateResponse,
    StudentRead,
    VerifyStudentRequest,
    VerifyStudentResponse,
)
from .admin import AdminLogin, AdminLoginResponse, AdminStats, AdminStatsResponse, FieldCount, RecentIntern
