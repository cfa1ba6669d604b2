import io
import random
import string
import time
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from src.certifier.config.internship_config import InternshipConfig, get_current_date, get_internship_config
from src.certifier.utils.exceptions import RenderFailure

logger = logging.getLogger(__name__)

PRIMARY_COLOR = HexColor("#9333ea")
ACCENT_COLOR = HexColor("#6366f1")
TEXT_COLOR = HexColor("#1f2937")

CERT_TITLE = "CERTIFICATE OF COMPLETION"
TEXT_MARGIN = 50


@dataclass
class CertificateData:
    student_name: str
    college: str
    email: str
    field: str
    start_date: date
    end_date: date


def validate_certificate_data(data: CertificateData) -> None:
    """Raise ValueError when the data cannot produce a meaningful certificate."""
    if not isinstance(data.student_name, str) or not data.student_name.strip():
        raise ValueError("Student name is required and must be a non-empty string")
    if not isinstance(data.college, str) or not data.college.strip():
        raise ValueError("College name is required and must be a non-empty string")
    if not isinstance(data.field, str) or not data.field.strip():
        raise ValueError("Field is required and must be a non-empty string")
    if not isinstance(data.start_date, date):
        raise ValueError("Start date is required and must be a valid date")
    if not isinstance(data.end_date, date):
        raise ValueError("End date is required and must be a valid date")
    if data.start_date >= data.end_date:
        raise ValueError("Start date must be before end date")


def generate_certificate_id() -> str:
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=9))
    return f"CERT-{int(time.time() * 1000)}-{suffix}"


def fit_text(text: str, font_name: str, max_size: float, min_size: float, max_width: float) -> Tuple[float, List[str]]:
    """
    Shrink text until it fits max_width on one line, stopping at min_size.
    Text still too wide at min_size is wrapped, breaking inside words that
    cannot fit a line on their own. Returns the font size and the lines.
    """
    size = max_size
    while size > min_size and stringWidth(text, font_name, size) > max_width:
        size = max(min_size, size - 1)
    if stringWidth(text, font_name, size) <= max_width:
        return size, [text]

    lines = []
    for line in simpleSplit(text, font_name, size, max_width):
        while stringWidth(line, font_name, size) > max_width:
            cut = len(line) - 1
            while cut > 1 and stringWidth(line[:cut], font_name, size) > max_width:
                cut -= 1
            lines.append(line[:cut])
            line = line[cut:]
        lines.append(line)
    return size, lines


def _draw_fitted(c: canvas.Canvas, text: str, font_name: str, max_size: float, min_size: float, y: float) -> float:
    """Draw centred, fitted text from baseline y; returns the baseline of the last line."""
    w, _ = landscape(A4)
    size, lines = fit_text(text, font_name, max_size, min_size, w - 2 * TEXT_MARGIN)
    c.setFont(font_name, size)
    for i, line in enumerate(lines):
        if i:
            y -= size * 1.2
        c.drawCentredString(w / 2, y, line)
    return y


def _draw(c: canvas.Canvas, data: CertificateData, config: InternshipConfig) -> None:
    w, h = landscape(A4)
    center_x = w / 2

    c.setTitle(f"{CERT_TITLE} - {data.student_name}")
    c.setAuthor(config.company.full_name)

    # Double border
    c.setStrokeColor(PRIMARY_COLOR)
    c.setLineWidth(3)
    c.rect(20, 20, w - 40, h - 40)
    c.setLineWidth(1)
    c.rect(35, 35, w - 70, h - 70)

    c.setFillColor(PRIMARY_COLOR)
    c.setFont("Helvetica-Bold", 40)
    c.drawCentredString(center_x, h - 110, CERT_TITLE)

    c.setFillColor(ACCENT_COLOR)
    c.setFont("Helvetica", 22)
    c.drawCentredString(center_x, h - 145, "Internship Program")

    c.setStrokeColor(PRIMARY_COLOR)
    c.setLineWidth(2)
    c.line(center_x - 150, h - 165, center_x + 150, h - 165)

    c.setFillColor(TEXT_COLOR)
    c.setFont("Helvetica", 18)
    c.drawCentredString(center_x, h - 205, "This is to certify that")

    # Recipient block; long names and colleges push the lines below them down
    c.setFillColor(PRIMARY_COLOR)
    y = _draw_fitted(c, data.student_name, "Helvetica-Bold", 34, 14, h - 250)

    c.setFillColor(TEXT_COLOR)
    y = _draw_fitted(c, f"from {data.college}", "Helvetica", 18, 9, y - 32)
    c.setFont("Helvetica", 18)
    y -= 30
    c.drawCentredString(center_x, y, "has successfully completed the internship program in")

    c.setFillColor(ACCENT_COLOR)
    y = _draw_fitted(c, data.field, "Helvetica-Bold", 24, 12, y - 33)

    c.setFillColor(TEXT_COLOR)
    c.setFont("Helvetica", 15)
    duration = f"Duration: {data.start_date.strftime('%B %d, %Y')} to {data.end_date.strftime('%B %d, %Y')}"
    c.drawCentredString(center_x, y - 30, duration)

    # Footer: issue date left, certificate id right
    c.setFont("Helvetica", 11)
    c.drawString(80, 110, f"Date Issued: {get_current_date()}")
    c.drawRightString(w - 80, 110, f"Certificate ID: {generate_certificate_id()}")

    # Signature block
    signature_y = 150
    c.setStrokeColor(TEXT_COLOR)
    c.setLineWidth(1)
    c.line(center_x - 100, signature_y, center_x + 100, signature_y)
    c.setFont("Helvetica-Bold", 13)
    c.drawCentredString(center_x, signature_y - 16, config.coordinator.name)
    c.setFont("Helvetica", 11)
    c.drawCentredString(center_x, signature_y - 31, config.coordinator.title)
    c.drawCentredString(center_x, signature_y - 45, config.coordinator.organization)

    c.setFont("Helvetica", 8)
    address = config.company.address
    c.drawCentredString(
        center_x, 50,
        f"{config.company.full_name} | {address.line1} {address.line2} | {address.line3}",
    )
    c.drawCentredString(
        center_x, 40,
        f"{config.company.website} | {config.company.email} | {config.company.phone}",
    )


def render_certificate_pdf(data: CertificateData, config: InternshipConfig = None) -> bytes:
    """Render one landscape A4 certificate and return the PDF bytes."""
    config = config or get_internship_config()
    try:
        validate_certificate_data(data)
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(A4))
        _draw(c, data, config)
        c.showPage()
        c.save()
        pdf = buffer.getvalue()
        buffer.close()
    except Exception as e:
        logger.error(f"Error generating PDF certificate: {e}", exc_info=True)
        raise RenderFailure() from e

    if not pdf.startswith(b"%PDF"):
        raise RenderFailure()
    logger.info(f"PDF certificate generated successfully ({len(pdf)} bytes)")
    return pdf
