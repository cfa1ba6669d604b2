import io
from datetime import date

import pytest
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from src.certifier.config.internship_config import Coordinator, get_internship_config
from src.certifier.services.certificate_renderer import (
    TEXT_MARGIN,
    CertificateData,
    _draw,
    fit_text,
    generate_certificate_id,
    render_certificate_pdf,
    validate_certificate_data,
)
from src.certifier.utils.exceptions import RenderFailure

PAGE_WIDTH, _ = landscape(A4)
TEXT_WIDTH = PAGE_WIDTH - 2 * TEXT_MARGIN
LONG_NAME = ("Maximilian Alexander " * 5)[:100]
LONG_COLLEGE = ("Institute of Advanced Technology and Applied Sciences " * 4)[:200]


class RecordingCanvas(canvas.Canvas):
    """Canvas that remembers every centred string with the font it was drawn in."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.centred = []

    def drawCentredString(self, x, y, text, *args, **kwargs):
        self.centred.append((text, self._fontname, self._fontsize))
        return super().drawCentredString(x, y, text, *args, **kwargs)


def _drawn(data, config=None):
    c = RecordingCanvas(io.BytesIO(), pagesize=landscape(A4))
    _draw(c, data, config or get_internship_config())
    return c.centred


def _data(**overrides):
    fields = dict(
        student_name="Alice Smith",
        college="X University",
        email="a@x.edu",
        field="Web Development",
        start_date=date(2025, 7, 2),
        end_date=date(2025, 7, 16),
    )
    fields.update(overrides)
    return CertificateData(**fields)


def test_renders_a_pdf_document():
    pdf = render_certificate_pdf(_data())
    assert pdf.startswith(b"%PDF")
    assert pdf.rstrip().endswith(b"%%EOF")


def test_config_overrides_reach_the_page():
    config = get_internship_config(
        coordinator=Coordinator(name="Priya Shah", title="Program Lead", organization="Example Labs"),
    )
    texts = [text for text, _, _ in _drawn(_data(), config)]

    assert "Priya Shah" in texts
    assert "Program Lead" in texts
    assert "Example Labs" in texts
    assert "Harshdeepsinh" not in texts


def test_short_text_keeps_its_full_size():
    assert fit_text("Alice Smith", "Helvetica-Bold", 34, 14, TEXT_WIDTH) == (34, ["Alice Smith"])


@pytest.mark.parametrize("name,college", [
    (LONG_NAME, LONG_COLLEGE),
    ("W" * 100, "W" * 200),
])
def test_longest_accepted_input_stays_on_the_page(name, college):
    drawn = _drawn(_data(student_name=name, college=college))

    for text, font_name, size in drawn:
        assert stringWidth(text, font_name, size) <= TEXT_WIDTH, text
    name_lines = "".join(text for text, font_name, _ in drawn if font_name == "Helvetica-Bold" and text in name)
    assert name_lines.replace(" ", "") == name.replace(" ", "")
    assert render_certificate_pdf(_data(student_name=name, college=college)).startswith(b"%PDF")


def test_unbreakable_words_are_split():
    size, lines = fit_text("W" * 200, "Helvetica", 18, 9, TEXT_WIDTH)

    assert size == 9
    assert len(lines) > 1
    assert "".join(lines) == "W" * 200

@pytest.mark.parametrize("overrides,message", [
    ({"student_name": "  "}, "Student name"),
    ({"college": ""}, "College name"),
    ({"field": ""}, "Field"),
    ({"start_date": None}, "Start date"),
    ({"end_date": None}, "End date"),
    ({"start_date": date(2025, 7, 16)}, "before end date"),
])
def test_validation_rejects_incomplete_data(overrides, message):
    with pytest.raises(ValueError, match=message):
        validate_certificate_data(_data(**overrides))


def test_invalid_data_surfaces_as_render_failure():
    with pytest.raises(RenderFailure):
        render_certificate_pdf(_data(student_name=""))


def test_certificate_id_format():
    assert generate_certificate_id().startswith("CERT-")
    assert len(generate_certificate_id().split("-")[-1]) == 9
