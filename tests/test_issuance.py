import asyncio
import threading
from datetime import date

import pytest

from src.certifier.schemas.certificate import CertificateRequest
from src.certifier.services.issuance import CertificateIssuer, ProgramDefaults
from src.certifier.utils.exceptions import DetailMismatch, NotAuthorized, RenderFailure, StorageUnavailable

DEFAULTS = ProgramDefaults(field="Web Development", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))


def _issuer(repository, blob_store, renderer, allow_list=frozenset(), provisioning_enabled=True):
    return CertificateIssuer(
        repository=repository,
        blob_store=blob_store,
        allow_list=allow_list,
        defaults=DEFAULTS,
        provisioning_enabled=provisioning_enabled,
        renderer=renderer,
    )


def _request(name="Alice Smith", college="X University", email="a@x.edu"):
    return CertificateRequest(name=name, college=college, email=email)


def test_first_request_renders_uploads_and_stores_key(repository, blob_store, renderer, alice):
    result = asyncio.run(_issuer(repository, blob_store, renderer).issue(_request()))

    assert result.is_existing is False
    assert len(renderer.calls) == 1
    assert blob_store.uploads == [result.certificate_id]
    assert repository.find_by_email("a@x.edu").certificate_key == result.certificate_id
    assert "disposition=attachment" in result.download_url
    assert "disposition=inline" in result.preview_url
    assert result.student_name == "Alice Smith"


def test_second_request_reuses_stored_certificate(repository, blob_store, renderer, alice):
    issuer = _issuer(repository, blob_store, renderer)
    first = asyncio.run(issuer.issue(_request()))
    second = asyncio.run(issuer.issue(_request()))

    assert second.is_existing is True
    assert second.certificate_id is None
    assert len(renderer.calls) == 1
    assert len(blob_store.uploads) == 1
    assert first.certificate_id in second.download_url


def test_missing_blob_is_regenerated(repository, blob_store, renderer, alice):
    repository.update_certificate_key("a@x.edu", "certificates/2024-01-01/a_x.edu_deadbeef.pdf")

    result = asyncio.run(_issuer(repository, blob_store, renderer).issue(_request()))

    assert result.is_existing is False
    assert len(renderer.calls) == 1
    assert repository.find_by_email("a@x.edu").certificate_key == result.certificate_id
    assert result.certificate_id != "certificates/2024-01-01/a_x.edu_deadbeef.pdf"


def test_failed_existence_check_falls_through_to_regeneration(repository, blob_store, renderer, alice):
    issuer = _issuer(repository, blob_store, renderer)
    asyncio.run(issuer.issue(_request()))
    blob_store.exists_error = ConnectionError("storage unreachable")

    result = asyncio.run(issuer.issue(_request()))

    assert result.is_existing is False
    assert len(renderer.calls) == 2
    assert len(blob_store.uploads) == 2


def test_name_mismatch_is_rejected_without_side_effects(repository, blob_store, renderer, alice):
    with pytest.raises(DetailMismatch) as exc_info:
        asyncio.run(_issuer(repository, blob_store, renderer).issue(_request(name="Alice Smyth")))

    assert exc_info.value.status_code == 400
    assert renderer.calls == []
    assert blob_store.uploads == []
    assert repository.find_by_email("a@x.edu").certificate_key is None


def test_college_mismatch_is_rejected(repository, blob_store, renderer, alice):
    with pytest.raises(DetailMismatch):
        asyncio.run(_issuer(repository, blob_store, renderer).issue(_request(college="Y University")))


def test_identity_comparison_ignores_case_and_whitespace(repository, blob_store, renderer, alice):
    request = _request(name="  alice SMITH ", college="x university", email="A@X.EDU")

    result = asyncio.run(_issuer(repository, blob_store, renderer).issue(request))

    assert result.is_existing is False
    # Stored fields are rendered, not the request's spelling
    assert renderer.calls[0].student_name == "Alice Smith"
    assert renderer.calls[0].college == "X University"


def test_unknown_email_is_not_authorized(repository, blob_store, renderer):
    with pytest.raises(NotAuthorized) as exc_info:
        asyncio.run(_issuer(repository, blob_store, renderer).issue(_request(email="nobody@x.edu")))

    assert exc_info.value.status_code == 404
    assert repository.find_by_email("nobody@x.edu") is None
    assert renderer.calls == []
    assert blob_store.uploads == []


def test_allow_listed_email_gets_a_record_created(repository, blob_store, renderer):
    issuer = _issuer(repository, blob_store, renderer, allow_list=frozenset({"new@x.edu"}))

    result = asyncio.run(issuer.issue(_request(name=" Bob Jones ", college="Z College", email="New@X.edu")))

    intern = repository.find_by_email("new@x.edu")
    assert intern is not None
    assert intern.name == "Bob Jones"
    assert intern.field == "Web Development"
    assert intern.start_date == date(2024, 1, 1)
    assert intern.end_date == date(2024, 12, 31)
    assert intern.certificate_key == result.certificate_id


def test_allow_list_is_ignored_when_provisioning_disabled(repository, blob_store, renderer):
    issuer = _issuer(
        repository, blob_store, renderer,
        allow_list=frozenset({"new@x.edu"}), provisioning_enabled=False,
    )

    with pytest.raises(NotAuthorized):
        asyncio.run(issuer.issue(_request(email="new@x.edu")))
    assert repository.find_by_email("new@x.edu") is None


def test_renderer_errors_surface_as_render_failure(repository, blob_store, alice):
    def broken_renderer(data):
        raise RuntimeError("font missing")

    with pytest.raises(RenderFailure):
        asyncio.run(_issuer(repository, blob_store, broken_renderer).issue(_request()))
    assert blob_store.uploads == []
    assert repository.find_by_email("a@x.edu").certificate_key is None


def test_upload_failure_leaves_record_untouched(repository, blob_store, renderer, alice):
    async def failing_upload(pdf_bytes, intern_email):
        raise StorageUnavailable("Failed to upload certificate. Please try again later.")

    blob_store.upload_pdf = failing_upload

    with pytest.raises(StorageUnavailable):
        asyncio.run(_issuer(repository, blob_store, renderer).issue(_request()))
    assert repository.find_by_email("a@x.edu").certificate_key is None


class ThreadRecordingRepository:
    """Wraps a repository and notes which thread each call ran on."""

    def __init__(self, repository):
        self.repository = repository
        self.threads = []

    def __getattr__(self, name):
        method = getattr(self.repository, name)

        def call(*args, **kwargs):
            self.threads.append((name, threading.get_ident()))
            return method(*args, **kwargs)
        return call


def test_repository_calls_run_off_the_event_loop(repository, blob_store, renderer):
    recording = ThreadRecordingRepository(repository)
    issuer = _issuer(recording, blob_store, renderer, allow_list=frozenset({"new@x.edu"}))

    asyncio.run(issuer.issue(_request(name="Bob", college="Z College", email="new@x.edu")))

    assert [name for name, _ in recording.threads] == ["find_by_email", "create", "update_certificate_key"]
    assert all(thread != threading.get_ident() for _, thread in recording.threads)
