"""Resume inspection outcomes."""

import io
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from conftest import DOCX, PDF, PDF_BYTES, run
from jobportal.utils.upload import (
    AcceptedResume,
    NoResume,
    RejectedResume,
    UploadConfig,
    generate_resume_filename,
    inspect_resume,
)


def upload(data, filename, content_type):
    return UploadFile(io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


def test_absent_file_is_no_resume():
    assert isinstance(run(inspect_resume(None, UploadConfig())), NoResume)


def test_blank_picker_is_no_resume():
    blank = upload(b"", "", "application/octet-stream")
    assert isinstance(run(inspect_resume(blank, UploadConfig())), NoResume)


@pytest.mark.parametrize("content_type", [PDF, "application/msword", DOCX])
def test_allowed_types_accepted(content_type):
    outcome = run(inspect_resume(upload(PDF_BYTES, "cv", content_type), UploadConfig()))

    assert isinstance(outcome, AcceptedResume)
    assert outcome.data == PDF_BYTES
    assert outcome.content_type == content_type


def test_wrong_type_rejected_not_missing():
    outcome = run(inspect_resume(upload(b"GIF89a", "cv.gif", "image/gif"), UploadConfig()))
    assert outcome == RejectedResume("Only PDF and DOC files are allowed")


def test_size_limit_comes_from_config():
    config = UploadConfig(max_bytes=10)
    outcome = run(inspect_resume(upload(PDF_BYTES, "cv.pdf", PDF), config))
    assert isinstance(outcome, RejectedResume)


def test_restricted_type_set_from_config():
    config = UploadConfig(allowed_types=frozenset({PDF}))
    outcome = run(inspect_resume(upload(PDF_BYTES, "cv.docx", DOCX), config))
    assert isinstance(outcome, RejectedResume)


def test_generated_filenames_are_unique_and_keep_name():
    names = {generate_resume_filename("my/cv.pdf") for _ in range(50)}

    assert len(names) == 50
    for name in names:
        assert re.fullmatch(r"\d+-\d+-my_cv\.pdf", name)
