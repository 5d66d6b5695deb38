"""
Tests for tropicana/services/media_service.py
"""
import pytest
from sqlalchemy.exc import OperationalError

from tropicana.models.cms import Media
from tropicana.services.exceptions import ValidationError
from tropicana.services.media_service import MediaService, storage_name


def test_storage_name_replaces_whitespace():
    name = storage_name("dir/sunset  over\tbeach.png")
    stamp, rest = name.split("-", 1)
    assert stamp.isdigit()
    assert rest == "sunset_over_beach.png"


def test_upload_writes_file_and_record(db_session, tmp_path):
    media = MediaService(db_session, media_root=str(tmp_path)).upload("pool.jpg", b"jpegbytes", "image/jpeg")

    assert (tmp_path / media.filename).read_bytes() == b"jpegbytes"
    assert media.size == 9
    assert media.url.endswith(f"/{media.filename}")


def test_failed_commit_removes_written_file(db_session, tmp_path, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO media", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(OperationalError):
        MediaService(db_session, media_root=str(tmp_path)).upload("pool.jpg", b"jpegbytes")

    assert list(tmp_path.iterdir()) == []
    assert db_session.query(Media).count() == 0


def test_upload_without_name(db_session, tmp_path):
    with pytest.raises(ValidationError):
        MediaService(db_session, media_root=str(tmp_path)).upload("", b"data")
