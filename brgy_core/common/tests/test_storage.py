# brgy_core/common/tests/test_storage.py
from urllib.parse import parse_qs, urlparse

import pytest
from django.core import signing
from django.core.files.uploadedfile import SimpleUploadedFile

from brgy_core.common import storage
from brgy_core.common.storage import (
    FOLDER_LEARNING_MATERIALS,
    InvalidDownloadToken,
    build_object_name,
    extract_file_path_from_url,
    file_exists,
    get_download_url,
    resolve_download_token,
    upload_file,
)


def _token(url: str) -> str:
    return parse_qs(urlparse(url).query)["token"][0]


def test_object_name_carries_folder_and_safe_name():
    name = build_object_name(FOLDER_LEARNING_MATERIALS, "../My Worksheet (1).pdf")

    folder, rest = name.split("/", 1)
    assert folder == "learning-materials"
    epoch_ms, rand, base = rest.split("-", 2)
    assert epoch_ms.isdigit() and rand.isdigit()
    assert base == "My_Worksheet_1.pdf"


def test_upload_then_delete():
    path = upload_file(FOLDER_LEARNING_MATERIALS, SimpleUploadedFile("colors.pdf", b"%PDF"))

    assert path.startswith("learning-materials/")
    assert file_exists(path)

    storage.delete_file(path)
    assert not file_exists(path)


def test_signed_url_round_trip():
    url = get_download_url("learning-materials/1-2-a.pdf")

    assert url.startswith("/api/v1/files/download/?token=")
    assert resolve_download_token(_token(url)) == "learning-materials/1-2-a.pdf"


def test_tampered_token_rejected():
    url = get_download_url("learning-materials/1-2-a.pdf")

    with pytest.raises(InvalidDownloadToken):
        resolve_download_token(_token(url) + "x")


def test_expired_token_rejected(monkeypatch):
    url = get_download_url("learning-materials/1-2-a.pdf", expires_in=60)
    token = _token(url)

    real_unsign = signing.TimestampSigner.unsign_object

    def _expired(self, signed_obj, *args, max_age=None, **kwargs):
        if max_age is not None:
            raise signing.SignatureExpired("expired")
        return real_unsign(self, signed_obj, *args, **kwargs)

    monkeypatch.setattr(signing.TimestampSigner, "unsign_object", _expired)

    with pytest.raises(InvalidDownloadToken, match="expired"):
        resolve_download_token(token)


def test_extract_file_path_from_url():
    folder = FOLDER_LEARNING_MATERIALS
    assert extract_file_path_from_url("learning-materials/1-2-a.pdf", folder) == "learning-materials/1-2-a.pdf"
    assert (
        extract_file_path_from_url("https://bucket.example.com/media/learning-materials/1-2-a%20b.pdf", folder)
        == "learning-materials/1-2-a b.pdf"
    )
    assert extract_file_path_from_url("https://bucket.example.com/other/x.pdf", folder) == ""
    assert extract_file_path_from_url("", folder) == ""


@pytest.mark.django_db
def test_download_endpoint(anon_client):
    path = upload_file(FOLDER_LEARNING_MATERIALS, SimpleUploadedFile("song.pdf", b"lyrics"))

    r = anon_client.get(get_download_url(path))
    assert r.status_code == 200
    assert b"".join(r.streaming_content) == b"lyrics"

    r = anon_client.get("/api/v1/files/download/", {"token": "bogus"})
    assert r.status_code == 403

    storage.delete_file(path)
    r = anon_client.get(get_download_url(path))
    assert r.status_code == 404
