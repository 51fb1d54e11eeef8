from pathlib import Path

import pytest

from storefront.core.config import Settings
from storefront.core.errors import BadRequestError, ConfigurationError
from storefront.services.storage import (
    MAX_UPLOAD_BYTES,
    LocalStorage,
    S3Storage,
    create_storage,
    request_upload_grant,
    save_upload,
)

BUCKET = "storefront-test-bucket"


@pytest.fixture
def local(tmp_path):
    return LocalStorage(str(tmp_path / "uploads" / "nested"))


@pytest.fixture
def s3(aws):
    aws.s3.create_bucket(Bucket=BUCKET)
    return S3Storage(aws, BUCKET, "us-east-1")


def test_local_store_generates_fresh_name_and_keeps_extension(local):
    url = local.store(b"\x89PNG", "photo.PNG", "image/png")
    file_name = url.rsplit("/", 1)[1]

    assert url.startswith("/uploads/")
    assert file_name != "photo.PNG"
    assert file_name.endswith(".PNG")
    assert (local.upload_dir / file_name).read_bytes() == b"\x89PNG"


def test_local_store_creates_directory_on_demand(local):
    assert not local.upload_dir.exists()
    local.store(b"x", "a.jpg", "image/jpeg")
    assert local.upload_dir.is_dir()


def test_local_store_ignores_path_in_original_name(local):
    url = local.store(b"x", "../../etc/passwd.png", "image/png")
    stored = list(local.upload_dir.iterdir())
    assert len(stored) == 1
    assert stored[0].name == url.rsplit("/", 1)[1]
    assert ".." not in url


def test_local_names_never_collide(local):
    urls = {local.store(b"x", "same.jpg", "image/jpeg") for _ in range(5)}
    assert len(urls) == 5


def test_local_upload_grant_is_a_configuration_error(local):
    with pytest.raises(ConfigurationError):
        local.create_upload_grant("photo.png", "image/png")


def test_s3_store_returns_bucket_url(s3, aws):
    url = s3.store(b"jpeg-bytes", "cat.jpg", "image/jpeg")

    prefix = f"https://{BUCKET}.s3.us-east-1.amazonaws.com/uploads/"
    assert url.startswith(prefix)
    key = url[len(f"https://{BUCKET}.s3.us-east-1.amazonaws.com/"):]
    assert key.endswith(".jpg") and key != "uploads/cat.jpg"

    obj = aws.s3.get_object(Bucket=BUCKET, Key=key)
    assert obj["Body"].read() == b"jpeg-bytes"
    assert obj["ContentType"] == "image/jpeg"


def test_s3_upload_grant(s3):
    grant = s3.create_upload_grant("banner.webp", "image/webp")
    key = grant["file_url"].split(".amazonaws.com/", 1)[1]

    assert grant["file_url"].startswith(f"https://{BUCKET}.s3.us-east-1.amazonaws.com/uploads/")
    assert key.endswith(".webp")
    assert key in grant["upload_url"]
    assert grant["upload_url"].startswith("https://")


def test_s3_requires_bucket(aws):
    with pytest.raises(ConfigurationError):
        S3Storage(aws, "", "us-east-1")


def test_save_upload_rejects_non_images(ctx):
    with pytest.raises(BadRequestError):
        save_upload(ctx, b"%PDF", "doc.pdf", "application/pdf")


def test_save_upload_rejects_large_files(ctx):
    with pytest.raises(BadRequestError):
        save_upload(ctx, b"x" * (MAX_UPLOAD_BYTES + 1), "big.png", "image/png")


def test_save_upload_stores_through_context(ctx):
    url = save_upload(ctx, b"gif", "anim.gif", "image/gif")
    assert (Path(ctx.settings.UPLOAD_DIR) / url.rsplit("/", 1)[1]).exists()


def test_request_upload_grant_requires_name_and_type(ctx):
    with pytest.raises(BadRequestError):
        request_upload_grant(ctx, "", "image/png")
    with pytest.raises(ConfigurationError):
        request_upload_grant(ctx, "a.png", "image/png")


def test_create_storage_rejects_unknown_backend():
    with pytest.raises(ConfigurationError):
        create_storage(Settings(STORAGE_TYPE="gcs"), clients=None)
