import pytest

from unistay.admin import ImageWorkflow
from unistay.errors import StorageError, ValidationError
from unistay.storage import LocalImage

BASE = "https://demo.supabase.co/storage/v1/object/public"


def test_upload_returns_public_url_inside_folder(image_storage, fake_supabase, photo):
    url = image_storage.upload_image(photo, "news", "n-1")

    assert url.startswith(f"{BASE}/news/n-1/")
    assert url.endswith(".jpg")
    bucket, path = fake_supabase.storage.uploads[0]
    assert bucket == "news"
    assert path.startswith("n-1/")


def test_upload_failure_raises_storage_error(image_storage, fake_supabase, photo):
    fake_supabase.storage.fail_uploads = True

    with pytest.raises(StorageError) as excinfo:
        image_storage.upload_image(photo, "news", "n-1")

    assert excinfo.value.bucket == "news"


def test_path_from_public_url(image_storage):
    url = f"{BASE}/hostels/h-1/1700000000000-abcd.png?"

    assert image_storage.path_from_public_url(url, "hostels") == "h-1/1700000000000-abcd.png"


def test_path_from_foreign_url_is_rejected(image_storage):
    with pytest.raises(StorageError):
        image_storage.path_from_public_url(f"{BASE}/news/n-1/a.png", "hostels")


def test_delete_image_removes_object(image_storage, fake_supabase, photo):
    url = image_storage.upload_image(photo, "events", "e-1")

    image_storage.delete_image(url, "events")

    assert fake_supabase.storage.objects == {}
    assert fake_supabase.storage.removals[0][0] == "events"


def test_local_image_extension_falls_back_to_content_type():
    image = LocalImage(filename="blob", content=b"x", content_type="image/png")

    assert image.extension == "png"


def test_validate_rejects_empty_selection(image_storage):
    with pytest.raises(ValidationError):
        ImageWorkflow(image_storage).validate([])


@pytest.mark.asyncio
async def test_upload_keeps_remote_urls_and_selection_order(image_storage, photo):
    workflow = ImageWorkflow(image_storage)
    existing = f"{BASE}/hostels/h-1/old.jpg"

    result = await workflow.upload([existing, photo], "hostels", "h-1")

    assert len(result.uploaded_urls) == 1
    assert result.image_urls == [existing, result.uploaded_urls[0]]
    # La principal es la primera imagen subida
    assert result.primary_url == result.uploaded_urls[0]


@pytest.mark.asyncio
async def test_upload_without_new_files_keeps_first_remote_as_primary(
    image_storage, fake_supabase
):
    workflow = ImageWorkflow(image_storage)
    existing = f"{BASE}/news/n-1/old.jpg"

    result = await workflow.upload([existing], "news", "n-1")

    assert result.primary_url == existing
    assert fake_supabase.storage.uploads == []


@pytest.mark.asyncio
async def test_upload_without_entity_uses_timestamp_folder(image_storage, photo):
    workflow = ImageWorkflow(image_storage)

    result = await workflow.upload([photo], "jobs")

    folder = result.primary_url.split("/jobs/")[1].split("/")[0]
    assert folder.isdigit()


def test_stale_urls_keeps_order_without_duplicates():
    previous = ["a", "b", "a", "c", ""]
    current = ["c", "d"]

    assert ImageWorkflow.stale_urls(previous, current) == ["a", "b"]


@pytest.mark.asyncio
async def test_cleanup_deletes_each_stale_url_once(image_storage, fake_supabase, photo):
    workflow = ImageWorkflow(image_storage)
    old_a = image_storage.upload_image(photo, "hostels", "h-1")
    old_b = image_storage.upload_image(photo, "hostels", "h-1")
    new = image_storage.upload_image(photo, "hostels", "h-1")

    deleted = await workflow.cleanup([old_a, old_b, old_a], [old_b, new], "hostels")

    assert deleted == [old_a]
    assert len(fake_supabase.storage.removals) == 1


@pytest.mark.asyncio
async def test_cleanup_failure_is_only_a_warning(image_storage, fake_supabase, photo):
    workflow = ImageWorkflow(image_storage)
    old = image_storage.upload_image(photo, "news", "n-1")
    fake_supabase.storage.fail_removals = True

    deleted = await workflow.cleanup([old], [], "news")

    assert deleted == []
    assert len(fake_supabase.storage.removals) == 1
