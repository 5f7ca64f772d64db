import pytest

from unistay.errors import StoreError, ValidationError
from unistay.models import Confession, Hostel, NewsItem, RoommateProfile


def _hostel(**overrides):
    data = dict(
        name="Olympia Hostel",
        location="Kikoni",
        price_range="UGX 1.2M - 1.8M",
        image_url="https://cdn/olympia.jpg",
        image_urls=["https://cdn/olympia.jpg"],
        rating=4.5,
        university_id="123e4567-e89b-12d3-a456-426614174001",
        description="Close to campus",
        amenities=[{"name": "WiFi", "icon": "fas fa-wifi"}],
        is_recommended=True,
    )
    data.update(overrides)
    return Hostel(**data)


def test_add_assigns_id_and_get_all_returns_equal_record(repositories):
    repo = repositories["hostels"]
    hostel = _hostel()

    created = repo.add(hostel)

    assert created.id
    stored = repo.get_all()
    assert len(stored) == 1
    assert stored[0].model_dump(exclude={"id"}) == hostel.model_dump(exclude={"id"})
    assert stored[0].id == created.id


def test_records_are_stored_with_camel_case_columns(repositories, fake_supabase):
    repositories["hostels"].add(_hostel())

    row = fake_supabase.tables["hostels"][0]
    assert row["priceRange"] == "UGX 1.2M - 1.8M"
    assert row["isRecommended"] is True
    assert row["imageUrls"] == ["https://cdn/olympia.jpg"]
    assert "price_range" not in row


def test_get_counts_uses_head_query(repositories, fake_supabase):
    repo = repositories["news"]
    repo.add(NewsItem(title="One"))
    repo.add(NewsItem(title="Two"))

    assert repo.get_counts() == 2


def test_update_merges_fields(repositories):
    repo = repositories["hostels"]
    created = repo.add(_hostel())

    repo.update(created.id, {"priceRange": "UGX 2M", "is_recommended": False})

    stored = repo.get_by_id(created.id)
    assert stored.price_range == "UGX 2M"
    assert stored.is_recommended is False
    assert stored.name == "Olympia Hostel"


def test_update_missing_id_is_silent(repositories):
    repositories["news"].update("missing-id", {"title": "Nope"})

    assert repositories["news"].get_all() == []


def test_update_rejects_unknown_fields(repositories):
    with pytest.raises(ValidationError):
        repositories["news"].update("any", {"headline": "wrong field"})


def test_remove_deletes_and_is_idempotent(repositories):
    repo = repositories["hostels"]
    created = repo.add(_hostel())

    repo.remove(created.id)
    repo.remove(created.id)

    assert all(h.id != created.id for h in repo.get_all())


def test_set_inserts_when_absent_like_add(repositories):
    repo = repositories["profiles"]
    profile = RoommateProfile(id="profile-1", name="Sarah", email="sarah@unistay.com")

    repo.set(profile)

    stored = repo.get_all()
    assert len(stored) == 1
    assert stored[0] == profile


def test_set_twice_keeps_a_single_record(repositories):
    repo = repositories["profiles"]
    profile = RoommateProfile(id="profile-1", name="Sarah", budget=400000)

    repo.set(profile)
    repo.set(profile)

    assert len(repo.get_all()) == 1


def test_set_replaces_existing_record(repositories):
    repo = repositories["profiles"]
    repo.set(RoommateProfile(id="profile-1", name="Sarah", bio="Early riser"))
    repo.set(RoommateProfile(id="profile-1", name="Sarah", bio="Night owl now"))

    assert repo.get_by_id("profile-1").bio == "Night owl now"


def test_set_without_id_is_rejected(repositories, fake_supabase):
    with pytest.raises(ValidationError):
        repositories["profiles"].set(RoommateProfile(name="Nobody"))
    assert fake_supabase.calls == []


def test_remote_failure_raises_store_error(repositories, fake_supabase):
    fake_supabase.failures.add(("news", "insert"))

    with pytest.raises(StoreError) as excinfo:
        repositories["news"].add(NewsItem(title="Broken", source="Campus Office"))

    assert excinfo.value.table == "news"
    assert excinfo.value.operation == "insert"
    assert "title" in excinfo.value.fields


def test_duplicate_id_on_add_raises_store_error(repositories):
    repo = repositories["news"]
    repo.add(NewsItem(id="n-1", title="First"))

    with pytest.raises(StoreError):
        repo.add(NewsItem(id="n-1", title="Again"))


def test_get_all_failure_raises_store_error(repositories, fake_supabase):
    fake_supabase.failures.add(("jobs", "select"))

    with pytest.raises(StoreError):
        repositories["jobs"].get_all()


def test_hostels_by_university(repositories):
    repo = repositories["hostels"]
    repo.add(_hostel(name="Near Makerere"))
    repo.add(_hostel(name="Near Kyambogo", university_id="123e4567-e89b-12d3-a456-426614174002"))

    found = repo.get_by_university("123e4567-e89b-12d3-a456-426614174002")

    assert [h.name for h in found] == ["Near Kyambogo"]


def test_confession_like_increments(repositories):
    repo = repositories["confessions"]
    created = repo.add(Confession(content="I still don't know where the library is"))

    assert repo.like(created.id) == 1
    assert repo.like(created.id) == 2
    assert repo.like("missing") == 0
