import pytest

from inkwell.core.results import Err, Invalid, NotPermitted, Ok
from inkwell.services.post_service import PostService, validate_post


@pytest.fixture()
def service(post_repo, ticking_clock):
    return PostService(post_repo, clock=ticking_clock)


@pytest.fixture()
def alice(make_user):
    return make_user("alice_01")


@pytest.fixture()
def bob(make_user):
    return make_user("bob_02")


def test_validate_post_accepts_bounds():
    errors, title, body = validate_post("t" * 200, "b" * 10000)
    assert errors == []
    assert len(title) == 200 and len(body) == 10000


def test_validate_post_collects_errors():
    errors, _, _ = validate_post("", "b" * 10001)
    assert "Invalid title" in errors
    assert "Content must be less than 10,000 characters" in errors
    assert "Invalid title or content" in errors


def test_validate_post_rejects_markup_only_title():
    errors, _, _ = validate_post("<b></b>", "body")
    assert errors == ["Invalid title or content"]


def test_create_strips_markup_and_trims(service, alice):
    result = service.create_post(alice.id, "  <i>Hello</i> ", " Some **markdown** <script>x</script>")
    assert isinstance(result, Ok)
    post = service.get_post(result.value.id)
    assert post.title == "Hello"
    assert "<" not in post.body
    assert post.body.startswith("Some **markdown**")
    assert post.owner_id == alice.id
    assert post.owner_username == "alice_01"
    assert post.created_at.endswith("Z")


def test_create_rejects_long_title_without_storing(service, post_repo, alice):
    result = service.create_post(alice.id, "x" * 201, "body")
    assert isinstance(result, Err)
    assert isinstance(result.error, Invalid)
    assert "Title must be less than 200 characters" in result.error.violations
    assert post_repo.count() == 0


def test_create_for_unknown_owner_is_not_permitted(service, post_repo):
    result = service.create_post(999, "title", "body")
    assert isinstance(result, Err) and isinstance(result.error, NotPermitted)
    assert post_repo.count() == 0


def test_list_owned_posts_newest_first_and_only_own(service, alice, bob):
    first = service.create_post(alice.id, "first", "a").value
    service.create_post(bob.id, "bob's", "b")
    second = service.create_post(alice.id, "second", "c").value

    posts = service.list_owned_posts(alice.id)
    assert [p.id for p in posts] == [second.id, first.id]


def test_get_post_is_open_to_anyone(service, alice):
    post = service.create_post(alice.id, "t", "b").value
    assert service.get_post(post.id).id == post.id
    assert service.get_post(-1) is None
    assert service.get_post(None) is None


def test_owner_can_update_title_and_body_only(service, alice):
    post = service.create_post(alice.id, "old", "old body").value
    result = service.update_post(post.id, alice.id, "new", "<p>new body</p>")
    assert isinstance(result, Ok)
    stored = service.get_post(post.id)
    assert (stored.title, stored.body) == ("new", "new body")
    assert stored.created_at == post.created_at
    assert stored.owner_id == alice.id


def test_update_validation_errors_leave_post_unchanged(service, alice):
    post = service.create_post(alice.id, "old", "old body").value
    result = service.update_post(post.id, alice.id, "", "b")
    assert isinstance(result.error, Invalid)
    assert service.get_post(post.id).title == "old"


def test_non_owner_update_matches_missing_post(service, alice, bob):
    post = service.create_post(alice.id, "mine", "body").value

    foreign = service.update_post(post.id, bob.id, "hijack", "hijack")
    missing = service.update_post(-1, bob.id, "hijack", "hijack")

    assert foreign == missing == Err(NotPermitted())
    stored = service.get_post(post.id)
    assert (stored.title, stored.body) == ("mine", "body")


def test_non_owner_delete_matches_missing_post(service, post_repo, alice, bob):
    post = service.create_post(alice.id, "mine", "body").value

    assert service.delete_post(post.id, bob.id) == service.delete_post(-1, bob.id) == Err(NotPermitted())
    assert post_repo.count() == 1

    assert service.delete_post(post.id, alice.id) == Ok(None)
    assert post_repo.count() == 0
    assert service.get_post(post.id) is None
