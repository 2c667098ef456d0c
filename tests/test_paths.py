import pytest
from werkzeug.exceptions import NotFound

from errors import MalformedIdentifier
from utils.paths import ResourcePath, parse_resource_path


def test_bare_identifier():
    assert parse_resource_path("post", "5") == ResourcePath("post", 5, None)


@pytest.mark.parametrize("action", ["like", "dislike"])
def test_identifier_with_action(action):
    assert parse_resource_path("post", f"12/{action}") == ResourcePath("post", 12, action)


@pytest.mark.parametrize(
    ("tail", "message"),
    [
        ("", "Post ID is required."),
        ("/like", "Post ID is required."),
        ("abc", "Invalid post ID format. Must be a number."),
        ("1.5", "Invalid post ID format. Must be a number."),
        ("abc/share", "Invalid post ID format. Must be a number."),
        ("0", "Post ID must be a positive number."),
        ("-4", "Post ID must be a positive number."),
        ("99999999999999999999", "Invalid post ID format. Must be a number."),
        ("99999999999999999999/like", "Invalid post ID format. Must be a number."),
        ("-99999999999999999999", "Invalid post ID format. Must be a number."),
        ("5/", "Invalid URL format: empty path segment."),
        ("5//like", "Invalid URL format: empty path segment."),
    ],
)
def test_malformed_paths(tail, message):
    with pytest.raises(MalformedIdentifier) as excinfo:
        parse_resource_path("post", tail)
    assert excinfo.value.message == message
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize("tail", ["5/share", "5/like/extra", "5/LIKE"])
def test_unknown_action_or_extra_segments(tail):
    with pytest.raises(NotFound):
        parse_resource_path("post", tail)


def test_custom_identifier_label():
    with pytest.raises(MalformedIdentifier) as excinfo:
        parse_resource_path("comment", "x", id_label="post")
    assert excinfo.value.message == "Invalid post ID format. Must be a number."


def test_largest_storable_identifier():
    assert parse_resource_path("post", str(2**63 - 1)).target_id == 2**63 - 1
    with pytest.raises(MalformedIdentifier):
        parse_resource_path("post", str(2**63))
