from urllib.parse import parse_qs, urlsplit

import pytest

from errors import AuthRequired
from services.sessions import create_session
from utils.auth_gate import optional_auth, optional_identity, require_auth, require_identity


def _token_for(app, user_id):
    with app.app_context():
        return create_session(user_id)


def _request_with_cookie(app, token=None):
    headers = {"Cookie": f"session_token={token}"} if token else {}
    return app.test_request_context("/", headers=headers)


def test_valid_cookie_resolves_identity(app, alice):
    token = _token_for(app, alice)

    with _request_with_cookie(app, token):
        assert optional_identity().id == alice
        assert require_identity().username == "alice"


def test_missing_cookie_is_anonymous(app):
    with _request_with_cookie(app):
        assert optional_identity() is None
        with pytest.raises(AuthRequired):
            require_identity()


def test_unknown_token_is_anonymous(app, alice):
    with _request_with_cookie(app, "forged-token"):
        assert optional_identity() is None


def test_decorators_pass_identity_explicitly(app, alice):
    @optional_auth
    def maybe_view(user):
        return user

    @require_auth
    def strict_view(item_id, user):
        return item_id, user.id

    token = _token_for(app, alice)
    with _request_with_cookie(app, token):
        assert maybe_view().id == alice
        assert strict_view(7) == (7, alice)

    with _request_with_cookie(app):
        assert maybe_view() is None
        with pytest.raises(AuthRequired):
            strict_view(7)


def test_protected_page_redirects_to_login(client):
    response = client.get("/post/create")

    assert response.status_code == 303
    location = urlsplit(response.headers["Location"])
    assert location.path == "/login"
    assert parse_qs(location.query)["next"] == ["/post/create"]


def test_protected_action_redirects_without_next(client):
    response = client.post("/post/1/like")

    assert response.status_code == 303
    assert response.headers["Location"] == "/login"


def test_malformed_id_is_reported_before_authentication(client):
    assert client.post("/post/abc/like").status_code == 400
    assert client.post("/comment/0/dislike").status_code == 400


def test_authentication_is_checked_before_existence(client):
    response = client.post("/post/999/like")
    assert response.status_code == 303


def test_stale_cookie_after_relogin(app, client, alice, login):
    other_client = app.test_client()
    login(client, "alice")
    login(other_client, "alice")

    assert client.get("/post/create").status_code == 303
    assert other_client.get("/post/create").status_code == 200
