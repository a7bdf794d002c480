"""Tests for user resolvers."""

from gateway.clients import DownstreamError, auth_client
from gateway.schema.user import User


def test_user_id_from_either_key():
    assert User.from_payload({"_id": "abc"}).id == "abc"
    assert User.from_payload({"id": "xyz"}).id == "xyz"
    assert User.from_payload({"_id": {"$oid": "0123"}}).id == "0123"


def test_user_created_at_is_iso_or_null():
    assert User.from_payload({"id": "1", "createdAt": "2024-01-01T00:00:00.000Z"}).created_at == "2024-01-01T00:00:00.000Z"
    assert User.from_payload({"id": "1"}).created_at is None


async def test_me_returns_current_user(execute, auth_context, mock_call):
    get = mock_call(auth_client, "get", return_value={
        "success": True, "data": {"user": {"_id": "u1", "email": "a@b.c", "role": "customer"}},
    })

    result = await execute("query { me { id email role } }", auth_context)

    assert result.errors is None
    assert result.data["me"] == {"id": "u1", "email": "a@b.c", "role": "customer"}
    get.assert_awaited_once_with("/api/auth/me", headers={"Authorization": f"Bearer {auth_context.token}"})


async def test_users_forwards_pagination(execute, auth_context, mock_call):
    get = mock_call(auth_client, "get", return_value={
        "success": True,
        "data": {"users": [{"id": "u1"}], "pagination": {"page": 2, "limit": 5, "total": 6, "pages": 2}},
    })

    result = await execute(
        'query { users(page: 2, limit: 5, role: "seller") { users { id } pagination { page total pages } } }',
        auth_context,
    )

    assert result.data["users"] == {"users": [{"id": "u1"}], "pagination": {"page": 2, "total": 6, "pages": 2}}
    assert get.await_args.kwargs["params"] == {"page": 2, "limit": 5, "search": None, "role": "seller"}


async def test_login_returns_tokens(execute, anon_context, mock_call):
    mock_call(auth_client, "post", return_value={
        "success": True,
        "data": {"user": {"_id": "u1", "email": "a@b.c"}, "accessToken": "at", "refreshToken": "rt"},
    })

    result = await execute(
        'mutation { login(input: {email: "a@b.c", password: "pw"}) { user { id } accessToken refreshToken } }',
        anon_context,
    )

    assert result.data["login"] == {"user": {"id": "u1"}, "accessToken": "at", "refreshToken": "rt"}


async def test_login_relays_downstream_message(execute, anon_context, mock_call):
    mock_call(auth_client, "post", side_effect=DownstreamError(
        "auth", "auth service error 401", status_code=401, payload={"success": False, "message": "Invalid credentials"},
    ))

    result = await execute(
        'mutation { login(input: {email: "a@b.c", password: "bad"}) { accessToken } }', anon_context
    )

    assert result.errors[0].message == "Invalid credentials"


async def test_login_unsuccessful_envelope_raises_message(execute, anon_context, mock_call):
    mock_call(auth_client, "post", return_value={"success": False, "message": "Account disabled"})

    result = await execute(
        'mutation { login(input: {email: "a@b.c", password: "pw"}) { accessToken } }', anon_context
    )

    assert result.errors[0].message == "Account disabled"


async def test_get_user_by_id_returns_null_on_failure(execute, anon_context, mock_call):
    mock_call(auth_client, "get", side_effect=DownstreamError("auth", "auth service unavailable"))
    result = await execute('query { getUserById(id: "u1") { accessToken } }', anon_context)
    assert result.errors is None
    assert result.data["getUserById"] is None


async def test_get_user_by_id_unsuccessful(execute, anon_context, mock_call):
    mock_call(auth_client, "get", return_value={"success": False, "message": "nope"})
    result = await execute('query { getUserById(id: "u1") { accessToken } }', anon_context)
    assert result.data["getUserById"] is None


async def test_validate_reset_token(execute, anon_context, mock_call):
    mock_call(auth_client, "get", return_value={
        "success": True, "message": "Token is valid", "data": {"email": "a@b.c"},
    })
    result = await execute('query { validateResetToken(token: "t") { success message email } }', anon_context)
    assert result.data["validateResetToken"] == {"success": True, "message": "Token is valid", "email": "a@b.c"}


async def test_validate_email_token_failure(execute, anon_context, mock_call):
    mock_call(auth_client, "get", side_effect=DownstreamError(
        "auth", "auth service error 400", status_code=400, payload={"message": "Token expired"},
    ))
    result = await execute('query { validateEmailToken(token: "t") { success message email } }', anon_context)
    assert result.data["validateEmailToken"] == {"success": False, "message": "Token expired", "email": None}
