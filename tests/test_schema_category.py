"""Tests for category resolvers."""

from gateway.clients import DownstreamError, category_client
from gateway.schema.category import Category


def test_category_timestamps_default_to_now():
    category = Category.from_payload({"_id": "c1", "name": "Books"})
    assert category.id == "c1"
    assert category.created_at.endswith("Z")
    assert category.updated_at.endswith("Z")


def test_category_keeps_given_timestamp():
    category = Category.from_payload({"id": "c1", "name": "Books", "updatedAt": "2025-01-02T00:00:00.000Z"})
    assert category.updated_at == "2025-01-02T00:00:00.000Z"


async def test_categories_with_filter(execute, anon_context, mock_call):
    get = mock_call(category_client, "get", return_value={
        "success": True, "message": "ok", "count": 1, "data": [{"_id": "c1", "name": "Books"}],
    })

    result = await execute('query { categories(filter: {search: "bo", isActive: true}) '
                           '{ success message count data { id name } } }', anon_context)

    assert result.data["categories"] == {
        "success": True, "message": "ok", "count": 1, "data": [{"id": "c1", "name": "Books"}],
    }
    assert get.await_args.kwargs["params"] == {"search": "bo", "isActive": True}


async def test_categories_degrade(execute, anon_context, mock_call):
    mock_call(category_client, "get", side_effect=DownstreamError("category", "category service unavailable"))

    result = await execute("query { categories { success count data { id } } }", anon_context)

    assert result.errors is None
    assert result.data["categories"] == {"success": False, "count": 0, "data": []}


async def test_category_missing_is_null(execute, anon_context, mock_call):
    mock_call(category_client, "get", side_effect=DownstreamError("category", "error 404", status_code=404))
    result = await execute('query { category(id: "zz") { id } }', anon_context)
    assert result.data["category"] is None


async def test_create_category_failure_envelope(execute, auth_context, mock_call):
    mock_call(category_client, "post", side_effect=DownstreamError(
        "category", "category service error 409", status_code=409, payload={"message": "Category exists"},
    ))

    result = await execute('mutation { createCategory(input: {name: "Books"}) { success message data { id } } }',
                           auth_context)

    assert result.data["createCategory"] == {"success": False, "message": "Category exists", "data": None}


async def test_update_category(execute, auth_context, mock_call):
    mock_call(category_client, "put", return_value={
        "success": True, "message": "Updated", "data": {"_id": "c1", "name": "Novels"},
    })

    result = await execute('mutation { updateCategory(id: "c1", input: {name: "Novels"}) '
                           '{ success data { id name } } }', auth_context)

    assert result.data["updateCategory"] == {"success": True, "data": {"id": "c1", "name": "Novels"}}


async def test_public_category_reads_survive_malformed_body(execute, anon_context, mock_call):
    mock_call(category_client, "get", return_value="<html>gateway timeout</html>")

    listing = await execute("query { categories { success count data { id } } }", anon_context)
    single = await execute('query { category(id: "c1") { id } }', anon_context)

    assert listing.errors is None
    assert listing.data["categories"] == {"success": False, "count": 0, "data": []}
    assert single.errors is None
    assert single.data["category"] is None
