"""Tests for address resolvers."""

from gateway.clients import DownstreamError, auth_client


async def test_my_addresses(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value={
        "success": True, "data": {"addresses": [{"_id": "a1", "city": "Chicago", "isDefault": True}]},
    })

    result = await execute("query { myAddresses { id city isDefault } }", auth_context)

    assert result.data["myAddresses"] == [{"id": "a1", "city": "Chicago", "isDefault": True}]


async def test_my_addresses_empty(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value={"success": True, "data": {}})
    result = await execute("query { myAddresses { id } }", auth_context)
    assert result.data["myAddresses"] == []


async def test_add_address(execute, auth_context, mock_call):
    post = mock_call(auth_client, "post", return_value={
        "success": True, "message": "Address added", "data": {"address": {"id": "a2", "city": "Austin"}},
    })

    result = await execute(
        'mutation { addAddress(input: {street: "1 Main", city: "Austin", isDefault: true}) '
        '{ success message address { id city } } }',
        auth_context,
    )

    assert result.data["addAddress"] == {
        "success": True, "message": "Address added", "address": {"id": "a2", "city": "Austin"},
    }
    assert post.await_args.kwargs["json"] == {"street": "1 Main", "city": "Austin", "isDefault": True}


async def test_delete_address_without_entity(execute, auth_context, mock_call):
    mock_call(auth_client, "delete", return_value={"success": True, "message": "Address deleted"})

    result = await execute('mutation { deleteAddress(id: "a1") { success message address { id } } }',
                           auth_context)

    assert result.data["deleteAddress"] == {"success": True, "message": "Address deleted", "address": None}


async def test_set_default_address_not_found(execute, auth_context, mock_call):
    mock_call(auth_client, "patch", side_effect=DownstreamError(
        "auth", "auth service error 404", status_code=404, payload={"message": "Address not found"},
    ))

    result = await execute('mutation { setDefaultAddress(id: "zz") { success } }', auth_context)

    assert result.errors[0].message == "Address not found"
    assert result.errors[0].extensions["code"] == "NOT_FOUND"
