"""Tests for review resolvers."""

from gateway.clients import DownstreamError, auth_client, product_client

CREATE = ('mutation { createReview(productId: "p1", input: {rating: 5, title: "Great"}) '
          '{ success message review { id rating userName } } }')
ME = {"success": True, "data": {"user": {"_id": "u1", "name": "Uma"}}}


async def test_product_reviews(execute, anon_context, mock_call):
    get = mock_call(product_client, "get", return_value={
        "success": True,
        "data": {"reviews": [{"_id": "r1", "rating": 4, "helpful": 2}],
                 "pagination": {"page": 1, "limit": 10, "total": 1, "pages": 1}},
    })

    result = await execute('query { productReviews(productId: "p1") { reviews { id rating helpful } '
                           'pagination { total } } }', anon_context)

    assert result.data["productReviews"] == {
        "reviews": [{"id": "r1", "rating": 4, "helpful": 2}], "pagination": {"total": 1},
    }
    get.assert_awaited_once_with("/api/reviews/p1", params={"page": 1, "limit": 10})


async def test_product_reviews_degrade(execute, anon_context, mock_call):
    mock_call(product_client, "get", side_effect=DownstreamError("product", "product service unavailable"))

    result = await execute('query { productReviews(productId: "p1") { reviews { id } '
                           'pagination { page limit total pages } } }', anon_context)

    assert result.data["productReviews"] == {
        "reviews": [], "pagination": {"page": 1, "limit": 10, "total": 0, "pages": 0},
    }


async def test_create_review(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value=ME)
    post = mock_call(product_client, "post", return_value={
        "success": True, "message": "Review added",
        "data": {"review": {"_id": "r9", "rating": 5, "userName": "Uma"}},
    })

    result = await execute(CREATE, auth_context)

    assert result.data["createReview"] == {
        "success": True, "message": "Review added", "review": {"id": "r9", "rating": 5, "userName": "Uma"},
    }
    assert post.await_args.kwargs["json"] == {"rating": 5, "title": "Great", "userId": "u1", "userName": "Uma"}


async def test_create_review_unknown_user(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value={"success": True, "data": {}})
    post = mock_call(product_client, "post")

    result = await execute(CREATE, auth_context)

    assert result.data["createReview"]["success"] is False
    assert result.data["createReview"]["message"] == "Unable to get user information"
    post.assert_not_called()


async def test_create_review_relays_message(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value=ME)
    mock_call(product_client, "post", side_effect=DownstreamError(
        "product", "product service error 409", status_code=409, payload={"message": "Already reviewed"},
    ))

    result = await execute(CREATE, auth_context)

    assert result.data["createReview"] == {"success": False, "message": "Already reviewed", "review": None}


async def test_mark_review_helpful_always_forwards(execute, anon_context, mock_call):
    post = mock_call(product_client, "post", return_value={"success": True, "data": {"_id": "r1", "helpful": 3}})

    for _ in range(2):
        result = await execute('mutation { markReviewHelpful(reviewId: "r1") { id helpful } }', anon_context)
        assert result.data["markReviewHelpful"] == {"id": "r1", "helpful": 3}

    assert post.await_count == 2


async def test_delete_review(execute, auth_context, mock_call):
    mock_call(auth_client, "get", return_value=ME)
    delete = mock_call(product_client, "delete", return_value={"success": True})

    result = await execute('mutation { deleteReview(reviewId: "r1") }', auth_context)

    assert result.data["deleteReview"] is True
    assert delete.await_args.args == ("/api/reviews/r1",)


async def test_product_reviews_survive_malformed_body(execute, anon_context, mock_call):
    mock_call(product_client, "get", return_value=["not", "an", "envelope"])

    result = await execute('query { productReviews(productId: "p1") { reviews { id } } }', anon_context)

    assert result.errors is None
    assert result.data["productReviews"] == {"reviews": []}
