"""
Tests for the backend API client.

These tests verify that:
- Every request carries the bearer header (empty when signed out)
- Response envelopes normalize into Ok / Err with the right kind
- Backend error messages are passed through verbatim
- Image imports are sent as one multipart request
"""

import json
from unittest.mock import Mock

import pytest
import requests

from apicius.api_client import NETWORK_ERROR_MESSAGE, TIMEOUT_ERROR_MESSAGE, ApiClient
from apicius.errors import ApiError, ErrorKind
from apicius.models import ImageUpload


def make_response(status: int = 200, body=None, raw: bytes = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    return response


RECIPE_JSON = {
    "id": "r1",
    "userId": "user-1",
    "recipeMarkdown": "# Pasta\n\n## Ingredients\n- pasta",
    "createdAt": "2024-05-01T10:00:00Z",
    "updatedAt": None,
    "isPublic": False,
}


@pytest.fixture
def http():
    session = Mock(spec=requests.Session)
    session.request.return_value = make_response(body={"recipes": []})
    return session


@pytest.fixture
def client(http):
    return ApiClient(base_url="https://api.example.com/", token_provider=lambda: "tok-123", session=http, timeout=5)


class TestRequestShape:
    """Test URLs, headers and bodies sent to the backend."""

    def test_bearer_header_and_base_url(self, client, http):
        """Test that requests go to the configured origin with the session token."""
        client.list_recipes()

        args, kwargs = http.request.call_args
        assert args == ("GET", "https://api.example.com/recipes")
        assert kwargs["headers"] == {"Authorization": "Bearer tok-123"}
        assert kwargs["timeout"] == 5

    def test_signed_out_sends_empty_bearer(self, http):
        """Test that a missing session still sends the call with an empty token."""
        client = ApiClient(base_url="https://api.example.com", token_provider=lambda: None, session=http)
        client.list_recipes()

        assert http.request.call_args.kwargs["headers"] == {"Authorization": "Bearer "}

    def test_create_recipe_is_private_by_default(self, client, http):
        """Test the create payload uses wire field names and isPublic false."""
        http.request.return_value = make_response(body={"createdRecipe": RECIPE_JSON})

        result = client.create_recipe("# Pasta")

        assert result.is_ok
        assert result.value.id == "r1"
        assert http.request.call_args.kwargs["json"] == {"recipeMarkdown": "# Pasta", "isPublic": False}

    def test_import_images_sends_one_multipart_request(self, client, http):
        """Test that all images go in a single request as files[] parts."""
        http.request.return_value = make_response(body={"recipeMarkdown": "# Toast"})
        files = [
            ImageUpload(filename="a.png", content_type="image/png", data=b"a"),
            ImageUpload(filename="b.jpg", content_type="image/jpeg", data=b"bb"),
        ]

        result = client.import_from_images(files)

        assert result.is_ok
        assert result.value == "# Toast"
        assert http.request.call_count == 1
        args, kwargs = http.request.call_args
        assert args == ("POST", "https://api.example.com/recipes/import-image")
        assert kwargs["files"] == [
            ("files[]", ("a.png", b"a", "image/png")),
            ("files[]", ("b.jpg", b"bb", "image/jpeg")),
        ]

    def test_import_images_with_no_files_is_rejected_locally(self, client, http):
        """Test that an empty batch never reaches the network."""
        result = client.import_from_images([])

        assert not result.is_ok
        assert result.kind == ErrorKind.VALIDATION
        http.request.assert_not_called()

    def test_import_text_payload(self, client, http):
        http.request.return_value = make_response(body={"recipeMarkdown": "# Soup"})

        result = client.import_from_text("some soup")

        assert result.value == "# Soup"
        assert http.request.call_args.kwargs["json"] == {"text": "some soup"}

    def test_beta_access_is_unauthenticated(self, client, http):
        """Test that beta requests do not carry an Authorization header."""
        client.request_beta_access("new@example.com")

        args, kwargs = http.request.call_args
        assert args == ("POST", "https://api.example.com/beta-users")
        assert kwargs["headers"] == {}
        assert kwargs["json"] == {"email": "new@example.com"}


class TestResponseNormalization:
    """Test that envelopes map onto Ok / Err."""

    def test_list_recipes_parses_records(self, client, http):
        http.request.return_value = make_response(body={"recipes": [RECIPE_JSON]})

        result = client.list_recipes()

        assert result.is_ok
        recipe = result.value[0]
        assert recipe.recipe_markdown.startswith("# Pasta")
        assert recipe.created_at.tzinfo is not None

    def test_get_recipe_missing_is_ok_none(self, client, http):
        """Test that an absent record is success with no value, not an error."""
        http.request.return_value = make_response(body={"recipe": None})

        result = client.get_recipe("gone")

        assert result.is_ok
        assert result.value is None

    def test_backend_error_message_is_verbatim(self, client, http):
        """Test that an envelope error keeps the backend's message, status and code."""
        http.request.return_value = make_response(
            status=400,
            body={"error": {"message": "Recipe text is too long", "status": 400, "code": "TOO_LONG"}},
        )

        result = client.import_from_text("x" * 10)

        assert not result.is_ok
        assert result.kind == ErrorKind.BACKEND
        assert result.message == "Recipe text is too long"
        assert result.status == 400
        assert result.code == "TOO_LONG"

    def test_error_with_numeric_code_is_still_err(self, client, http):
        """Test that a badly typed error object keeps its message and the HTTP status."""
        http.request.return_value = make_response(
            status=500,
            body={"error": {"message": "Internal", "code": 500, "status": 500}},
        )

        result = client.list_recipes()

        assert not result.is_ok
        assert result.kind == ErrorKind.BACKEND
        assert result.message == "Internal"
        assert result.status == 500
        assert result.code is None

    def test_error_with_null_message_uses_default(self, client, http):
        http.request.return_value = make_response(status=400, body={"error": {"message": None}})

        result = client.get_preferences()

        assert result.kind == ErrorKind.BACKEND
        assert result.message == "An error occurred"
        assert result.status == 400

    def test_string_error_on_success_status(self, client, http):
        """Test that an error slot wins even with a 200 status."""
        http.request.return_value = make_response(status=200, body={"recipes": None, "error": "Not allowed"})

        result = client.list_recipes()

        assert result.kind == ErrorKind.BACKEND
        assert result.message == "Not allowed"

    def test_http_error_without_envelope(self, client, http):
        http.request.return_value = make_response(status=502, raw=b"<html>Bad gateway</html>")

        result = client.list_recipes()

        assert result.kind == ErrorKind.HTTP
        assert result.status == 502

    def test_unreadable_success_body_is_malformed(self, client, http):
        http.request.return_value = make_response(status=200, raw=b"not json")

        result = client.list_recipes()

        assert result.kind == ErrorKind.MALFORMED

    def test_payload_not_matching_model_is_malformed(self, client, http):
        """Test that a blank extraction result is not treated as a recipe."""
        http.request.return_value = make_response(body={"recipeMarkdown": "   "})

        result = client.import_from_text("something")

        assert result.kind == ErrorKind.MALFORMED

    def test_connection_error_is_network(self, client, http):
        http.request.side_effect = requests.exceptions.ConnectionError("refused")

        result = client.list_recipes()

        assert result.kind == ErrorKind.NETWORK
        assert result.message == NETWORK_ERROR_MESSAGE

    def test_timeout_is_network(self, client, http):
        http.request.side_effect = requests.exceptions.Timeout()

        result = client.get_preferences()

        assert result.kind == ErrorKind.NETWORK
        assert result.message == TIMEOUT_ERROR_MESSAGE

    def test_unwrap_raises_api_error(self, client, http):
        """Test that callers wanting exceptions get an ApiError with the same details."""
        http.request.return_value = make_response(status=404, body={"error": {"message": "Recipe not found"}})

        result = client.delete_recipe("missing")

        with pytest.raises(ApiError) as exc_info:
            result.unwrap()
        assert exc_info.value.message == "Recipe not found"
        assert exc_info.value.status == 404
        assert exc_info.value.kind == ErrorKind.BACKEND

    def test_update_without_body_is_ok(self, client, http):
        """Test that an empty 204 response is success."""
        http.request.return_value = make_response(status=204, raw=b"")

        result = client.update_recipe("r1", {"recipeMarkdown": "# New"})

        assert result.is_ok
        assert http.request.call_args.args == ("PATCH", "https://api.example.com/recipes/r1")
