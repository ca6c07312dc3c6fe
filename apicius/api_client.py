"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the recipe backend go through ApiClient.

Key principles:
- Centralized error handling for network issues
- Every call returns a tagged result (Ok | Err); nothing raises on a failed request
- No automatic retries: a failed call fails immediately and the user retries
- Authorization is the server's job: calls are sent even without a session

# NOTE: When adding new endpoints, follow this pattern:
    - Add a method that takes the parameters the endpoint needs
    - Call self._request(...) with the response payload model
    - Return Ok(<plain value>) on success, pass Err results through untouched
    - Never raise from a client method; callers decide via result.unwrap()
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

import requests
from pydantic import BaseModel, ValidationError

from apicius.config import ApiConfig
from apicius.errors import ErrorKind
from apicius.models import (
    CreatedRecipeResponse,
    ErrorBody,
    ImageUpload,
    ImportResponse,
    PreferencesResponse,
    Recipe,
    RecipeListResponse,
    RecipeResponse,
    UserPreferences,
)
from apicius.results import ApiResult, Err, Ok

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]

NETWORK_ERROR_MESSAGE = "Could not connect to the recipe service. Please check your connection."
TIMEOUT_ERROR_MESSAGE = "The recipe service took too long to respond. Please try again."
MALFORMED_ERROR_MESSAGE = "Received an unexpected response from the recipe service."


def parse_error_body(error: Any) -> ErrorBody:
    """
    Read the `error` slot of an envelope without raising.

    A dict whose fields have the wrong types still yields its message (as text);
    the status and code are dropped and the HTTP status is used instead.
    """
    if isinstance(error, str):
        return ErrorBody(message=error)
    if not isinstance(error, dict):
        return ErrorBody()
    try:
        return ErrorBody.model_validate(error)
    except ValidationError:
        message = error.get("message")
        return ErrorBody(message=str(message)) if message else ErrorBody()


class ApiClient:
    """
    Typed wrapper over the recipe backend's REST surface.

    Args:
        base_url: Backend origin. Defaults to ApiConfig.get_base_url().
        token_provider: Callable returning the current access token (or None
            when signed out). Called once per authenticated request.
        session: requests.Session to send requests with (injected in tests).
        timeout: Per-request timeout in seconds. Defaults to ApiConfig.get_timeout().
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or ApiConfig.get_base_url()).rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else ApiConfig.get_timeout()

    def _auth_headers(self) -> Dict[str, str]:
        """Bearer header for the current session; the token is empty when signed out."""
        token = self.token_provider() or ""
        return {"Authorization": f"Bearer {token}"}

    def _request(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[BaseModel]] = None,
        authenticated: bool = True,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[List[Any]] = None,
    ) -> ApiResult:
        """
        Send one request and normalize the outcome into Ok | Err.

        Args:
            method: HTTP method
            path: Path below the base URL (e.g. "/recipes")
            response_model: Pydantic model for the response payload, or None
                when the caller only needs success/failure
            authenticated: Attach the bearer header
            json: JSON body
            files: Multipart file tuples for requests

        Returns:
            Ok(model instance or None), or Err with a normalized kind/message.
        """
        url = f"{self.base_url}{path}"
        headers = self._auth_headers() if authenticated else {}
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=json,
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning("%s %s timed out", method, path)
            return Err(ErrorKind.NETWORK, TIMEOUT_ERROR_MESSAGE)
        except requests.exceptions.ConnectionError as e:
            logger.warning("%s %s could not connect: %s", method, path, e)
            return Err(ErrorKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return Err(ErrorKind.NETWORK, f"Request to the recipe service failed: {e}")

        status = response.status_code
        body: Any = {}
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if not isinstance(body, dict):
            if not response.ok:
                logger.warning("%s %s returned %s with a non-JSON body", method, path, status)
                return Err(ErrorKind.HTTP, f"Backend returned an error: {status}", status=status)
            logger.warning("%s %s returned an unreadable body", method, path)
            return Err(ErrorKind.MALFORMED, MALFORMED_ERROR_MESSAGE, status=status)

        error = body.get("error")
        if error:
            error_body = parse_error_body(error)
            logger.warning("%s %s reported error: %s", method, path, error_body.message)
            return Err(
                ErrorKind.BACKEND,
                error_body.message,
                status=error_body.status or status,
                code=error_body.code,
            )

        if not response.ok:
            logger.warning("%s %s returned %s", method, path, status)
            return Err(ErrorKind.HTTP, f"Backend returned an error: {status}", status=status)

        if response_model is None:
            return Ok(None)

        try:
            return Ok(response_model.model_validate(body))
        except ValidationError as e:
            logger.warning("%s %s payload did not match %s: %s", method, path, response_model.__name__, e)
            return Err(ErrorKind.MALFORMED, MALFORMED_ERROR_MESSAGE, status=status)

    # Recipes

    def list_recipes(self) -> ApiResult[List[Recipe]]:
        """GET /recipes -> the current user's recipes, in backend order."""
        result = self._request("GET", "/recipes", response_model=RecipeListResponse)
        if not result.is_ok:
            return result
        return Ok(result.value.recipes)

    def get_recipe(self, recipe_id: str) -> ApiResult[Optional[Recipe]]:
        """GET /recipes/{id} -> the recipe, or None when the backend has no such record."""
        result = self._request("GET", f"/recipes/{recipe_id}", response_model=RecipeResponse)
        if not result.is_ok:
            return result
        return Ok(result.value.recipe)

    def create_recipe(self, recipe_markdown: str, is_public: bool = False) -> ApiResult[Recipe]:
        """
        POST /recipes.

        Args:
            recipe_markdown: Markdown recipe body
            is_public: Visibility flag (default: private)

        Returns:
            Ok(created Recipe) or Err.
        """
        payload = {"recipeMarkdown": recipe_markdown, "isPublic": is_public}
        result = self._request("POST", "/recipes", response_model=CreatedRecipeResponse, json=payload)
        if not result.is_ok:
            return result
        return Ok(result.value.created_recipe)

    def update_recipe(self, recipe_id: str, fields: Dict[str, Any]) -> ApiResult[None]:
        """
        PATCH /recipes/{id} with a partial set of wire fields.

        Args:
            recipe_id: Recipe identifier
            fields: camelCase fields to change, e.g. {"recipeMarkdown": ...}
        """
        return self._request("PATCH", f"/recipes/{recipe_id}", json=fields)

    def delete_recipe(self, recipe_id: str) -> ApiResult[None]:
        """DELETE /recipes/{id}."""
        return self._request("DELETE", f"/recipes/{recipe_id}")

    # Import

    def import_from_images(self, files: Sequence[ImageUpload]) -> ApiResult[str]:
        """
        POST /recipes/import-image as multipart, one `files[]` part per image.

        Args:
            files: At least one image

        Returns:
            Ok(extracted recipe markdown) or Err.
        """
        if not files:
            return Err(ErrorKind.VALIDATION, "No files provided")

        parts = [("files[]", (f.filename, f.data, f.content_type)) for f in files]
        result = self._request("POST", "/recipes/import-image", response_model=ImportResponse, files=parts)
        if not result.is_ok:
            return result
        return Ok(result.value.recipe_markdown)

    def import_from_text(self, text: str) -> ApiResult[str]:
        """
        POST /recipes/import-text with JSON {"text": ...}.

        Returns:
            Ok(extracted recipe markdown) or Err.
        """
        result = self._request("POST", "/recipes/import-text", response_model=ImportResponse, json={"text": text})
        if not result.is_ok:
            return result
        return Ok(result.value.recipe_markdown)

    # Preferences

    def get_preferences(self) -> ApiResult[Optional[UserPreferences]]:
        """GET /preferences -> the user's preferences, or None if never saved."""
        result = self._request("GET", "/preferences", response_model=PreferencesResponse)
        if not result.is_ok:
            return result
        return Ok(result.value.preferences)

    def update_preferences(self, fields: Dict[str, Any]) -> ApiResult[None]:
        """PATCH /preferences with camelCase fields; the backend upserts."""
        return self._request("PATCH", "/preferences", json=fields)

    # Beta access

    def request_beta_access(self, email: str) -> ApiResult[None]:
        """POST /beta-users with JSON {"email": ...}. Does not require a session."""
        return self._request("POST", "/beta-users", authenticated=False, json={"email": email})
