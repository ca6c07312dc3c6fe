"""
Recipe, preferences and response models for Apicius.

This module defines the canonical schemas exchanged with the recipe backend.
The backend speaks camelCase JSON; models accept those names via aliases and
expose snake_case attributes in Python (populate_by_name=True).

# NOTE: Every backend response shares one envelope: the payload keys plus an
    `error` slot that is either null or {message, code?, status?}. The
    *Response models below describe the payload for each endpoint; the API
    client checks the error slot before it ever validates the payload.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apicius.markdown import recipe_title

Theme = Literal["light", "dark", "system"]

THEME_LIGHT = "light"
THEME_DARK = "dark"
THEME_SYSTEM = "system"

ALLOWED_THEMES = [THEME_LIGHT, THEME_DARK, THEME_SYSTEM]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Recipe(BaseModel):
    """
    A stored recipe.

    The whole recipe lives in `recipe_markdown`; its first line is an H1
    heading holding the display title.
    """
    id: str = Field(..., description="Opaque recipe identifier")
    user_id: Optional[str] = Field(None, alias="userId", description="Owning user identifier")
    recipe_markdown: str = Field("", alias="recipeMarkdown", description="Markdown recipe body")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt", description="Last edit timestamp, if edited")
    is_public: bool = Field(default=False, alias="isPublic", description="Visibility flag")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def was_edited(self) -> bool:
        """True when the recipe has been edited after it was created."""
        return self.updated_at is not None and self.updated_at > self.created_at

    @property
    def effective_changed_at(self) -> datetime:
        """Update timestamp when it is later than creation, else creation timestamp."""
        if self.was_edited:
            return self.updated_at
        return self.created_at

    @property
    def title(self) -> str:
        """Display title taken from the first markdown line."""
        return recipe_title(self.recipe_markdown)


class UserPreferences(BaseModel):
    """
    Per-user preferences. One record per user; the backend upserts on save.

    Unknown theme values coerce to "system" rather than failing validation.
    """
    id: Optional[str] = Field(None, description="Owning user identifier")
    display_name: Optional[str] = Field(None, alias="displayName")
    theme: Theme = Field(default=THEME_SYSTEM)
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("theme", mode="before")
    @classmethod
    def _coerce_theme(cls, value: Any) -> str:
        if value not in ALLOWED_THEMES:
            return THEME_SYSTEM
        return value

    def to_update_payload(self) -> Dict[str, Any]:
        """Wire payload for PATCH /preferences."""
        return {
            "displayName": self.display_name,
            "theme": self.theme,
            "avatarUrl": self.avatar_url,
        }


class ErrorBody(BaseModel):
    """The `error` slot of a response envelope."""
    message: str = "An error occurred"
    code: Optional[str] = None
    status: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class RecipeListResponse(BaseModel):
    """Payload of GET /recipes."""
    recipes: List[Recipe] = Field(default_factory=list)

    @field_validator("recipes", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value if value is not None else []


class RecipeResponse(BaseModel):
    """Payload of GET /recipes/{id}."""
    recipe: Optional[Recipe] = None


class CreatedRecipeResponse(BaseModel):
    """Payload of POST /recipes."""
    created_recipe: Recipe = Field(..., alias="createdRecipe")

    model_config = ConfigDict(populate_by_name=True)


class ImportResponse(BaseModel):
    """Payload of POST /recipes/import-image and /recipes/import-text."""
    recipe_markdown: str = Field(..., alias="recipeMarkdown", min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("recipe_markdown")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("extracted recipe is empty")
        return value


class PreferencesResponse(BaseModel):
    """Payload of GET /preferences."""
    preferences: Optional[UserPreferences] = None


class ImageUpload(BaseModel):
    """An image file picked by the user (import screenshot or avatar)."""
    filename: str
    content_type: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """File extension without the dot, or "" if the name has none."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1]


class UsageSummary(BaseModel):
    """Aggregated AI token usage for one user."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    total_calls: int = 0


class AuthUser(BaseModel):
    """The authenticated identity as seen by the app."""
    id: str
    email: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class AuthSession(BaseModel):
    """An auth provider session: the user plus the bearer token for API calls."""
    user: Optional[AuthUser] = None
    access_token: str = ""
