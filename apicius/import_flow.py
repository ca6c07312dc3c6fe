"""
Recipe import flow.

ImportFlowController drives the import screen:

    IDLE -> METHOD_CHOSEN(file|text) -> SUBMITTING -> PREVIEW_READY(markdown)
         -> EDITING(draft) -> PREVIEW_READY -> SAVING -> IDLE

Failures never lose user input. A failed extraction goes back to
METHOD_CHOSEN with the picked files/text intact, and a failed save stays in
PREVIEW_READY with the markdown intact. Both set `error` for the UI to show.

The extraction call can be slow. If the owning view goes away (detach()) or
the flow is reset while a call is outstanding, the late result is dropped
instead of overwriting whatever the user is doing now.
"""

import logging
from typing import Callable, Iterable, List, Optional

from apicius.api_client import ApiClient
from apicius.drafts import MarkdownDraft
from apicius.errors import ApiciusError, ImportInputError
from apicius.models import ImageUpload, Recipe
from apicius.persistence import RecipePersistence

logger = logging.getLogger(__name__)

METHOD_FILE = "file"
METHOD_TEXT = "text"
ALLOWED_METHODS = [METHOD_FILE, METHOD_TEXT]

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/gif"]
MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB


class ImportState:
    """String constants for ImportFlowController.state."""
    IDLE = "idle"
    METHOD_CHOSEN = "method_chosen"
    SUBMITTING = "submitting"
    PREVIEW_READY = "preview_ready"
    EDITING = "editing"
    SAVING = "saving"


def validate_images(files: Iterable[ImageUpload]) -> None:
    """
    Check a batch of picked images.

    The whole batch is rejected if any one file is unsupported.

    Raises:
        ImportInputError: If any file's type is not JPEG/PNG/GIF, or any file
            is larger than 10MB.
    """
    files = list(files)
    if any(f.content_type.lower() not in ALLOWED_IMAGE_TYPES for f in files):
        raise ImportInputError("Please upload only supported image files (PNG, JPG, GIF)")
    if any(f.size > MAX_IMAGE_BYTES for f in files):
        raise ImportInputError("All files must be less than 10MB")


class ImportFlowController:
    """
    State for one import screen.

    Args:
        api: Backend API client (extraction endpoints)
        persistence: Adapter used for the final save
        user_id_provider: Returns the signed-in user's id, or None

    Attributes:
        state: One of the ImportState constants
        method: METHOD_FILE, METHOD_TEXT, or None
        images: Working set of accepted images (grows until submit)
        text: Pasted recipe text
        preview: Extracted markdown and its edit buffer
        error: Message to show inline, or None
        selected_image: Index of the highlighted thumbnail
    """

    def __init__(
        self,
        api: ApiClient,
        persistence: RecipePersistence,
        user_id_provider: Callable[[], Optional[str]],
    ):
        self.api = api
        self.persistence = persistence
        self.user_id_provider = user_id_provider

        self.state = ImportState.IDLE
        self.method: Optional[str] = None
        self.images: List[ImageUpload] = []
        self.text = ""
        self.preview = MarkdownDraft()
        self.error: Optional[str] = None
        self.selected_image = 0

        self._generation = 0
        self._attached = True

    # View lifecycle

    def attach(self) -> None:
        """
        Mark the owning view as mounted again.

        A call that was in flight when the view went away will never report
        back, so its in-progress state is rolled back to where it started.
        """
        self._attached = True
        if self.state == ImportState.SUBMITTING:
            self.state = ImportState.METHOD_CHOSEN
        elif self.state == ImportState.SAVING:
            self.state = ImportState.PREVIEW_READY

    def detach(self) -> None:
        """Mark the owning view as gone; late results will be ignored."""
        self._attached = False
        self._generation += 1

    def _is_current(self, generation: int) -> bool:
        return self._attached and generation == self._generation

    # Flags for the UI

    @property
    def markdown(self) -> str:
        return self.preview.value

    @property
    def is_loading(self) -> bool:
        return self.state == ImportState.SUBMITTING

    @property
    def is_saving(self) -> bool:
        return self.state == ImportState.SAVING

    @property
    def is_editing(self) -> bool:
        return self.state == ImportState.EDITING

    @property
    def show_inputs(self) -> bool:
        return self.state in (ImportState.IDLE, ImportState.METHOD_CHOSEN)

    @property
    def can_submit(self) -> bool:
        return self.state == ImportState.METHOD_CHOSEN and self._input_problem() is None

    # Input

    def choose_method(self, method: str) -> None:
        """
        Pick the import method.

        Raises:
            ImportInputError: For anything other than "file" or "text".
        """
        if method not in ALLOWED_METHODS:
            raise ImportInputError(f"Unknown import method: {method}")
        if self.show_inputs:
            self.method = method
            self.state = ImportState.METHOD_CHOSEN

    def add_images(self, files: Iterable[ImageUpload]) -> bool:
        """
        Validate a batch of picked images and add it to the working set.

        Returns:
            True if the batch was accepted; False if it was rejected, in which
            case `error` holds the reason and the working set is unchanged.
        """
        files = list(files)
        try:
            validate_images(files)
        except ImportInputError as e:
            self.error = e.message
            return False
        self.images.extend(files)
        self.error = None
        return True

    def remove_image(self, index: int) -> None:
        """Remove one image from the working set by position."""
        if not 0 <= index < len(self.images):
            return
        del self.images[index]
        if self.selected_image >= index:
            self.selected_image = max(0, self.selected_image - 1)

    def select_image(self, index: int) -> None:
        """Highlight one image of the working set; out-of-range indexes are ignored."""
        if 0 <= index < len(self.images):
            self.selected_image = index

    def set_text(self, text: str) -> None:
        self.text = text

    def _input_problem(self) -> Optional[str]:
        """Why submission is blocked right now, or None if it may proceed."""
        if not self.method:
            return "Please select an import method"
        if self.method == METHOD_FILE:
            if not self.images:
                return "Please select at least one image"
            try:
                validate_images(self.images)
            except ImportInputError as e:
                return e.message
        if self.method == METHOD_TEXT and not self.text.strip():
            return "Please enter recipe text"
        return None

    # Extraction

    def submit(self) -> bool:
        """
        Send the working set to the extraction endpoint.

        Returns:
            True if extracted markdown is now in preview. False if submission
            was blocked, extraction failed (see `error`), or the result
            arrived after the view went away.
        """
        problem = self._input_problem()
        if problem:
            self.error = problem
            return False

        generation = self._generation
        self.state = ImportState.SUBMITTING
        self.error = None
        self.preview.reset()
        logger.info("Extracting recipe via %s import", self.method)

        if self.method == METHOD_FILE:
            result = self.api.import_from_images(list(self.images))
        else:
            result = self.api.import_from_text(self.text)

        if not self._is_current(generation):
            logger.debug("Dropping extraction result for a detached import view")
            return False

        if not result.is_ok:
            logger.warning("Recipe extraction failed: %s", result.message)
            self.error = result.message
            self.state = ImportState.METHOD_CHOSEN
            return False

        self.preview.reset(result.value)
        self.state = ImportState.PREVIEW_READY
        return True

    # Preview editing

    def start_editing(self) -> None:
        """Clicking the rendered preview opens it for editing."""
        if self.state == ImportState.PREVIEW_READY:
            self.preview.begin()
            self.state = ImportState.EDITING

    def update_draft(self, text: str) -> None:
        self.preview.update(text)

    def save_edit(self) -> None:
        """Keep the edited draft as the previewed markdown."""
        if self.state == ImportState.EDITING:
            self.preview.commit()
            self.state = ImportState.PREVIEW_READY

    def cancel_edit(self) -> None:
        """Throw the draft away; the preview is left exactly as it was."""
        if self.state == ImportState.EDITING:
            self.preview.cancel()
            self.state = ImportState.PREVIEW_READY

    # Final save

    def save(self) -> Optional[Recipe]:
        """
        Store the previewed recipe.

        Returns:
            The created Recipe on success (the flow is then reset to IDLE), or
            None on failure (the flow stays in PREVIEW_READY with `error` set).
        """
        if self.state != ImportState.PREVIEW_READY or not self.markdown:
            return None

        generation = self._generation
        self.state = ImportState.SAVING
        self.error = None
        try:
            created = self.persistence.save(self.markdown, self.user_id_provider())
        except ApiciusError as e:
            logger.warning("Saving imported recipe failed: %s", e.message)
            if self._is_current(generation):
                self.error = e.message
                self.state = ImportState.PREVIEW_READY
            return None

        if self._is_current(generation):
            self.reset()
        return created

    def reset(self) -> None:
        """Back to a blank IDLE screen; any outstanding result is dropped."""
        self._generation += 1
        self.state = ImportState.IDLE
        self.method = None
        self.images = []
        self.text = ""
        self.preview.reset()
        self.error = None
        self.selected_image = 0
