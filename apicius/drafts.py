"""
Edit buffer for markdown recipes.

Both the import preview and the recipe detail view let the user click the
rendered recipe to edit it, then save or cancel. MarkdownDraft holds the
committed markdown and, while editing, a separate staged copy.
"""

from typing import Optional


class MarkdownDraft:
    """
    Committed markdown plus an optional staged edit.

    Cancelling an edit never touches `value`, so the previewed markdown stays
    byte-identical to what it was before editing began.
    """

    def __init__(self, value: str = ""):
        self.value = value
        self.draft: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.draft is not None

    def begin(self) -> None:
        """Snapshot the committed markdown into the draft buffer."""
        self.draft = self.value

    def update(self, text: str) -> None:
        """Replace the draft text. Ignored when not editing."""
        if self.is_editing:
            self.draft = text

    def commit(self) -> str:
        """Make the draft the committed markdown and leave edit mode."""
        if self.is_editing:
            self.value = self.draft
            self.draft = None
        return self.value

    def cancel(self) -> None:
        """Discard the draft and leave edit mode."""
        self.draft = None

    def reset(self, value: str = "") -> None:
        self.value = value
        self.draft = None
