from __future__ import annotations

"""
Typed UI state for the Streamlit console.

Business state (selection, rate matrix, busy flags, reset panel) lives in
`ricemill_admin.ui_logic`. This module only holds what is specific to
Streamlit reruns:

- which matrix generation has already been loaded, so a rerun does not refetch
- a revision counter that rotates the data editor's widget key whenever the
  matrix is reseeded or edited, forcing the editor to redraw from the matrix
- toasts raised during a callback, flushed on the next render
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class UIState:
    """Per-session UI bookkeeping for the bag-rates page."""

    loaded_generation: Optional[int] = None
    editor_revision: int = 0
    # Rotated on close so the confirmation input always reopens empty
    reset_input_revision: int = 0
    pending_toasts: List[Tuple[str, str]] = field(default_factory=list)

    def bump_editor(self) -> None:
        self.editor_revision += 1

    def queue_toast(self, message: str, variant: str) -> None:
        self.pending_toasts.append((message, variant))

    def drain_toasts(self) -> List[Tuple[str, str]]:
        toasts = list(self.pending_toasts)
        self.pending_toasts.clear()
        return toasts
