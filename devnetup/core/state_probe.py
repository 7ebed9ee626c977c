"""Side-effect-free check for existing network state."""

from __future__ import annotations

from pathlib import Path

COMPLETION_MARKER = ".devnetup-complete"


class NetworkStateProbe:
    """Answers whether network state already exists at *state_dir*.

    Existence of the directory is treated as sufficient evidence of a
    prior generation. ``is_complete()`` additionally reports whether the
    bootstrapper finished writing it; that is informational only.
    """

    def __init__(self, state_dir: Path) -> None:
        self._state_dir = state_dir

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    @property
    def marker_path(self) -> Path:
        return self._state_dir / COMPLETION_MARKER

    def exists(self) -> bool:
        return self._state_dir.is_dir()

    def is_complete(self) -> bool:
        return self.marker_path.is_file()
