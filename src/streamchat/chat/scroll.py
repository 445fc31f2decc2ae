"""Scroll-follow policy.

Decides whether new content should scroll the chat view to the bottom.
The view follows new content until the user scrolls away from the bottom,
and follows again once they scroll back or submit a new prompt.
"""

from enum import Enum

from .config import SCROLL_FOLLOW_TOLERANCE


class FollowState(str, Enum):
    """Viewport tracking mode."""

    FOLLOWING = "following"
    PINNED = "pinned"


class ScrollFollowPolicy:
    """Two-state follow/pinned machine driven by scroll geometry."""

    def __init__(self, tolerance: float = SCROLL_FOLLOW_TOLERANCE) -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        self._tolerance = tolerance
        self._state = FollowState.FOLLOWING

    @property
    def state(self) -> FollowState:
        return self._state

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def should_follow(self) -> bool:
        """True if new content should trigger a scroll to the bottom."""
        return self._state == FollowState.FOLLOWING

    def distance_from_bottom(
        self,
        scroll_offset: float,
        viewport_height: float,
        content_height: float,
    ) -> float:
        """Distance between the viewport bottom and the content bottom."""
        return content_height - scroll_offset - viewport_height

    def on_scroll(
        self,
        scroll_offset: float,
        viewport_height: float,
        content_height: float,
    ) -> FollowState:
        """Update the state from a scroll event.

        Args:
            scroll_offset: Distance scrolled from the top of the content
            viewport_height: Visible height of the view
            content_height: Total height of the content

        Returns:
            The new follow state
        """
        distance = self.distance_from_bottom(scroll_offset, viewport_height, content_height)
        if distance > self._tolerance:
            self._state = FollowState.PINNED
        else:
            self._state = FollowState.FOLLOWING
        return self._state

    def reset(self) -> None:
        """Follow new content again (the user submitted a prompt)."""
        self._state = FollowState.FOLLOWING
