"""
View navigation for the Runtime Log Viewer.

The ``Navigator`` is a plain state machine over a stack of view states whose
base is always ``HomeView``. ``BrowserHistory`` models a back/forward frame
list, and ``HistoryAdapter`` keeps the two in step: every forward transition
pushes exactly one frame, and back/forward requests from either the views or
the platform replay the matching navigator transition.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from .models import (
    EntryDetailView,
    GroupBucket,
    GroupDetailView,
    HomeView,
    LogRecord,
    ViewState,
)


logger = logging.getLogger(__name__)

HOME = HomeView()


class Navigator:
    """Owns the current view state and its parents."""

    def __init__(self):
        self._stack: list[ViewState] = [HOME]

    @property
    def current(self) -> ViewState:
        return self._stack[-1]

    @property
    def parent(self) -> Optional[ViewState]:
        if len(self._stack) < 2:
            return None
        return self._stack[-2]

    @property
    def depth(self) -> int:
        """Number of views above Home."""
        return len(self._stack) - 1

    @property
    def stack(self) -> tuple[ViewState, ...]:
        return tuple(self._stack)

    def _require(self, *kinds: type) -> None:
        if not isinstance(self.current, kinds):
            names = ", ".join(k.__name__ for k in kinds)
            raise ValueError(f"Expected view {names}, current view is {type(self.current).__name__}")

    def _push(self, state: ViewState) -> ViewState:
        self._stack.append(state)
        return state

    # =========================================================================
    # Forward transitions
    # =========================================================================

    def select_bucket(self, bucket: GroupBucket | Sequence[LogRecord]) -> ViewState:
        """
        Open a bucket from Home.

        Buckets with several members open the group list, a single member
        opens its entry directly.
        """
        self._require(HomeView)
        members = tuple(bucket.members if isinstance(bucket, GroupBucket) else bucket)
        if not members:
            raise ValueError("Cannot open an empty group")

        if len(members) == 1:
            return self._push(EntryDetailView(record=members[0]))
        return self._push(GroupDetailView(members=members))

    def select_record(self, record: LogRecord) -> ViewState:
        """Open an entry from the linear list on Home."""
        self._require(HomeView)
        return self._push(EntryDetailView(record=record))

    def open_member(self, index: int) -> ViewState:
        """Open the member at ``index`` of the current group."""
        self._require(GroupDetailView)
        members = self.current.members
        if not 0 <= index < len(members):
            raise ValueError(f"Member index {index} out of range (0-{len(members) - 1})")

        return self._push(EntryDetailView(
            record=members[index],
            origin_group=members,
            index_in_group=index
        ))

    def restore(self, state: ViewState) -> ViewState:
        """Push a previously visited state again (history forward)."""
        if isinstance(state, HomeView):
            raise ValueError("Home is the base view and cannot be pushed")
        return self._push(state)

    # =========================================================================
    # In-place transitions
    # =========================================================================

    def step(self, delta: int) -> bool:
        """
        Move within the origin group of the current entry.

        The index is clamped to the group bounds. Returns True if the
        displayed record changed.
        """
        state = self.current
        if not isinstance(state, EntryDetailView) or state.origin_group is None:
            return False

        last = len(state.origin_group) - 1
        index = min(max(state.index_in_group + delta, 0), last)
        if index == state.index_in_group:
            return False

        self._stack[-1] = EntryDetailView(
            record=state.origin_group[index],
            origin_group=state.origin_group,
            index_in_group=index
        )
        return True

    def show_record(self, record: LogRecord) -> bool:
        """Swap the record of an entry opened outside of a group."""
        self._require(EntryDetailView)
        state = self.current
        if state.origin_group is not None:
            raise ValueError("Entries opened from a group move with step()")
        if state.record is record:
            return False

        self._stack[-1] = EntryDetailView(record=record)
        return True

    # =========================================================================
    # Backward transitions
    # =========================================================================

    def back(self) -> ViewState:
        """Return to the parent view. Home stays Home."""
        if len(self._stack) > 1:
            self._stack.pop()
        return self.current

    def reset(self) -> ViewState:
        """Drop every view above Home."""
        del self._stack[1:]
        return self.current


class BrowserHistory:
    """
    Back/forward frame list with browser semantics.

    Frame 0 is the base frame; it is rewritten, never pushed. Pushing
    discards any frames ahead of the current position.
    """

    def __init__(self, base: Any = None):
        self._frames: list[Any] = [base]
        self._index = 0

    @property
    def depth(self) -> int:
        """Current position above the base frame."""
        return self._index

    @property
    def length(self) -> int:
        return len(self._frames)

    @property
    def current(self) -> Any:
        return self._frames[self._index]

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._frames) - 1

    def replace_base(self, frame: Any = None) -> None:
        """Rewrite the base frame and forget every other frame."""
        self._frames = [frame]
        self._index = 0

    def replace_current(self, frame: Any) -> None:
        """Rewrite the current frame in place."""
        self._frames[self._index] = frame

    def push(self, frame: Any) -> None:
        del self._frames[self._index + 1:]
        self._frames.append(frame)
        self._index += 1

    def back(self) -> Optional[Any]:
        """Move back one frame, returning the frame left behind."""
        if not self.can_go_back:
            return None
        left = self._frames[self._index]
        self._index -= 1
        return left

    def forward(self) -> Optional[Any]:
        """Move forward one frame, returning the frame entered."""
        if not self.can_go_forward:
            return None
        self._index += 1
        return self._frames[self._index]


class HistoryAdapter:
    """Keeps a Navigator and a BrowserHistory synchronized."""

    def __init__(self, navigator: Optional[Navigator] = None, history: Optional[BrowserHistory] = None):
        self.navigator = navigator or Navigator()
        self.history = history or BrowserHistory(HOME)
        self.history.replace_base(HOME)

    @property
    def current(self) -> ViewState:
        return self.navigator.current

    @property
    def in_sync(self) -> bool:
        return self.navigator.depth == self.history.depth

    def _pushed(self, state: ViewState) -> ViewState:
        self.history.push(state)
        return state

    def select_bucket(self, bucket: GroupBucket | Sequence[LogRecord]) -> ViewState:
        return self._pushed(self.navigator.select_bucket(bucket))

    def select_record(self, record: LogRecord) -> ViewState:
        return self._pushed(self.navigator.select_record(record))

    def open_member(self, index: int) -> ViewState:
        return self._pushed(self.navigator.open_member(index))

    def step(self, delta: int) -> bool:
        changed = self.navigator.step(delta)
        if changed:
            self.history.replace_current(self.navigator.current)
        return changed

    def show_record(self, record: LogRecord) -> bool:
        changed = self.navigator.show_record(record)
        if changed:
            self.history.replace_current(self.navigator.current)
        return changed

    def go_back(self) -> ViewState:
        """Back action, shared by the views and platform back events."""
        if self.history.back() is not None:
            self.navigator.back()
        return self.navigator.current

    def go_forward(self) -> ViewState:
        """Platform forward event: re-enter the next frame."""
        frame = self.history.forward()
        if frame is not None:
            self.navigator.restore(frame)
        return self.navigator.current

    def reset(self) -> ViewState:
        """Back to Home with a fresh history, used when new data arrives."""
        self.navigator.reset()
        self.history.replace_base(HOME)
        logger.debug("Navigation reset to home")
        return self.navigator.current
