from __future__ import annotations

import logging
from typing import List, Optional

from sketchbox.paint.pixels import PixelBuffer

logger = logging.getLogger(__name__)


class History:
    """Linear undo/redo over full canvas snapshots.

    ``undo`` holds the states to go back to, ``redo`` the states undone since
    the last new action. Snapshots are owned copies, never shared with the
    live buffer.
    """

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self.undo: List[PixelBuffer] = []
        self.redo: List[PixelBuffer] = []
        self.max_depth = max_depth if max_depth and max_depth > 0 else None

    def push(self, buffer: PixelBuffer) -> None:
        logger.debug("history push")
        self._push(self.undo, buffer)

    def begin_new_action(self, buffer: PixelBuffer) -> None:
        # A new edit invalidates everything that could have been redone.
        self.redo.clear()
        self.push(buffer)

    def move(self, buffer: PixelBuffer, *, forward: bool) -> bool:
        """Undo (``forward=True``) or redo (``forward=False``) into ``buffer``."""
        source = self.undo if forward else self.redo
        target = self.redo if forward else self.undo
        if not source:
            return False
        snapshot = source.pop()
        self._push(target, buffer)
        buffer.assign(snapshot)
        return True

    def restore_peek(self, buffer: PixelBuffer) -> bool:
        if not self.undo:
            return False
        buffer.assign(self.undo[-1])
        return True

    def clear(self) -> None:
        self.undo.clear()
        self.redo.clear()

    def _push(self, stack: List[PixelBuffer], buffer: PixelBuffer) -> None:
        stack.append(buffer.clone())
        if self.max_depth is not None and len(stack) > self.max_depth:
            stack.pop(0)
