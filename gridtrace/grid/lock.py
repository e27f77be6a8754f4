import logging
from typing import Dict, Optional
from blinker import Signal
from ..canvas.element import SceneElement

logger = logging.getLogger(__name__)


class LockController:
    """
    A global lock on drag-repositioning.

    Everything that can be dragged (grids, the preview, pasted images)
    registers its element here under a handle. Toggling the lock forces
    every registered element's drag-ability to `not locked`; newly
    registered elements get the current setting. The lock does not
    remember per-element state.
    """

    def __init__(self, locked: bool = False):
        self._locked: bool = locked
        self._items: Dict[str, SceneElement] = {}
        # Sent with (controller, locked=<bool>)
        self.lock_changed = Signal()

    @property
    def locked(self) -> bool:
        return self._locked

    def register(self, handle: str, elem: SceneElement):
        self._items[handle] = elem
        elem.set_draggable(not self._locked)

    def unregister(self, handle: str) -> Optional[SceneElement]:
        return self._items.pop(handle, None)

    def is_draggable(self, handle: str) -> bool:
        elem = self._items.get(handle)
        return elem is not None and elem.draggable

    def set_locked(self, locked: bool):
        if locked == self._locked:
            return
        self._locked = locked
        for elem in self._items.values():
            elem.set_draggable(not locked)
        logger.info(
            f"{'Locked' if locked else 'Unlocked'} {len(self._items)} items"
        )
        self.lock_changed.send(self, locked=locked)

    def toggle_lock(self) -> bool:
        self.set_locked(not self._locked)
        return self._locked
