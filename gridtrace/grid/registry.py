from __future__ import annotations
import logging
from typing import Dict, List, Optional
from blinker import Signal
from .entity import GridEntity

logger = logging.getLogger(__name__)


class SelectionRegistry:
    """
    Holds the committed grids plus two slots: the selected grid and the
    preview grid being drawn. Either slot may be empty, and a grid is
    never in both; a preview only becomes selectable once committed.
    """

    def __init__(self):
        self._grids: Dict[str, GridEntity] = {}
        self._selected: Optional[GridEntity] = None
        self._preview: Optional[GridEntity] = None
        # Sent with (registry, grid=<newly selected or None>)
        self.selection_changed = Signal()

    @property
    def selected(self) -> Optional[GridEntity]:
        return self._selected

    @property
    def preview(self) -> Optional[GridEntity]:
        return self._preview

    @property
    def grids(self) -> List[GridEntity]:
        """Committed grids, oldest first."""
        return list(self._grids.values())

    def get(self, uid: str) -> Optional[GridEntity]:
        return self._grids.get(uid)

    def __contains__(self, grid: object) -> bool:
        return isinstance(grid, GridEntity) and grid.uid in self._grids

    def begin_preview(self, grid: GridEntity) -> bool:
        if self._preview is not None:
            logger.warning(
                f"Preview {self._preview.uid} already active, "
                f"refusing {grid.uid}"
            )
            return False
        if grid is self._selected or grid in self:
            logger.warning(f"Grid {grid.uid} is committed, not a preview")
            return False
        grid.is_preview = True
        self._preview = grid
        return True

    def commit_preview(self) -> Optional[GridEntity]:
        """
        Commits the preview and makes it the sole selected grid.
        Returns the committed grid, or None without a preview.
        """
        grid = self._preview
        if grid is None:
            return None
        self._preview = None
        grid.commit()
        self._grids[grid.uid] = grid
        self.select(grid)
        return grid

    def discard_preview(self) -> Optional[GridEntity]:
        """Empties the preview slot and returns what was in it."""
        grid, self._preview = self._preview, None
        return grid

    def select(self, grid: GridEntity) -> bool:
        if grid is self._selected:
            return True
        if grid is self._preview or grid not in self:
            logger.debug(f"Refusing to select uncommitted grid {grid.uid}")
            return False
        if self._selected is not None:
            self._selected.deselect()
        self._selected = grid
        grid.select()
        self.selection_changed.send(self, grid=grid)
        return True

    def deselect(self):
        if self._selected is None:
            return
        self._selected.deselect()
        self._selected = None
        self.selection_changed.send(self, grid=None)

    def remove(self, grid: GridEntity):
        """Forgets a grid without destroying it."""
        if grid is self._preview:
            self._preview = None
        if grid is self._selected:
            self._selected = None
            self.selection_changed.send(self, grid=None)
        self._grids.pop(grid.uid, None)
