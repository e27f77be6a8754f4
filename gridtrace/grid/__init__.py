from .entity import Direction, GridEntity
from .lock import LockController
from .registry import SelectionRegistry

__all__ = [
    "Direction",
    "GridEntity",
    "LockController",
    "SelectionRegistry",
]
