"""
A toolkit-free scene graph: elements, shapes, hit-testing, event
bubbling, dragging and panning.
"""
from .element import SceneElement
from .events import PointerEvent
from .scene import Scene
from .shapes import ImageShape, LineShape, RectShape, StyledShape

__all__ = [
    "SceneElement",
    "PointerEvent",
    "Scene",
    "ImageShape",
    "LineShape",
    "RectShape",
    "StyledShape",
]
