from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .element import SceneElement


@dataclass
class PointerEvent:
    """
    A pointer event travelling through the scene.

    Presses bubble from the element under the pointer up through its
    ancestors and finally reach the scene. A handler that calls
    `stop_propagation()` keeps the event from travelling further; one
    that calls `prevent_default()` keeps the scene from starting a drag
    or a pan with it.
    """

    raw: Tuple[float, float]
    local: Tuple[float, float]
    button: int = 1
    target: Optional[SceneElement] = None
    current_target: Optional[SceneElement] = field(default=None, repr=False)
    cancel_bubble: bool = False
    default_prevented: bool = False

    def stop_propagation(self):
        self.cancel_bubble = True

    def prevent_default(self):
        self.default_prevented = True

