from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Generator, List, Optional, Tuple
from blinker import Signal

# Forward declaration for type hinting
if TYPE_CHECKING:
    import cairo
    from .scene import Scene


logger = logging.getLogger(__name__)


class SceneElement:
    """
    A node in the scene graph.

    Positions are relative to the parent element. Elements carry no
    scaling of their own; the only scale in the scene is the view
    transform of the Scene's CoordinateSpace, so local coordinates of a
    top-level element differ from canvas-local ones by a translation.
    """

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        width: float = 0.0,
        height: float = 0.0,
        visible: bool = True,
        draggable: bool = False,
        hittable: bool = True,
        name: str = "",
        data: Any = None,
    ):
        self.x: float = float(x)
        self.y: float = float(y)
        self.width: float = float(width)
        self.height: float = float(height)
        self.visible: bool = visible
        self.draggable: bool = draggable
        # Elements that are not hittable are only hit through children.
        self.hittable: bool = hittable
        self.name: str = name
        self.data: Any = data
        self.scene: Optional["Scene"] = None
        self.parent: Optional[SceneElement] = None
        self.children: List[SceneElement] = []
        self.destroyed: bool = False

        # Receivers get (element, event=PointerEvent) while a press
        # bubbles through this element.
        self.pointer_pressed = Signal()

    def _set_scene(self, scene: Optional["Scene"]):
        self.scene = scene
        for child in self.children:
            child._set_scene(scene)

    def queue_draw(self):
        if self.scene is not None:
            self.scene.queue_draw()

    def add(self, elem: SceneElement) -> SceneElement:
        if elem.parent:
            elem.parent.remove_child(elem)
        self.children.append(elem)
        elem.parent = self
        elem._set_scene(self.scene)
        self.queue_draw()
        return elem

    def insert(self, index: int, elem: SceneElement) -> SceneElement:
        if elem.parent:
            elem.parent.remove_child(elem)
        self.children.insert(index, elem)
        elem.parent = self
        elem._set_scene(self.scene)
        self.queue_draw()
        return elem

    def remove_child(self, elem: SceneElement):
        """Not recursive."""
        if elem not in self.children:
            return
        self.children.remove(elem)
        elem.parent = None
        self.queue_draw()
        elem._set_scene(None)

    def remove(self):
        if self.parent is not None:
            self.parent.remove_child(self)

    def destroy(self):
        """
        Detaches the element and its whole subtree. A destroyed element
        is never hit and never rendered again.
        """
        self.remove()
        for child in self.children[:]:
            child.destroy()
        self.children = []
        self.destroyed = True

    def set_pos(self, x: float, y: float):
        if self.x != x or self.y != y:
            self.x, self.y = float(x), float(y)
            self.queue_draw()

    def set_size(self, width: float, height: float):
        width, height = float(width), float(height)
        if width != self.width or height != self.height:
            self.width, self.height = width, height
            self.queue_draw()

    def rect(self) -> Tuple[float, float, float, float]:
        """returns x, y, width, height"""
        return self.x, self.y, self.width, self.height

    def set_draggable(self, draggable: bool):
        self.draggable = draggable

    def ancestors(self) -> Generator[SceneElement, None, None]:
        """Yields this element, then its parent chain up to the root."""
        elem: Optional[SceneElement] = self
        while elem is not None:
            yield elem
            elem = elem.parent

    def find_draggable(self) -> Optional[SceneElement]:
        for elem in self.ancestors():
            if elem.draggable:
                return elem
        return None

    def contains(self, x: float, y: float) -> bool:
        """
        Checks a point in this element's own coordinates against its
        bounds. Shapes override this for their exact outline.
        """
        return 0 <= x <= self.width and 0 <= y <= self.height

    def get_elem_hit(self, x: float, y: float) -> Optional[SceneElement]:
        """
        Returns the deepest visible element at (x, y), which is given in
        this element's coordinates. Children are checked before the
        element itself, top-most (last added) first.
        """
        if not self.visible or self.destroyed:
            return None

        for child in reversed(self.children):
            hit = child.get_elem_hit(x - child.x, y - child.y)
            if hit:
                return hit

        if self.hittable and self.contains(x, y):
            return self
        return None

    def render(self, ctx: "cairo.Context"):
        if not self.visible or self.destroyed:
            return
        ctx.save()
        ctx.translate(self.x, self.y)
        self.draw(ctx)
        for child in self.children:
            child.render(ctx)
        ctx.restore()

    def draw(self, ctx: "cairo.Context"):
        """Subclasses draw themselves here, at their own origin."""
        pass

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"rect={self.rect()})"
        )
