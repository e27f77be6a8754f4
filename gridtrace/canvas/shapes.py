from __future__ import annotations
import math
import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence
from ..core.colors import ColorRGBA
from ..core.geometry import Line
from .element import SceneElement

if TYPE_CHECKING:
    import cairo
    from PIL import Image

logger = logging.getLogger(__name__)

TRANSPARENT: ColorRGBA = (0.0, 0.0, 0.0, 0.0)

# Minimum half-width, in local units, of the band around a stroke that
# counts as a hit.
HIT_TOLERANCE = 3.0


class StyledShape(SceneElement):
    """A shape with stroke and fill styling."""

    def __init__(
        self,
        *args,
        fill: ColorRGBA = TRANSPARENT,
        stroke: ColorRGBA = TRANSPARENT,
        stroke_width: float = 1.0,
        dash: Optional[Sequence[float]] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.fill: ColorRGBA = fill
        self.stroke: ColorRGBA = stroke
        self.stroke_width: float = stroke_width
        self.dash: Sequence[float] = tuple(dash or ())

    def set_style(
        self,
        fill: Optional[ColorRGBA] = None,
        stroke: Optional[ColorRGBA] = None,
        stroke_width: Optional[float] = None,
        dash: Optional[Sequence[float]] = None,
    ):
        if fill is not None:
            self.fill = fill
        if stroke is not None:
            self.stroke = stroke
        if stroke_width is not None:
            self.stroke_width = stroke_width
        if dash is not None:
            self.dash = tuple(dash)
        self.queue_draw()

    def has_fill(self) -> bool:
        return self.fill[3] > 0

    def _apply_stroke(self, ctx: "cairo.Context"):
        ctx.set_source_rgba(*self.stroke)
        ctx.set_line_width(self.stroke_width)
        # A dash with no "on" length means a solid line.
        if self.dash and any(d > 0 for d in self.dash[::2]):
            ctx.set_dash(list(self.dash))
        else:
            ctx.set_dash([])
        ctx.stroke()


class RectShape(StyledShape):
    def contains(self, x: float, y: float) -> bool:
        half = max(self.stroke_width / 2, HIT_TOLERANCE)
        if self.has_fill():
            return (
                -half <= x <= self.width + half
                and -half <= y <= self.height + half
            )
        in_outer = (
            -half <= x <= self.width + half
            and -half <= y <= self.height + half
        )
        in_inner = (
            half < x < self.width - half and half < y < self.height - half
        )
        return in_outer and not in_inner

    def draw(self, ctx: "cairo.Context"):
        ctx.rectangle(0, 0, self.width, self.height)
        if self.has_fill():
            ctx.set_source_rgba(*self.fill)
            ctx.fill_preserve()
        self._apply_stroke(ctx)


class LineShape(StyledShape):
    """A straight segment; its points are in the element's coordinates."""

    def __init__(self, line: Line = Line(0, 0, 0, 0), **kwargs):
        super().__init__(**kwargs)
        self.points: Line = line
        self._sync_size()

    def _sync_size(self):
        self.width = abs(self.points.x1 - self.points.x0)
        self.height = abs(self.points.y1 - self.points.y0)

    def set_points(self, line: Line):
        if line != self.points:
            self.points = line
            self._sync_size()
            self.queue_draw()

    def contains(self, x: float, y: float) -> bool:
        x0, y0, x1, y1 = self.points
        dx, dy = x1 - x0, y1 - y0
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            dist = math.hypot(x - x0, y - y0)
        else:
            t = max(0.0, min(1.0, ((x - x0) * dx + (y - y0) * dy) / length_sq))
            dist = math.hypot(x - (x0 + t * dx), y - (y0 + t * dy))
        return dist <= max(self.stroke_width / 2, HIT_TOLERANCE)

    def draw(self, ctx: "cairo.Context"):
        ctx.move_to(self.points.x0, self.points.y0)
        ctx.line_to(self.points.x1, self.points.y1)
        self._apply_stroke(ctx)


class ImageShape(SceneElement):
    """
    A pasted reference image, drawn scaled into its width and height.
    The cairo surface is created on first draw.
    """

    def __init__(self, image: "Image.Image", **kwargs: Any):
        kwargs.setdefault("width", image.width)
        kwargs.setdefault("height", image.height)
        super().__init__(**kwargs)
        self.image = image
        self._surface: Optional["cairo.ImageSurface"] = None

    def draw(self, ctx: "cairo.Context"):
        from ..render.cairorenderer import image_to_surface

        if self._surface is None:
            self._surface = image_to_surface(self.image)
        source_w = self._surface.get_width()
        source_h = self._surface.get_height()
        if source_w <= 0 or source_h <= 0:
            return

        ctx.save()
        ctx.scale(self.width / source_w, self.height / source_h)
        ctx.set_source_surface(self._surface, 0, 0)
        ctx.paint()
        ctx.restore()
