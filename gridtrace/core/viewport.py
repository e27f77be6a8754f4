import logging
from typing import Tuple
from blinker import Signal
from .matrix import Matrix

logger = logging.getLogger(__name__)

DEFAULT_ZOOM_FACTOR = 1.05


class CoordinateSpace:
    """
    The pan offset and uniform scale of the canvas.

    Raw pointer positions (widget pixels) map to canvas-local
    coordinates through the inverse of the view transform
    `translation(pan) @ scale(scale)`. Grid bounding boxes are always
    expressed in local coordinates.
    """

    def __init__(
        self,
        pan_x: float = 0.0,
        pan_y: float = 0.0,
        scale: float = 1.0,
        zoom_factor: float = DEFAULT_ZOOM_FACTOR,
    ):
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        if zoom_factor <= 0:
            raise ValueError(
                f"Zoom factor must be positive, got {zoom_factor}"
            )
        self.pan_x: float = float(pan_x)
        self.pan_y: float = float(pan_y)
        self.scale: float = float(scale)
        self.zoom_factor: float = float(zoom_factor)
        self.changed = Signal()

    def get_view_transform(self) -> Matrix:
        """Maps local coordinates to raw (screen) coordinates."""
        return Matrix.translation(self.pan_x, self.pan_y) @ Matrix.scale(
            self.scale, self.scale
        )

    def to_local(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return self.get_view_transform().invert().transform_point(pos)

    def zoom(self, pos: Tuple[float, float], delta_sign: float):
        """
        Zooms in (delta_sign > 0) or out (delta_sign < 0) by the zoom
        factor, keeping the local point under `pos` fixed on screen.
        """
        if delta_sign == 0:
            return
        anchor_x, anchor_y = self.to_local(pos)
        if delta_sign > 0:
            new_scale = self.scale * self.zoom_factor
        else:
            new_scale = self.scale / self.zoom_factor

        self.scale = new_scale
        self.pan_x = pos[0] - anchor_x * new_scale
        self.pan_y = pos[1] - anchor_y * new_scale
        logger.debug(f"Zoomed to {self.scale:.4f} around {pos}")
        self.changed.send(self)

    def pan(self, dx: float, dy: float):
        if dx == 0 and dy == 0:
            return
        self.pan_x += dx
        self.pan_y += dy
        self.changed.send(self)

    def set_scale(self, scale: float):
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        if scale == self.scale:
            return
        self.scale = float(scale)
        self.changed.send(self)

    def fit_width(self, container_width: float, base_width: float):
        """
        Scales the canvas so a stage of `base_width` local units fills a
        container of `container_width` pixels. The pan is kept.
        """
        if container_width <= 0 or base_width <= 0:
            logger.debug(
                f"Ignoring fit with container={container_width}, "
                f"base={base_width}"
            )
            return
        self.set_scale(container_width / base_width)

    def __repr__(self) -> str:
        return (
            f"CoordinateSpace(pan=({self.pan_x}, {self.pan_y}), "
            f"scale={self.scale})"
        )
