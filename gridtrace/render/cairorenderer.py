import logging
from pathlib import Path
from typing import Optional, Union
import cairo
import numpy as np
from PIL import Image
from ..canvas.scene import Scene
from ..core.colors import ColorRGBA

logger = logging.getLogger(__name__)

BACKGROUND: ColorRGBA = (0.98, 0.98, 0.98, 1.0)


def image_to_surface(image: Image.Image) -> cairo.ImageSurface:
    """
    Converts a Pillow image into a cairo ARGB32 surface. Cairo expects
    premultiplied alpha in native byte order, i.e. BGRA on
    little-endian machines.
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    height, width = rgba.shape[:2]
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
    if width == 0 or height == 0:
        return surface

    alpha = rgba[:, :, 3:4].astype(np.uint16)
    premultiplied = (rgba[:, :, :3].astype(np.uint16) * alpha // 255).astype(
        np.uint8
    )
    bgra = np.empty_like(rgba)
    bgra[:, :, 0] = premultiplied[:, :, 2]
    bgra[:, :, 1] = premultiplied[:, :, 1]
    bgra[:, :, 2] = premultiplied[:, :, 0]
    bgra[:, :, 3] = rgba[:, :, 3]

    stride = surface.get_stride()
    buf = np.ndarray(
        shape=(height, stride // 4, 4),
        dtype=np.uint8,
        buffer=surface.get_data(),
    )
    surface.flush()
    buf[:, :width, :] = bgra
    surface.mark_dirty()
    return surface


def render_scene(
    scene: Scene,
    ctx: cairo.Context,
    background: Optional[ColorRGBA] = BACKGROUND,
):
    """
    Paints the background in pixel space, then renders the element tree
    under the scene's view transform.
    """
    if background is not None:
        ctx.save()
        ctx.set_source_rgba(*background)
        ctx.paint()
        ctx.restore()

    ctx.save()
    view = scene.viewport.get_view_transform()
    ctx.transform(cairo.Matrix(*view.for_cairo()))
    scene.root.render(ctx)
    ctx.restore()


def render_to_surface(
    scene: Scene, width: int, height: int
) -> cairo.ImageSurface:
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
    ctx = cairo.Context(surface)
    render_scene(scene, ctx)
    surface.flush()
    return surface


def render_to_png(
    scene: Scene, width: int, height: int, path: Union[str, Path]
) -> Path:
    path = Path(path)
    surface = render_to_surface(scene, width, height)
    surface.write_to_png(str(path))
    logger.info(f"Wrote {width}x{height} snapshot to {path}")
    return path
