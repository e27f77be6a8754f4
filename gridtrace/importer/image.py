from __future__ import annotations
import io
import uuid
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple
from PIL import Image, UnidentifiedImageError
from ..canvas.shapes import ImageShape
from ..core.geometry import Rect

if TYPE_CHECKING:
    from ..canvas.scene import Scene
    from ..grid.lock import LockController

logger = logging.getLogger(__name__)

# Extra margin taken off the fitted size, on top of the padding.
FIT_MARGIN = 10.0


@dataclass
class ImportedImage:
    image: Image.Image
    format: Optional[str] = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.width, self.image.height


class ImageImporter:
    """Decodes pasted clipboard data into an RGBA Pillow image."""

    def decode(self, data: Optional[bytes]) -> Optional[ImportedImage]:
        """
        Returns None for empty or non-image data, so a paste of text
        does nothing.
        """
        if not data:
            logger.debug("Paste contained no data")
            return None
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                fmt = img.format
                rgba = img.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Ignoring paste that is not an image: {e}")
            return None

        logger.info(f"Decoded {fmt} image {rgba.width}x{rgba.height}")
        return ImportedImage(image=rgba, format=fmt)


def fit_to_stage(
    width: float,
    height: float,
    stage_width: float,
    stage_height: float,
    padding: float = 60.0,
) -> Optional[Rect]:
    """
    Places an image on the stage: portrait images span the stage
    height, landscape ones the stage width, keeping the aspect ratio.
    The result is centred and shifted by `padding`, then shrunk by the
    padding and a small margin.
    """
    if width <= 0 or height <= 0:
        return None
    if height > width:
        fit_h = stage_height
        fit_w = width / height * fit_h
    else:
        fit_w = stage_width
        fit_h = height / width * fit_w
    return Rect(
        (stage_width - fit_w) / 2 + padding,
        (stage_height - fit_h) / 2 + padding,
        max(fit_w - padding - FIT_MARGIN, 0.0),
        max(fit_h - padding - FIT_MARGIN, 0.0),
    )


def add_image_to_scene(
    scene: "Scene",
    imported: ImportedImage,
    lock: "LockController",
    padding: float = 60.0,
) -> Optional[ImageShape]:
    """
    Adds a pasted image below every grid and registers it with the lock
    so it follows the global drag setting.
    """
    width, height = imported.size
    rect = fit_to_stage(
        width,
        height,
        scene.width,
        scene.height,
        padding,
    )
    if rect is None:
        logger.warning("Ignoring image without pixels")
        return None

    shape = ImageShape(
        imported.image,
        x=rect.x,
        y=rect.y,
        width=rect.width,
        height=rect.height,
        name="image",
    )
    index = sum(1 for c in scene.root.children if c.name == "image")
    scene.root.insert(index, shape)
    lock.register(f"image-{uuid.uuid4()}", shape)
    return shape
