from .image import (
    ImageImporter,
    ImportedImage,
    add_image_to_scene,
    fit_to_stage,
)

__all__ = [
    "ImageImporter",
    "ImportedImage",
    "add_image_to_scene",
    "fit_to_stage",
]
