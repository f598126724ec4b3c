from .illustration_image_client import (
    DEFAULT_IMAGE_MODEL,
    ImageGenerationClient,
    coerce_output_url,
)

__all__ = ["DEFAULT_IMAGE_MODEL", "ImageGenerationClient", "coerce_output_url"]
