from __future__ import annotations

from generators.illustration.illustration_image_client import ImageGenerationClient

from app.core.config import get_settings
from app.services.persistence import PersistenceClient


class ImageService:
    @staticmethod
    def generate_image(prompt: str) -> str:
        settings = get_settings()
        client = ImageGenerationClient(
            model_name=settings.image_model,
            num_inference_steps=settings.image_inference_steps,
            model_variant=settings.image_model_variant,
        )
        image_url = client.generate_image_url(prompt)
        PersistenceClient.from_settings(settings).save(prompt=prompt, image_url=image_url)
        return image_url
