import logging

import replicate

from generators.constants import DEFAULT_IMAGE_MODEL
from generators.errors import ImageGenerationError
from generators.illustration.illustration_env import resolve_api_token

logger = logging.getLogger(__name__)


def coerce_output_url(output) -> str:
    # replicate returns a FileOutput, a list of them, or plain strings
    # depending on the model and client version.
    if isinstance(output, (list, tuple)):
        if not output:
            return ""
        output = output[0]

    url = getattr(output, "url", None)
    if isinstance(url, str):
        return url.strip()
    if output is None:
        return ""
    return str(output).strip()


class ImageGenerationClient:
    def __init__(
        self,
        model_name: str = DEFAULT_IMAGE_MODEL,
        num_inference_steps: int = 8,
        model_variant: str = "schnell",
        client: replicate.Client | None = None,
    ):
        self.client = client or replicate.Client(api_token=resolve_api_token())
        self.model_name = model_name
        self.num_inference_steps = num_inference_steps
        self.model_variant = model_variant

    def _build_input(self, prompt: str) -> dict:
        return {
            "prompt": prompt,
            "num_inference_steps": self.num_inference_steps,
            "model": self.model_variant,
        }

    def generate_image_url(self, prompt: str) -> str:
        output = self.client.run(self.model_name, input=self._build_input(prompt))
        image_url = coerce_output_url(output)
        if not image_url:
            raise ImageGenerationError(
                f"No image output returned from image model: {self.model_name}"
            )

        logger.info("Generated image model=%s url=%s", self.model_name, image_url)
        return image_url
