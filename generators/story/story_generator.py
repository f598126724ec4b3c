import logging
import os

from dotenv import load_dotenv
from google import genai
from google.genai import types
from pydantic import ValidationError

from generators.errors import EmptyModelResponseError, MalformedModelResponseError
from generators.story.story_prompts import StoryPrompt
from models.comic_model import ComicStory

load_dotenv()
logger = logging.getLogger(__name__)


def _resolve_api_key() -> str:
    for env_name in ("GEMINI_STORY_API_KEY", "GEMINI_API_KEY"):
        key = os.getenv(env_name)
        if key:
            return key
    raise ValueError(
        "No Gemini API key found. Set one of: GEMINI_STORY_API_KEY, GEMINI_API_KEY."
    )


class StoryGenerator:
    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        client: genai.Client | None = None,
        prompts: StoryPrompt | None = None,
    ):
        self.client = client or genai.Client(api_key=_resolve_api_key())
        self.model_name = model_name
        self.prompts = prompts or StoryPrompt()

    def generate_story(self, prompt: str) -> ComicStory:
        """
        Expands a story idea into captioned comic panels using the Gemini API.

        The model is asked for a JSON object; its text is parsed as-is so an
        empty answer and an unparsable one can be told apart by the caller.
        """
        user_prompt = self.prompts.generate_user_prompt(prompt)

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=self.prompts.system_instruction,
                response_mime_type="application/json",
            ),
        )

        text = getattr(response, "text", None)
        text = text.strip() if isinstance(text, str) else ""
        if not text:
            raise EmptyModelResponseError("No prompts generated")

        try:
            story = ComicStory.model_validate_json(text)
        except ValidationError as error:
            logger.warning("Story model returned unusable JSON: %s", text[:500])
            raise MalformedModelResponseError(f"Invalid story format received: {error}") from error

        logger.info("Generated story model=%s panels=%d", self.model_name, len(story.comics))
        return story
