from __future__ import annotations

from generators.story.story_generator import StoryGenerator
from models.comic_model import ComicStory

from app.core.config import get_settings


class StoryService:
    @staticmethod
    def generate_story(prompt: str) -> ComicStory:
        generator = StoryGenerator(model_name=get_settings().story_model)
        return generator.generate_story(prompt)
