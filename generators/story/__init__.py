from models.comic_model import ComicPanel, ComicStory

from .story_generator import StoryGenerator
from .story_prompts import StoryPrompt

__all__ = ["ComicPanel", "ComicStory", "StoryPrompt", "StoryGenerator"]
