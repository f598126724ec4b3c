import unittest
from unittest.mock import MagicMock

from app.services.persistence import PersistenceError
from client.api_client import ComicApiError
from client.comic_session import ComicSession, PanelSlot
from models.comic_model import HistoryEntry


def _comics(count: int = 3) -> list[dict]:
    return [
        {
            "prompt": f"SNOWBUNNY scene {index}, cartoon style",
            "caption": f"Snow caption {index}",
        }
        for index in range(count)
    ]


class _FakeApi:
    def __init__(self, comics=None, story_error=None, image_results=None):
        self.comics = comics if comics is not None else _comics()
        self.story_error = story_error
        self.image_results = image_results or {}
        self.story_prompts: list[str] = []
        self.image_prompts: list[str] = []
        self.before_image = None

    def generate_story(self, prompt):
        self.story_prompts.append(prompt)
        if self.story_error:
            raise self.story_error
        return self.comics

    def generate_image(self, prompt):
        index = len(self.image_prompts)
        self.image_prompts.append(prompt)
        if self.before_image is not None:
            self.before_image(index)
        result = self.image_results.get(index, f"https://replicate.delivery/img-{index}.webp")
        if isinstance(result, Exception):
            raise result
        return result


class _Recorder:
    def __init__(self):
        self.states: list[list[PanelSlot]] = []

    def __call__(self, session):
        self.states.append(list(session.panels))


class TestComicSessionGenerate(unittest.TestCase):
    def test_captions_render_before_any_image(self):
        recorder = _Recorder()
        session = ComicSession(api=_FakeApi(), on_change=recorder)

        session.generate("a bunny visits the moon")

        first_with_panels = next(state for state in recorder.states if state)
        self.assertEqual(len(first_with_panels), 3)
        self.assertEqual(
            [panel.caption for panel in first_with_panels],
            ["Snow caption 0", "Snow caption 1", "Snow caption 2"],
        )
        self.assertTrue(all(panel.image_url is None for panel in first_with_panels))

    def test_images_are_merged_by_index_one_at_a_time(self):
        recorder = _Recorder()
        api = _FakeApi()
        session = ComicSession(api=api, on_change=recorder)

        panels = session.generate("a bunny visits the moon")

        self.assertEqual(
            [panel.image_url for panel in panels],
            [f"https://replicate.delivery/img-{index}.webp" for index in range(3)],
        )
        self.assertEqual(api.image_prompts, [comic["prompt"] for comic in _comics()])

        image_counts = [
            sum(1 for panel in state if panel.image_url) for state in recorder.states if state
        ]
        self.assertEqual(image_counts[:4], [0, 1, 2, 3])
        self.assertFalse(session.loading)
        self.assertIsNone(session.error)

    def test_failed_panel_image_does_not_stop_siblings(self):
        api = _FakeApi(image_results={1: ComicApiError("Failed to generate image")})
        session = ComicSession(api=api)

        panels = session.generate("a bunny visits the moon")

        self.assertEqual(len(api.image_prompts), 3)
        self.assertIsNotNone(panels[0].image_url)
        self.assertIsNone(panels[1].image_url)
        self.assertEqual(panels[1].error, "Failed to generate image")
        self.assertIsNotNone(panels[2].image_url)
        self.assertIsNone(session.error)

    def test_story_failure_sets_error_without_panels(self):
        api = _FakeApi(story_error=ComicApiError("Failed to generate story"))
        session = ComicSession(api=api)

        panels = session.generate("a bunny visits the moon")

        self.assertEqual(panels, [])
        self.assertEqual(session.panels, [])
        self.assertEqual(session.error, "Failed to generate story")
        self.assertFalse(session.loading)
        self.assertEqual(api.image_prompts, [])

    def test_new_generation_clears_previous_panels_and_error(self):
        api = _FakeApi(story_error=ComicApiError("Invalid story format received"))
        session = ComicSession(api=api)
        session.generate("first")
        self.assertEqual(session.error, "Invalid story format received")

        api.story_error = None
        panels = session.generate("second")

        self.assertIsNone(session.error)
        self.assertEqual(len(panels), 3)

    def test_superseded_generation_results_are_discarded(self):
        api = _FakeApi()
        session = ComicSession(api=api)
        stale_result: list = []

        def start_second_generation(index):
            if index == 1 and not stale_result:
                api.before_image = None
                api.comics = _comics(2)
                stale_result.append(session.generate("second idea"))

        api.before_image = start_second_generation

        first_result = session.generate("first idea")

        self.assertEqual(first_result, [])
        self.assertEqual(len(session.panels), 2)
        self.assertEqual(session.panels[0].caption, "Snow caption 0")
        self.assertTrue(all(panel.image_url for panel in session.panels))
        # first run: panel 0 and the call in flight for panel 1; second run: two panels
        self.assertEqual(len(api.image_prompts), 4)
        self.assertEqual(len(stale_result[0]), 2)

    def test_cancel_discards_in_flight_results(self):
        api = _FakeApi()
        session = ComicSession(api=api)
        api.before_image = lambda index: session.cancel() if index == 0 else None

        result = session.generate("a bunny visits the moon")

        self.assertEqual(result, [])
        self.assertEqual(len(api.image_prompts), 1)
        self.assertTrue(all(panel.image_url is None for panel in session.panels))
        self.assertFalse(session.loading)


class TestComicSessionHistory(unittest.TestCase):
    def test_load_history_stores_entries(self):
        history_client = MagicMock()
        history_client.fetch_history.return_value = [
            HistoryEntry(prompt="p", image_url="https://storage.googleapis.com/a.webp", created_at="2025-01-01")
        ]
        session = ComicSession(api=_FakeApi(), history_client=history_client)

        entries = session.load_history()

        self.assertEqual(len(entries), 1)
        self.assertEqual(session.history, entries)

    def test_history_failure_is_logged_not_raised(self):
        history_client = MagicMock()
        history_client.fetch_history.side_effect = PersistenceError("down")
        session = ComicSession(api=_FakeApi(), history_client=history_client)

        with self.assertLogs("client.comic_session", level="ERROR") as logs:
            entries = session.load_history()

        self.assertEqual(entries, [])
        self.assertIsNone(session.error)
        self.assertIn("Error fetching history", logs.output[0])


if __name__ == "__main__":
    unittest.main()
