import argparse
import logging
import sys

from app.core.config import get_settings
from app.services.persistence import PersistenceClient
from client.api_client import DEFAULT_API_BASE, ComicApiClient
from client.comic_session import ComicSession


class ConsoleRenderer:
    """Prints each panel once when its caption appears and again when its image arrives."""

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self._printed: set[tuple[int, int, str | None]] = set()

    def __call__(self, session: ComicSession) -> None:
        for panel in session.snapshot():
            key = (session.generation_id, panel.index, panel.image_url)
            if key in self._printed:
                continue
            self._printed.add(key)
            if panel.image_url:
                print(f"[panel {panel.index + 1}] image: {panel.image_url}", file=self.stream)
            else:
                print(f"[panel {panel.index + 1}] {panel.caption}", file=self.stream)


def print_history(session: ComicSession) -> None:
    entries = session.load_history()
    if not entries:
        print("No history entries.")
        return
    for entry in entries:
        created = entry.created_date()
        created_text = created.isoformat() if created else "-"
        print(f"{created_text}  {entry.prompt}\n    {entry.image_url}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a three panel SnowBunny comic.")
    parser.add_argument("--prompt", default="", help="Story idea for the comic")
    parser.add_argument(
        "--api_base",
        default=DEFAULT_API_BASE,
        help="Base URL of a running comic creator server.",
    )
    parser.add_argument(
        "--show_history",
        action="store_true",
        help="Print previously generated images from the persistence service and exit.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.WARNING)
    args = parse_args(argv)

    session = ComicSession(
        api=ComicApiClient(api_base=args.api_base),
        history_client=PersistenceClient.from_settings(get_settings()),
    )

    if args.show_history:
        print_history(session)
        return 0

    if not args.prompt.strip():
        print("Error: --prompt is required unless --show_history is set.", file=sys.stderr)
        return 2

    session.on_change = ConsoleRenderer()
    print("Creating your comic...")
    session.generate(args.prompt)

    if session.error:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    missing = [panel.index + 1 for panel in session.panels if not panel.image_url]
    if missing:
        print(f"Panels without image: {missing}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
