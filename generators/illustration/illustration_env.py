import os

from dotenv import load_dotenv


load_dotenv()


def resolve_api_token() -> str:
    token = (os.getenv("REPLICATE_API_TOKEN") or "").strip()
    if token:
        return token
    raise ValueError("REPLICATE_API_TOKEN environment variable not set.")
