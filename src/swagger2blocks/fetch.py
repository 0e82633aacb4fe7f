"""Single-attempt loading of API descriptions from URLs or local files."""

from pathlib import Path

import httpx

from swagger2blocks.errors import FetchFailure, ParseFailure
from swagger2blocks.parser.base import SourceDescription
from swagger2blocks.parser.detect import load_document
from swagger2blocks.parser.swagger import parse_description

DEFAULT_TIMEOUT = 30.0


def is_url(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


def fetch_text(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """GET the document once. Any transport error or non-2xx status is a FetchFailure."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchFailure(f"HTTP {e.response.status_code}", url) from e
    except httpx.HTTPError as e:
        raise FetchFailure(str(e) or type(e).__name__, url) from e
    return response.text


def read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FetchFailure(str(e), path) from e
    except UnicodeDecodeError as e:
        raise ParseFailure(f"not UTF-8 text: {e}", path) from e


def load_location(location: str, timeout: float = DEFAULT_TIMEOUT) -> SourceDescription:
    """Fetch or read `location` and parse it into a SourceDescription."""
    if is_url(location):
        text = fetch_text(location, timeout=timeout)
        url = location
    else:
        text = read_text(location)
        url = ""
    doc = load_document(text, location)
    return parse_description(doc, url=url, location=location)
