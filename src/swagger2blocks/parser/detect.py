"""Load raw API description text and detect its flavour."""

import json

import yaml

from swagger2blocks.errors import ParseFailure


def load_document(text: str, location: str = "") -> dict:
    """Parse YAML or JSON text into a mapping.

    Raises ParseFailure when neither parser yields a mapping.
    """
    # Try YAML first, it also accepts most JSON
    try:
        data = yaml.safe_load(text)
        if isinstance(data, dict):
            return data
    except yaml.YAMLError:
        pass

    # Try JSON specifically (for files not parseable as YAML)
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except (json.JSONDecodeError, ValueError):
        pass

    raise ParseFailure("document is not a YAML or JSON mapping", location)


def detect_version(doc: dict, location: str = "") -> str:
    """Detect the description grammar.

    Returns: 'openapi3' or 'swagger2'.
    """
    if not isinstance(doc, dict):
        raise ParseFailure("document is not a mapping", location)
    openapi = doc.get("openapi")
    if openapi is not None and str(openapi).startswith("3"):
        return "openapi3"
    swagger = doc.get("swagger")
    if swagger is not None and str(swagger).startswith("2"):
        return "swagger2"
    raise ParseFailure("missing or unsupported 'openapi'/'swagger' version field", location)
