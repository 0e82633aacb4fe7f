"""Errors raised while loading API descriptions.

Only SourceError subclasses cross the registry boundary; lower layers
convert library exceptions into one of these.
"""


class SourceError(Exception):
    """A source could not be turned into a model."""

    def __init__(self, message: str, location: str = ""):
        super().__init__(message)
        self.location = location

    def __str__(self) -> str:
        message = super().__str__()
        if self.location:
            return f"{self.location}: {message}"
        return message


class FetchFailure(SourceError):
    """The source was unreachable or answered with a non-2xx status."""


class ParseFailure(SourceError):
    """The document does not have the shape of an API description."""


class ParameterConflict(ParseFailure):
    """Two parameters of one operation map to the same key."""


class ConfigError(Exception):
    """The generator configuration file is missing or invalid."""
