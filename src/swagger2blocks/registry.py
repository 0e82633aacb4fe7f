"""Per-source registry of built models.

Each source is built in isolation; a failing source is recorded and
logged but never affects the entries of other sources.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

from swagger2blocks.config import GeneratorConfig
from swagger2blocks.errors import ParseFailure, SourceError
from swagger2blocks.fetch import DEFAULT_TIMEOUT, load_location
from swagger2blocks.parser.base import SourceDescription
from swagger2blocks.parser.swagger import parse_description
from swagger2blocks.pipeline import SourceEntry, build_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registered:
    key: str
    entry: SourceEntry
    ok = True


@dataclass(frozen=True)
class RegistrationFailed:
    key: str
    cause: SourceError
    ok = False


RegistrationResult = Registered | RegistrationFailed


def _unexpected_failure(key: str, error: Exception) -> RegistrationFailed:
    logger.exception("adding source %s failed unexpectedly", key)
    cause = ParseFailure(f"unexpected error: {error!r}", key)
    cause.__cause__ = error
    return RegistrationFailed(key=key, cause=cause)


def _build(key: str, load: Callable[[], SourceDescription]) -> RegistrationResult:
    try:
        entry = build_source(key, load())
    except SourceError as e:
        logger.warning("adding source %s failed: %s", key, e)
        return RegistrationFailed(key=key, cause=e)
    except Exception as e:
        return _unexpected_failure(key, e)
    return Registered(key=key, entry=entry)


class SourceRegistry:
    """Maps source keys to their (catalog, actions) entries.

    Writers replace the whole map under a lock; readers only ever see a
    complete map.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, SourceEntry] = {}
        self._failures: dict[str, SourceError] = {}

    def register(self, key: str, load: Callable[[], SourceDescription]) -> RegistrationResult:
        """Build the source returned by `load()` and store it under `key`.

        Never raises for a bad source: the failure is returned and logged.
        """
        result = _build(key, load)
        self._store(result)
        return result

    def register_description(self, key: str, description: SourceDescription) -> RegistrationResult:
        return self.register(key, lambda: description)

    def register_document(self, key: str, doc: dict, url: str = "") -> RegistrationResult:
        return self.register(key, partial(parse_description, doc, url=url, location=key))

    def register_location(
        self, key: str, location: str, timeout: float = DEFAULT_TIMEOUT
    ) -> RegistrationResult:
        return self.register(key, partial(load_location, location, timeout=timeout))

    def register_all(
        self,
        locations: Mapping[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = 4,
    ) -> list[RegistrationResult]:
        """Fetch and build every source concurrently, then store them in mapping order."""
        if not locations:
            return []

        def build(item):
            key, location = item
            return _build(key, partial(load_location, location, timeout=timeout))

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [(key, pool.submit(build, (key, location))) for key, location in locations.items()]

        results = []
        for key, future in futures:
            try:
                result = future.result()
            except Exception as e:
                result = _unexpected_failure(key, e)
            self._store(result)
            results.append(result)
        return results

    def _store(self, result: RegistrationResult) -> None:
        with self._lock:
            entries = dict(self._entries)
            failures = dict(self._failures)
            if isinstance(result, Registered):
                entries[result.key] = result.entry
                failures.pop(result.key, None)
            else:
                entries.pop(result.key, None)
                failures[result.key] = result.cause
            self._entries = entries
            self._failures = failures

    def keys(self) -> list[str]:
        return list(self._entries)

    def failed_keys(self) -> list[str]:
        return list(self._failures)

    def failure(self, key: str) -> SourceError | None:
        return self._failures.get(key)

    def get(self, key: str) -> SourceEntry | None:
        return self._entries.get(key)

    def entries(self) -> list[SourceEntry]:
        return list(self._entries.values())

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def regenerate(config: GeneratorConfig) -> SourceRegistry:
    """Build a brand-new registry for every configured source."""
    registry = SourceRegistry()
    registry.register_all(config.sources, timeout=config.timeout, max_workers=config.max_workers)
    logger.info(
        "regenerated %d sources (%d failed)", len(registry), len(registry.failed_keys())
    )
    return registry
