"""Builds one source's catalog and actions, strictly in order."""

import logging
from dataclasses import dataclass

from swagger2blocks.model.actions import ActionExtractor
from swagger2blocks.model.catalog import TypeCatalog
from swagger2blocks.model.resolver import build_catalog
from swagger2blocks.model.types import ActionInfo
from swagger2blocks.parser.base import SourceDescription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEntry:
    key: str
    site: str
    catalog: TypeCatalog
    actions: tuple[ActionInfo, ...]


def build_source(key: str, description: SourceDescription) -> SourceEntry:
    """Declare, resolve, then extract. Always starts from a fresh catalog."""
    catalog = build_catalog(description.schemas)
    actions = ActionExtractor(catalog, site=description.site).extract(description.operations)
    logger.info(
        "source %s: %d types, %d actions", key, len(catalog.declared()), len(actions)
    )
    return SourceEntry(key=key, site=description.site, catalog=catalog, actions=tuple(actions))
