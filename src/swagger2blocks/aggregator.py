"""Read-only views over a SourceRegistry for the block renderer."""

from swagger2blocks.model.catalog import UNKNOWN_TYPE
from swagger2blocks.model.types import ActionInfo, TypeInfo
from swagger2blocks.model.views import ActionView, ModelSnapshot, TypeView
from swagger2blocks.pipeline import SourceEntry
from swagger2blocks.registry import SourceRegistry


def _referenced_types(entry: SourceEntry) -> set[TypeInfo]:
    referenced = set()
    for action in entry.actions:
        referenced.add(action.return_type)
        referenced.update(param_type for param_type, _ in action.params.values())
    for handle in entry.catalog.declared():
        referenced.update(p.property_type for p in handle.properties if p.property_type is not None)
    return referenced


class ModelAggregator:
    """Per-source or combined views, each item tagged with its source key.

    Passing key=None means every registered source, in registration order.
    """

    def __init__(self, registry: SourceRegistry):
        self.registry = registry

    def _entries(self, key: str | None) -> list[SourceEntry]:
        if key is None:
            return self.registry.entries()
        entry = self.registry.get(key)
        return [entry] if entry is not None else []

    def keys(self) -> list[str]:
        return self.registry.keys()

    def failed_keys(self) -> list[str]:
        return self.registry.failed_keys()

    def sites(self) -> list[tuple[str, str]]:
        return [(entry.key, entry.site) for entry in self.registry.entries()]

    def actions(self, key: str | None = None) -> list[tuple[str, ActionInfo]]:
        return [(entry.key, action) for entry in self._entries(key) for action in entry.actions]

    def types(self, key: str | None = None) -> list[tuple[str, TypeInfo]]:
        """Declared types plus the primitives and sentinel something refers to."""
        result = []
        for entry in self._entries(key):
            referenced = _referenced_types(entry)
            for handle in entry.catalog:
                if handle.is_primitive or handle is UNKNOWN_TYPE:
                    if handle not in referenced:
                        continue
                result.append((entry.key, handle))
        return result

    def composite_types(self, key: str | None = None) -> list[tuple[str, TypeInfo]]:
        """Types that need their own block definition."""
        return [(k, t) for k, t in self.types(key) if not t.is_primitive and t is not UNKNOWN_TYPE]

    def snapshot(self, key: str | None = None) -> ModelSnapshot:
        return ModelSnapshot(
            keys=self.keys() if key is None else [k for k in self.keys() if k == key],
            failed_keys=self.failed_keys(),
            actions=[ActionView.from_action(k, a) for k, a in self.actions(key)],
            types=[TypeView.from_type(k, t) for k, t in self.types(key)],
        )
