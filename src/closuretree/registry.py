"""Model definitions and hierarchy declaration."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping

from closuretree.config.policies import HierarchyDefaultsPolicy
from closuretree.entities.core import HierarchyDescriptor, ModelDescriptor
from closuretree.errors import ClosureTreeError, HierarchyError
from closuretree.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)


def _uppercase_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def deduce_parent_accessor(field_name: str, primary_key: str) -> str:
    """Derive the parent accessor from a foreign key field name.

    ``parentId`` -> ``parent``, ``parent_id`` -> ``parent``; any other name is
    used as is.
    """

    camel_suffix = _uppercase_first(primary_key)
    snake_suffix = f"_{primary_key}"
    if field_name.endswith(camel_suffix) and len(field_name) > len(camel_suffix):
        return field_name[: -len(camel_suffix)]
    if field_name.endswith(snake_suffix) and len(field_name) > len(snake_suffix):
        return field_name[: -len(snake_suffix)]
    return field_name


def _normalize_options(options: Any) -> Dict[str, Any] | None:
    if options is None or options is False:
        return None
    if options is True:
        return {}
    if isinstance(options, Mapping):
        normalized = dict(options)
        if "as" in normalized:
            normalized["as_"] = normalized.pop("as")
        return normalized
    raise HierarchyError(f"hierarchy options must be a boolean or a mapping, got {type(options).__name__}")


class ModelRegistry:
    """Holds the model descriptors that inclusion plans refer to by name."""

    def __init__(self, defaults: HierarchyDefaultsPolicy | None = None) -> None:
        self._defaults = defaults or HierarchyDefaultsPolicy()
        self._models: Dict[str, ModelDescriptor] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._models)

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._models.values())

    @property
    def defaults(self) -> HierarchyDefaultsPolicy:
        return self._defaults

    def get(self, name: str) -> ModelDescriptor:
        try:
            return self._models[name]
        except KeyError:
            raise ClosureTreeError(f"model '{name}' is not defined") from None

    def define(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        *,
        primary_key: str = "id",
        hierarchy: bool | Mapping[str, Any] | None = None,
    ) -> ModelDescriptor:
        """Register a model, declaring its hierarchy from options or a field.

        A hierarchy may be declared either through ``hierarchy`` or by setting
        ``hierarchy`` on exactly one attribute definition, which then becomes
        the foreign key.
        """

        if name in self._models:
            raise ClosureTreeError(f"model '{name}' is already defined")

        options = _normalize_options(hierarchy)
        for field_name, field in (attributes or {}).items():
            if not isinstance(field, Mapping) or not field.get("hierarchy"):
                continue
            if options is not None:
                raise HierarchyError(
                    "You cannot define hierarchy on two attributes, or an attribute "
                    f"and the model options, in '{name}'"
                )
            options = _normalize_options(field["hierarchy"])
            options["foreign_key"] = field_name
            key = options.get("primary_key") or primary_key
            if not options.get("as_"):
                options["as_"] = deduce_parent_accessor(field_name, key)

        descriptor = None
        if options is not None:
            descriptor = self._build_descriptor(name, primary_key, options)
        model = ModelDescriptor(name=name, primary_key=primary_key, hierarchy=descriptor)
        self._models[model.name] = model
        _LOGGER.debug(
            "Defined model",
            model=model.name,
            hierarchical=model.is_hierarchy,
        )
        return model

    def _build_descriptor(
        self, name: str, primary_key: str, options: Dict[str, Any]
    ) -> HierarchyDescriptor:
        defaults = self._defaults
        key = options.get("primary_key") or primary_key
        parent_as = options.get("as_") or defaults.as_
        values: Dict[str, Any] = {
            "primary_key": key,
            "as_": parent_as,
            "foreign_key": parent_as + _uppercase_first(key),
            "children_as": defaults.children_as,
            "ancestors_as": defaults.ancestors_as,
            "descendants_as": defaults.descendants_as,
            "level_field_name": defaults.level_field_name,
            "through_as": defaults.through_as_template.format(model=name),
            "through_key": defaults.through_key_template.format(model=name),
            "through_foreign_key": defaults.through_foreign_key,
        }
        values.update({k: v for k, v in options.items() if v is not None})
        try:
            return HierarchyDescriptor.model_validate(values)
        except ValueError as exc:
            raise HierarchyError(f"invalid hierarchy definition for '{name}': {exc}") from exc


__all__ = ["ModelRegistry", "deduce_parent_accessor"]
