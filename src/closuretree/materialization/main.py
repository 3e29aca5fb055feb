"""Public entry points for file-based validation and materialisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from closuretree.config.settings import Settings
from closuretree.entities.core import FindOptions, ModelDescriptor
from closuretree.utils.logging import get_logger, log_timing, logging_context

from .hooks import HierarchyHooks
from .io import (
    load_find_options,
    load_models,
    load_rows,
    resolve_model,
    tree_statistics,
    write_tree,
)

_LOGGER = get_logger(module=__name__)


@dataclass(slots=True)
class MaterializationResult:
    """Outcome of :func:`materialize_file`."""

    model: ModelDescriptor
    options: FindOptions
    tree: Any
    statistics: Dict[str, int] = field(default_factory=dict)
    output_path: Path | None = None


def _load_plan(
    models_path: str | Path,
    plan_path: str | Path | None,
    model_name: str | None,
    settings: Settings,
) -> tuple[ModelDescriptor, FindOptions]:
    registry = load_models(models_path, defaults=settings.policies.hierarchy)
    model = registry.get(resolve_model(registry, model_name))
    if plan_path is None:
        options = FindOptions(hierarchy=model.is_hierarchy)
    else:
        options = load_find_options(plan_path, registry)
    return model, options


def validate_plan_file(
    models_path: str | Path,
    plan_path: str | Path | None = None,
    *,
    model_name: str | None = None,
    settings: Settings | None = None,
) -> bool:
    """Validate a plan file and return whether it requests any hierarchy."""

    cfg = settings or Settings()
    model, options = _load_plan(models_path, plan_path, model_name, cfg)
    hierarchy_exists = HierarchyHooks(model).before_find(options)
    _LOGGER.info(
        "Validated inclusion plan",
        model=model.name,
        hierarchy_exists=hierarchy_exists,
    )
    return hierarchy_exists


def materialize_file(
    rows_path: str | Path,
    models_path: str | Path,
    plan_path: str | Path | None = None,
    *,
    output_path: str | Path | None = None,
    model_name: str | None = None,
    rich: bool = False,
    settings: Settings | None = None,
) -> MaterializationResult:
    """Load fetched rows and convert them into trees following the plan.

    When the plan is omitted the root model's rows are treated as one flat
    hierarchy.
    """

    cfg = settings or Settings()
    policy = cfg.policies.materialization
    model, options = _load_plan(models_path, plan_path, model_name, cfg)
    hooks = HierarchyHooks(model)

    if policy.validate_plan:
        hooks.before_find(options)
    else:
        options.hierarchy_exists = True

    rows = load_rows(rows_path, rich=rich, model_name=model.name)
    with logging_context(step="materialize"), log_timing("materialize", logger_=_LOGGER, model=model.name):
        hooks.after_find(rows, options)

    statistics: Dict[str, int] = {}
    if model.hierarchy is not None:
        statistics = tree_statistics(rows, model.hierarchy.children_as)

    written = None
    if output_path is not None:
        written = write_tree(
            rows,
            output_path,
            indent=policy.indent,
            sort_keys=policy.sort_keys,
        )

    _LOGGER.info(
        "Materialisation completed",
        model=model.name,
        output=str(written) if written else None,
        **statistics,
    )
    return MaterializationResult(
        model=model,
        options=options,
        tree=rows,
        statistics=statistics,
        output_path=written,
    )


__all__ = ["MaterializationResult", "materialize_file", "validate_plan_file"]
