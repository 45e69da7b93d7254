"""Load input documents and serialize results.

Inputs may be JSON or YAML; outputs are always JSON with sorted keys so that
repeated runs produce byte-identical files.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from depadvice.graph import DependencyGraphView
from depadvice.model import (
    Advice,
    Bucket,
    Coordinates,
    Declaration,
    DependencyTraceReport,
    PluginAdvice,
    ProjectAdvice,
    ProjectCoordinates,
    SourceSetKind,
    Trace,
    Usage,
    Variant,
)

logger = logging.getLogger(__name__)


class ReportError(ValueError):
    """An input document could not be read or has the wrong shape."""

    def __init__(self, path: Path | None, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def load_document(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            return json.load(f)
    except OSError as e:
        raise ReportError(path, f"could not read: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ReportError(path, f"could not parse: {e}") from e


def _variant_from(data: Mapping[str, Any]) -> Variant:
    name = data.get("variant") or SourceSetKind.MAIN.base_name
    if not isinstance(name, str):
        raise ReportError(None, f"variant must be a string, got {name!r}")
    kind = data.get("kind")
    if kind is None:
        return Variant.of(name)
    try:
        return Variant(name, SourceSetKind(kind))
    except ValueError as e:
        raise ReportError(None, f"unknown source set kind {kind!r}") from e


def _bucket_from(value: str) -> Bucket:
    for bucket in Bucket:
        if value in (bucket.name, bucket.value):
            return bucket
    raise ReportError(None, f"unknown bucket {value!r}")


def _coordinates_from(value: Any) -> Coordinates:
    if not isinstance(value, str) or not value:
        raise ReportError(
            None, f"coordinates must be a non-empty string, got {value!r}"
        )
    return Coordinates.of(value)


def _items(data: Mapping[str, Any], key: str) -> list[Any]:
    """Return ``data[key]`` as a list; absent means empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ReportError(None, f"{key} must be a list, got {value!r}")
    return value


def _trace_from(data: Any) -> Trace:
    if not isinstance(data, Mapping):
        raise ReportError(None, f"malformed trace {data!r}")
    try:
        return Trace(
            coordinates=_coordinates_from(data["coordinates"]),
            bucket=_bucket_from(data["bucket"]),
            reasons=frozenset(_items(data, "reasons")),
        )
    except (KeyError, TypeError) as e:
        raise ReportError(None, f"malformed trace {data!r}") from e


def trace_report_from_dict(data: Mapping[str, Any]) -> DependencyTraceReport:
    if not isinstance(data, Mapping):
        raise ReportError(None, "usage report must be a mapping")
    return DependencyTraceReport(
        variant=_variant_from(data),
        build_type=data.get("buildType"),
        flavor=data.get("flavor"),
        dependencies=frozenset(
            _trace_from(t) for t in _items(data, "dependencies")
        ),
        annotation_processors=frozenset(
            _trace_from(t) for t in _items(data, "annotationProcessors")
        ),
    )


def graph_view_from_dict(
    data: Mapping[str, Any], project_path: str
) -> DependencyGraphView:
    """Build a graph view from ``{"variant", "configuration", "nodes", "edges"}``.

    ``edges`` is a list of ``[from, to]`` identity pairs.
    """
    if not isinstance(data, Mapping):
        raise ReportError(None, "graph view must be a mapping")

    def node(value: Any) -> Coordinates:
        if value == project_path:
            return ProjectCoordinates(project_path)
        return _coordinates_from(value)

    edges = []
    for edge in _items(data, "edges"):
        if not isinstance(edge, list) or len(edge) != 2:
            raise ReportError(
                None, f"graph edges must be [from, to] pairs, got {edge!r}"
            )
        edges.append((node(edge[0]), node(edge[1])))

    return DependencyGraphView.from_edges(
        variant=_variant_from(data),
        configuration_name=data.get("configuration", "compileClasspath"),
        root=ProjectCoordinates(project_path),
        edges=edges,
        nodes=[node(n) for n in _items(data, "nodes")],
    )


def declarations_from_list(
    items: Iterable[Mapping[str, Any]],
) -> frozenset[Declaration]:
    try:
        return frozenset(
            Declaration(
                identifier=d["identifier"], configuration_name=d["configurationName"]
            )
            for d in items
        )
    except (KeyError, TypeError) as e:
        raise ReportError(
            None, "declarations need identifier and configurationName"
        ) from e


def plugin_advice_from_list(
    items: Iterable[Mapping[str, Any]] | None,
) -> frozenset[PluginAdvice]:
    if not items:
        return frozenset()
    try:
        return frozenset(
            PluginAdvice(redundant_plugin=p["redundantPlugin"], reason=p["reason"])
            for p in items
        )
    except (KeyError, TypeError) as e:
        raise ReportError(
            None, "plugin advice needs redundantPlugin and reason"
        ) from e


def advice_to_dict(advice: Advice) -> dict[str, Any]:
    return {
        "coordinates": advice.coordinates.gav(),
        "kind": advice.kind.value,
        "fromConfiguration": advice.from_configuration,
        "toConfiguration": advice.to_configuration,
    }


def project_advice_to_dict(project_advice: ProjectAdvice) -> dict[str, Any]:
    return {
        "projectPath": project_advice.project_path,
        "dependencyAdvice": [
            advice_to_dict(a) for a in project_advice.dependency_advice
        ],
        "pluginAdvice": [
            {"redundantPlugin": p.redundant_plugin, "reason": p.reason}
            for p in project_advice.plugin_advice
        ],
    }


def _usage_to_dict(usage: Usage) -> dict[str, Any]:
    return {
        "variant": usage.variant.name,
        "kind": usage.variant.kind.value,
        "buildType": usage.build_type,
        "flavor": usage.flavor,
        "bucket": usage.bucket.name,
        "reasons": sorted(usage.reasons),
    }


def usages_to_dict(
    usages: Mapping[Coordinates, Iterable[Usage]],
) -> dict[str, list[dict[str, Any]]]:
    """Key usages by ``gav()`` so the mapping survives serialization."""
    result: dict[str, list[dict[str, Any]]] = {}
    for coordinates in sorted(usages):
        entries = [_usage_to_dict(u) for u in usages[coordinates]]
        entries.sort(key=lambda e: (e["variant"], e["kind"], e["bucket"]))
        result.setdefault(coordinates.gav(), []).extend(entries)
    return result


def dump_json(obj: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(obj, indent=2, sort_keys=True) + "\n"
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %s", path)
