"""Orchestrator: load → compute → write."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from depadvice.advice import AdviceResult, compute_advice
from depadvice.config import AdviceConfig
from depadvice.reports import (
    ReportError,
    declarations_from_list,
    dump_json,
    graph_view_from_dict,
    load_document,
    plugin_advice_from_list,
    project_advice_to_dict,
    trace_report_from_dict,
    usages_to_dict,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADVICE_FILE = "advice.json"
DEPENDENCY_USAGES_FILE = "dependency-usages.json"
ANNOTATION_PROCESSOR_USAGES_FILE = "annotation-processor-usages.json"
BUNDLED_TRACES_FILE = "bundled-traces.json"


def _as_list(document: object) -> list:
    """Documents may hold a single record or a list of them."""
    if document is None:
        return []
    if isinstance(document, list):
        return document
    return [document]


def _load_records(path: Path, parse: Callable[[Any], T]) -> list[T]:
    try:
        return [parse(item) for item in _as_list(load_document(path))]
    except ReportError as e:
        if e.path is None:
            raise ReportError(path, str(e)) from e
        raise


def run(
    project_path: str,
    *,
    reports: Sequence[Path],
    graphs: Sequence[Path],
    declarations: Path,
    output_dir: Path,
    config: AdviceConfig | None = None,
    redundant_plugins: Path | None = None,
) -> AdviceResult:
    """Run the full advice pipeline and write its outputs to *output_dir*."""
    config = config or AdviceConfig()

    try:
        trace_reports = [
            r for path in reports for r in _load_records(path, trace_report_from_dict)
        ]
        graph_views = [
            g
            for path in graphs
            for g in _load_records(
                path, lambda item: graph_view_from_dict(item, project_path)
            )
        ]
        current_declarations = declarations_from_list(
            _load_records(declarations, lambda item: item)
        )
        plugin_facts = (
            plugin_advice_from_list(_load_records(redundant_plugins, lambda item: item))
            if redundant_plugins is not None
            else frozenset()
        )
    except ReportError as e:
        logger.error("Could not load inputs: %s", e)
        sys.exit(1)

    logger.debug(
        "Project: %s, %d reports, %d graph views, %d declarations",
        project_path,
        len(trace_reports),
        len(graph_views),
        len(current_declarations),
    )

    result = compute_advice(
        project_path,
        trace_reports,
        graph_views,
        current_declarations,
        config.bundle_rules,
        config.supported_source_sets,
        ignore_ktx=config.ignore_ktx,
        is_kapt_applied=config.kapt,
        redundant_plugins=plugin_facts,
    )

    dump_json(project_advice_to_dict(result.project_advice), output_dir / ADVICE_FILE)
    dump_json(
        usages_to_dict(result.dependency_usages),
        output_dir / DEPENDENCY_USAGES_FILE,
    )
    dump_json(
        usages_to_dict(result.annotation_processor_usages),
        output_dir / ANNOTATION_PROCESSOR_USAGES_FILE,
    )
    dump_json(list(result.bundled_traces), output_dir / BUNDLED_TRACES_FILE)

    logger.info(
        "Generated advice for %s in %s (%d changes)",
        project_path,
        output_dir,
        len(result.project_advice.dependency_advice),
    )
    return result
