"""Orchestrator: usages + graphs + declarations → project advice."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass

from depadvice import configurations
from depadvice.bundles import BundleRules, Bundles
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
    Usage,
)
from depadvice.transform import StandardTransform
from depadvice.usage import UsageBuilder

logger = logging.getLogger(__name__)


class DependencyAdviceBuilder:
    """Run the standard transform over every dependency and filter by bundle.

    ``bundled_traces`` holds the identities of dependencies whose advice was
    dropped because of a bundle.
    """

    def __init__(
        self,
        bundles: Bundles,
        dependency_usages: Mapping[Coordinates, frozenset[Usage]],
        annotation_processor_usages: Mapping[Coordinates, frozenset[Usage]],
        declarations: Collection[Declaration],
        supported_source_sets: Collection[str],
        is_kapt_applied: bool,
    ) -> None:
        self._bundles = bundles
        self._dependency_usages = dependency_usages
        self._annotation_processor_usages = annotation_processor_usages
        self._declarations = declarations
        self._supported_source_sets = frozenset(supported_source_sets)
        self._is_kapt_applied = is_kapt_applied

        self.bundled_traces: set[str] = set()
        self.advice: tuple[Advice, ...] = tuple(
            sorted(
                self._compute_dependency_advice()
                + self._compute_annotation_processor_advice()
            )
        )

    def _compute_dependency_advice(self) -> list[Advice]:
        declarations = [
            d
            for d in self._declarations
            if configurations.is_for_regular_dependency(d.configuration_name)
        ]
        raw = [
            advice
            for coordinates, usages in self._dependency_usages.items()
            for advice in StandardTransform(
                coordinates, declarations, self._supported_source_sets
            ).reduce(usages)
        ]

        kept: list[Advice] = []
        for advice in raw:
            if self._is_bundled(advice):
                self.bundled_traces.add(advice.coordinates.gav())
                logger.debug(
                    "Bundled: dropping %s advice for %s",
                    advice.kind.value,
                    advice.coordinates.gav(),
                )
            else:
                kept.append(advice)
        return kept

    def _is_bundled(self, advice: Advice) -> bool:
        if advice.is_add():
            return self._bundles.has_parent_in_bundle(advice.coordinates)
        if advice.is_remove():
            return self._bundles.has_used_child(advice.coordinates)
        return False

    # nb: no bundle support for annotation processors
    def _compute_annotation_processor_advice(self) -> list[Advice]:
        declarations = [
            d
            for d in self._declarations
            if configurations.is_for_annotation_processor(d.configuration_name)
        ]
        return [
            advice
            for coordinates, usages in self._annotation_processor_usages.items()
            for advice in StandardTransform(
                coordinates,
                declarations,
                self._supported_source_sets,
                self._is_kapt_applied,
            ).reduce(usages)
        ]


class PluginAdviceBuilder:
    def __init__(
        self,
        is_kapt_applied: bool,
        redundant_plugins: Iterable[PluginAdvice],
        annotation_processor_usages: Mapping[Coordinates, frozenset[Usage]],
    ) -> None:
        plugin_advice = set(redundant_plugins)

        if is_kapt_applied:
            used_procs = [
                coordinates
                for coordinates, usages in annotation_processor_usages.items()
                if any(u.bucket is Bucket.ANNOTATION_PROCESSOR for u in usages)
            ]
            # kapt is unused
            if not used_procs:
                plugin_advice.add(PluginAdvice.redundant_kapt())

        self.plugin_advice: tuple[PluginAdvice, ...] = tuple(sorted(plugin_advice))


@dataclass(frozen=True)
class AdviceResult:
    """Everything one advice computation produces."""

    project_advice: ProjectAdvice
    dependency_usages: Mapping[Coordinates, frozenset[Usage]]
    annotation_processor_usages: Mapping[Coordinates, frozenset[Usage]]
    bundled_traces: tuple[str, ...]


def compute_advice(
    project_path: str,
    reports: Iterable[DependencyTraceReport],
    graph_views: Iterable[DependencyGraphView],
    declarations: Collection[Declaration],
    bundle_rules: BundleRules,
    supported_source_sets: Collection[str],
    *,
    ignore_ktx: bool = True,
    is_kapt_applied: bool = False,
    redundant_plugins: Iterable[PluginAdvice] | None = None,
) -> AdviceResult:
    """Compute the advice for the project at *project_path*."""
    project_node = ProjectCoordinates(project_path)
    dependency_graph = {view.name: view for view in graph_views}

    usage_builder = UsageBuilder(reports)
    dependency_usages = usage_builder.dependency_usages
    annotation_processor_usages = usage_builder.annotation_processing_usages

    bundles = Bundles.of(
        project_node=project_node,
        dependency_graph=dependency_graph,
        bundle_rules=bundle_rules,
        dependency_usages=dependency_usages,
        ignore_ktx=ignore_ktx,
    )

    dependency_advice_builder = DependencyAdviceBuilder(
        bundles=bundles,
        dependency_usages=dependency_usages,
        annotation_processor_usages=annotation_processor_usages,
        declarations=declarations,
        supported_source_sets=supported_source_sets,
        is_kapt_applied=is_kapt_applied,
    )

    plugin_advice_builder = PluginAdviceBuilder(
        is_kapt_applied=is_kapt_applied,
        redundant_plugins=redundant_plugins or (),
        annotation_processor_usages=annotation_processor_usages,
    )

    project_advice = ProjectAdvice(
        project_path=project_path,
        dependency_advice=dependency_advice_builder.advice,
        plugin_advice=plugin_advice_builder.plugin_advice,
    )

    logger.debug(
        "%s: %d dependency advice, %d plugin advice, %d bundled",
        project_path,
        len(project_advice.dependency_advice),
        len(project_advice.plugin_advice),
        len(dependency_advice_builder.bundled_traces),
    )

    return AdviceResult(
        project_advice=project_advice,
        dependency_usages=dependency_usages,
        annotation_processor_usages=annotation_processor_usages,
        bundled_traces=tuple(sorted(dependency_advice_builder.bundled_traces)),
    )
