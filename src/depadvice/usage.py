"""Merge per-variant usage reports into per-dependency usage sets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from depadvice.model import Coordinates, DependencyTraceReport, Trace, Usage

logger = logging.getLogger(__name__)

UsageMap = Mapping[Coordinates, frozenset[Usage]]


class UsageBuilder:
    """Collect the usages of every dependency across all variant reports.

    Usages for the same coordinates are unioned.  Dependencies that appear in
    no report get no entry at all.
    """

    def __init__(self, reports: Iterable[DependencyTraceReport]) -> None:
        dependency_usages: dict[Coordinates, set[Usage]] = {}
        annotation_processing_usages: dict[Coordinates, set[Usage]] = {}

        report_count = 0
        for report in reports:
            report_count += 1
            for trace in report.dependencies:
                _add(dependency_usages, report, trace)
            for trace in report.annotation_processors:
                _add(annotation_processing_usages, report, trace)

        self.dependency_usages: UsageMap = _freeze(dependency_usages)
        self.annotation_processing_usages: UsageMap = _freeze(
            annotation_processing_usages
        )

        logger.debug(
            "Usages: %d reports, %d dependencies, %d annotation processors",
            report_count,
            len(self.dependency_usages),
            len(self.annotation_processing_usages),
        )


def _add(
    usages: dict[Coordinates, set[Usage]], report: DependencyTraceReport, trace: Trace
) -> None:
    usage = Usage(
        variant=report.variant,
        bucket=trace.bucket,
        reasons=trace.reasons,
        build_type=report.build_type,
        flavor=report.flavor,
    )
    usages.setdefault(trace.coordinates, set()).add(usage)


def _freeze(
    usages: dict[Coordinates, set[Usage]],
) -> dict[Coordinates, frozenset[Usage]]:
    return {coords: frozenset(usages[coords]) for coords in sorted(usages)}
