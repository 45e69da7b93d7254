"""Bundles: groups of dependencies that advice treats as a single unit.

::

    :proj
    |
    B -> unused, not declared, but top of graph (added by plugin)
    |
    C -> used as API, part of bundle with B. Should not be declared!
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from depadvice.graph import DependencyGraphView
from depadvice.model import Bucket, Coordinates, Usage

logger = logging.getLogger(__name__)

KTX_SUFFIX = "-ktx"


@dataclass(frozen=True)
class BundleRules:
    """User-configured bundles: bundle name -> identifier patterns.

    A pattern must match the whole identifier (``group:artifact`` for modules,
    ``:path`` for projects). Rules are held as name-sorted pairs so that the
    value stays hashable.
    """

    rules: tuple[tuple[str, frozenset[re.Pattern[str]]], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> BundleRules:
        rules = BundleRules()
        for name, patterns in mapping.items():
            for pattern in patterns:
                rules = rules.include(name, pattern)
        return rules

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.rules)

    def include(self, name: str, regex: str) -> BundleRules:
        merged = dict(self.rules)
        merged[name] = merged.get(name, frozenset()) | {re.compile(regex)}
        return BundleRules(tuple(sorted(merged.items(), key=lambda item: item[0])))

    def include_group(self, name: str, group: str) -> BundleRules:
        return self.include(name, f"^{re.escape(group)}:.*")

    def include_dependency(self, name: str, identifier: str) -> BundleRules:
        return self.include(name, f"^{re.escape(identifier)}$")

    def matching_bundles(
        self, coordinates: Coordinates
    ) -> list[tuple[str, frozenset[re.Pattern[str]]]]:
        return [
            (name, patterns)
            for name, patterns in self.rules
            if _matches_any(patterns, coordinates.identifier)
        ]

    def __bool__(self) -> bool:
        return bool(self.rules)


def _matches_any(patterns: Iterable[re.Pattern[str]], identifier: str) -> bool:
    return any(p.fullmatch(identifier) for p in patterns)


class Bundles:
    """Read-only bundle index built by :meth:`of`.

    Each bundle is keyed by its parent, a direct child of the project node.
    Every member, the parent included, points back to that parent.
    """

    def __init__(
        self,
        parent_keyed_bundle: Mapping[Coordinates, frozenset[Coordinates]],
        parent_pointers: Mapping[Coordinates, Coordinates],
        dependency_usages: Mapping[Coordinates, frozenset[Usage]],
    ) -> None:
        self._parent_keyed_bundle = dict(parent_keyed_bundle)
        self._parent_pointers = dict(parent_pointers)
        self._dependency_usages = dependency_usages

    def has_parent_in_bundle(self, coordinates: Coordinates) -> bool:
        return coordinates in self._parent_pointers

    def has_used_child(self, coordinates: Coordinates) -> bool:
        members = self._parent_keyed_bundle.get(coordinates)
        if not members:
            return False
        return any(
            usage.bucket is not Bucket.NONE
            for member in members
            for usage in self._dependency_usages.get(member, ())
        )

    def parent_of(self, coordinates: Coordinates) -> Coordinates | None:
        return self._parent_pointers.get(coordinates)

    def members_of(self, parent: Coordinates) -> frozenset[Coordinates]:
        return self._parent_keyed_bundle.get(parent, frozenset())

    def __len__(self) -> int:
        return len(self._parent_keyed_bundle)

    @classmethod
    def of(
        cls,
        project_node: Coordinates,
        dependency_graph: (
            Mapping[str, DependencyGraphView] | Iterable[DependencyGraphView]
        ),
        bundle_rules: BundleRules,
        dependency_usages: Mapping[Coordinates, frozenset[Usage]],
        ignore_ktx: bool,
    ) -> Bundles:
        if isinstance(dependency_graph, Mapping):
            views = [dependency_graph[name] for name in sorted(dependency_graph)]
        else:
            views = sorted(dependency_graph, key=lambda v: v.name)

        builder = _BundlesBuilder()
        for view in views:
            for parent in view.children(project_node):
                rules = bundle_rules.matching_bundles(parent)

                # user-supplied bundles
                if rules:
                    reachable = sorted(view.reachable_nodes(parent))
                    for _, patterns in rules:
                        for child in reachable:
                            if _matches_any(patterns, child.identifier):
                                builder.add(parent, child)

                # ktx companions: foo-ktx bundles foo
                if ignore_ktx and parent.identifier.endswith(KTX_SUFFIX):
                    base_id = parent.identifier[: -len(KTX_SUFFIX)]
                    for child in view.children(parent):
                        if child.identifier == base_id:
                            builder.add(parent, child)
                            break

        logger.debug(
            "Bundles: %d bundles over %d views",
            len(builder.parent_keyed_bundle),
            len(views),
        )
        return cls(
            {p: frozenset(m) for p, m in builder.parent_keyed_bundle.items()},
            builder.parent_pointers,
            dependency_usages,
        )


class _BundlesBuilder:
    def __init__(self) -> None:
        self.parent_keyed_bundle: dict[Coordinates, set[Coordinates]] = {}
        self.parent_pointers: dict[Coordinates, Coordinates] = {}

    def add(self, parent: Coordinates, child: Coordinates) -> None:
        # parents point to themselves as well
        self.parent_keyed_bundle.setdefault(parent, set()).update((parent, child))
        self.parent_pointers.setdefault(parent, parent)
        self.parent_pointers.setdefault(child, parent)
