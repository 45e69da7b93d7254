"""Data model for dependency usage and advice."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from functools import total_ordering


@total_ordering
@dataclass(frozen=True, eq=True)
class Coordinates:
    """Identity of a dependency (or of the project itself)."""

    identifier: str

    def gav(self) -> str:
        return self.identifier

    def _sort_key(self) -> tuple[str, str]:
        return (self.gav(), type(self).__name__)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Coordinates):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @staticmethod
    def of(value: str) -> Coordinates:
        """Parse a plain identity string.

        ``:path`` is a project, ``group:artifact[:version]`` is a module and
        anything else is treated as a flat identifier.
        """
        if value.startswith(":"):
            return ProjectCoordinates(value)
        parts = value.split(":")
        if len(parts) == 2 and all(parts):
            return ModuleCoordinates(value)
        if len(parts) == 3 and all(parts):
            return ModuleCoordinates(f"{parts[0]}:{parts[1]}", parts[2])
        return FlatCoordinates(value)


@dataclass(frozen=True, eq=True)
class ProjectCoordinates(Coordinates):
    """A project in the same build, e.g. ``:app``."""


@dataclass(frozen=True, eq=True)
class ModuleCoordinates(Coordinates):
    """An external module, ``group:artifact`` plus resolved version."""

    resolved_version: str | None = None

    def gav(self) -> str:
        if self.resolved_version:
            return f"{self.identifier}:{self.resolved_version}"
        return self.identifier


@dataclass(frozen=True, eq=True)
class IncludedBuildCoordinates(Coordinates):
    """A module substituted by a project from an included build."""

    resolved_project: str | None = None


@dataclass(frozen=True, eq=True)
class FlatCoordinates(Coordinates):
    """File dependencies and anything else without a richer identity."""


class SourceSetKind(enum.Enum):
    MAIN = "main"
    TEST = "test"
    ANDROID_TEST = "androidTest"

    @property
    def base_name(self) -> str:
        return self.value


@total_ordering
@dataclass(frozen=True)
class Variant:
    """A build variant or source set.

    For example ``debug`` (MAIN) or ``testDebug`` (TEST).
    """

    name: str
    kind: SourceSetKind = SourceSetKind.MAIN

    def base(self) -> Variant:
        return Variant(self.kind.base_name, self.kind)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            return NotImplemented
        return (self.name, self.kind.value) < (other.name, other.kind.value)

    @staticmethod
    def of(name: str) -> Variant:
        """Infer the kind from a source-set or variant name.

        Both ``testDebug`` and ``debugUnitTest`` are TEST; both
        ``androidTestDebug`` and ``debugAndroidTest`` are ANDROID_TEST.
        """
        if name.startswith("androidTest") or name.endswith("AndroidTest"):
            return Variant(name, SourceSetKind.ANDROID_TEST)
        if name.startswith("test") or name.endswith("UnitTest"):
            return Variant(name, SourceSetKind.TEST)
        return Variant(name, SourceSetKind.MAIN)


class Bucket(enum.Enum):
    """How a dependency was used by one compilation unit."""

    API = "api"
    IMPL = "implementation"
    COMPILE_ONLY = "compileOnly"
    RUNTIME_ONLY = "runtimeOnly"
    ANNOTATION_PROCESSOR = "annotationProcessor"
    NONE = "n/a"

    @property
    def is_used(self) -> bool:
        return self is not Bucket.NONE

    def matches(self, declared: Bucket | None) -> bool:
        return self is declared

    @staticmethod
    def of(configuration_name: str) -> Bucket | None:
        """Return the bucket for *configuration_name*, or None if it is not a
        dependency-declaring configuration."""
        from depadvice import configurations

        # kapt and annotationProcessor declarations share a bucket, so they
        # are interchangeable when matched against observed usage
        if configurations.is_for_annotation_processor(configuration_name):
            return Bucket.ANNOTATION_PROCESSOR
        lowered = configuration_name.lower()
        # compileOnlyApi is a compile-only declaration
        if lowered.endswith("compileonlyapi"):
            return Bucket.COMPILE_ONLY
        for bucket in (
            Bucket.API,
            Bucket.IMPL,
            Bucket.COMPILE_ONLY,
            Bucket.RUNTIME_ONLY,
        ):
            if lowered.endswith(bucket.value.lower()):
                return bucket
        return None


# Most permissive first.
BUCKET_PRECEDENCE: tuple[Bucket, ...] = (
    Bucket.API,
    Bucket.IMPL,
    Bucket.COMPILE_ONLY,
    Bucket.RUNTIME_ONLY,
    Bucket.ANNOTATION_PROCESSOR,
    Bucket.NONE,
)


@dataclass(frozen=True)
class Trace:
    """One dependency's entry in a per-variant usage report."""

    coordinates: Coordinates
    bucket: Bucket
    reasons: frozenset[str] = frozenset()


@dataclass(frozen=True)
class DependencyTraceReport:
    """Usage report for a single variant."""

    variant: Variant
    build_type: str | None = None
    flavor: str | None = None
    dependencies: frozenset[Trace] = frozenset()
    annotation_processors: frozenset[Trace] = frozenset()


@dataclass(frozen=True)
class Usage:
    """How a dependency was used in one variant."""

    variant: Variant
    bucket: Bucket
    reasons: frozenset[str] = frozenset()
    build_type: str | None = None
    flavor: str | None = None


@dataclass(frozen=True, order=True)
class Declaration:
    """A dependency as it is currently declared in the build script."""

    identifier: str
    configuration_name: str

    @property
    def bucket(self) -> Bucket | None:
        return Bucket.of(self.configuration_name)

    def variant(
        self, supported_source_sets: frozenset[str] | set[str]
    ) -> Variant | None:
        from depadvice.configurations import variant_from

        return variant_from(self.configuration_name, supported_source_sets)


class AdviceKind(enum.Enum):
    ADD = "add"
    CHANGE = "change"
    REMOVE = "remove"


@total_ordering
@dataclass(frozen=True, eq=True)
class Advice:
    """A single recommended edit to one dependency declaration."""

    coordinates: Coordinates
    from_configuration: str | None = None
    to_configuration: str | None = None

    @property
    def kind(self) -> AdviceKind:
        if self.from_configuration is None:
            return AdviceKind.ADD
        if self.to_configuration is None:
            return AdviceKind.REMOVE
        return AdviceKind.CHANGE

    @property
    def from_bucket(self) -> Bucket | None:
        if self.from_configuration is None:
            return None
        return Bucket.of(self.from_configuration)

    @property
    def to_bucket(self) -> Bucket | None:
        if self.to_configuration is None:
            return None
        return Bucket.of(self.to_configuration)

    def is_add(self) -> bool:
        return self.kind is AdviceKind.ADD

    def is_remove(self) -> bool:
        return self.kind is AdviceKind.REMOVE

    def is_change(self) -> bool:
        return self.kind is AdviceKind.CHANGE

    def _sort_key(self) -> tuple:
        return (
            self.coordinates._sort_key(),
            self.kind.value,
            self.from_configuration or "",
            self.to_configuration or "",
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Advice):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @staticmethod
    def of_add(coordinates: Coordinates, to_configuration: str) -> Advice:
        return Advice(coordinates, None, to_configuration)

    @staticmethod
    def of_remove(coordinates: Coordinates, from_configuration: str) -> Advice:
        return Advice(coordinates, from_configuration, None)

    @staticmethod
    def of_change(
        coordinates: Coordinates, from_configuration: str, to_configuration: str
    ) -> Advice:
        return Advice(coordinates, from_configuration, to_configuration)


@dataclass(frozen=True, order=True)
class PluginAdvice:
    """Advice about a build plugin rather than a dependency."""

    redundant_plugin: str
    reason: str

    @staticmethod
    def redundant_kapt() -> PluginAdvice:
        return PluginAdvice(
            redundant_plugin="kotlin-kapt",
            reason="No annotation processors detected",
        )


@dataclass(frozen=True)
class ProjectAdvice:
    """All advice computed for a single project."""

    project_path: str
    dependency_advice: tuple[Advice, ...] = ()
    plugin_advice: tuple[PluginAdvice, ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not self.dependency_advice and not self.plugin_advice
