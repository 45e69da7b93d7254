"""Mapping between configuration names, buckets and source sets."""

from __future__ import annotations

from collections.abc import Collection

from depadvice.model import Bucket, SourceSetKind, Variant

# Suffixes of configurations that declare regular (non-processor) dependencies.
# compileOnlyApi must be checked before api.
_MAIN_SUFFIXES = (
    "compileOnlyApi",
    "api",
    "implementation",
    "compileOnly",
    "runtimeOnly",
)

_PROCESSOR_SUFFIX = "annotationProcessor"
_KAPT_PREFIX = "kapt"

MAIN_SOURCE_SET = SourceSetKind.MAIN.base_name


def is_for_regular_dependency(configuration_name: str) -> bool:
    lowered = configuration_name.lower()
    return any(lowered.endswith(suffix.lower()) for suffix in _MAIN_SUFFIXES)


def is_for_annotation_processor(configuration_name: str) -> bool:
    lowered = configuration_name.lower()
    return is_kapt(configuration_name) or lowered.endswith(_PROCESSOR_SUFFIX.lower())


def is_kapt(configuration_name: str) -> bool:
    return configuration_name.startswith(_KAPT_PREFIX)


def _decapitalize(value: str) -> str:
    return value[:1].lower() + value[1:]


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def _slug(configuration_name: str) -> str | None:
    """Return the source-set part of *configuration_name*.

    ``implementation`` -> ``main``, ``debugApi`` -> ``debug``,
    ``testAnnotationProcessor`` -> ``test``, ``kaptTest`` -> ``test``.
    """
    if configuration_name.startswith(_KAPT_PREFIX):
        rest = configuration_name[len(_KAPT_PREFIX) :]
        return _decapitalize(rest) if rest else MAIN_SOURCE_SET

    lowered = configuration_name.lower()
    for suffix in (_PROCESSOR_SUFFIX, *_MAIN_SUFFIXES):
        if lowered.endswith(suffix.lower()):
            if len(configuration_name) == len(suffix):
                return MAIN_SOURCE_SET
            return configuration_name[: -len(suffix)]
    return None


def variant_from(
    configuration_name: str, supported_source_sets: Collection[str]
) -> Variant | None:
    """Return the variant a configuration declares dependencies for.

    Returns None for unknown configurations and for source sets that are not
    in *supported_source_sets*.
    """
    slug = _slug(configuration_name)
    if slug is None or slug not in supported_source_sets:
        return None
    return Variant.of(slug)


def configuration_name(bucket: Bucket, variant: Variant, *, kapt: bool = False) -> str:
    """Return the configuration to declare a *bucket* dependency on *variant*."""
    if bucket is Bucket.NONE:
        raise ValueError("An unused dependency has no configuration")

    if bucket is Bucket.ANNOTATION_PROCESSOR and kapt:
        if variant.name == MAIN_SOURCE_SET:
            return _KAPT_PREFIX
        return f"{_KAPT_PREFIX}{_capitalize(variant.name)}"

    if variant.name == MAIN_SOURCE_SET:
        return bucket.value
    return f"{variant.name}{_capitalize(bucket.value)}"
