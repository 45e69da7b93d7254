"""Per-dependency advice: reconcile observed usage with current declarations."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from depadvice import configurations
from depadvice.model import (
    BUCKET_PRECEDENCE,
    Advice,
    Bucket,
    Coordinates,
    Declaration,
    SourceSetKind,
    Usage,
    Variant,
)

logger = logging.getLogger(__name__)

# Declarations on these buckets are never removed or changed, and never added.
_UNTOUCHED = frozenset({Bucket.COMPILE_ONLY, Bucket.RUNTIME_ONLY})

# Main-source dependencies on these buckets are on the test classpaths too.
_VISIBLE_TO_TEST_SOURCE = frozenset({Bucket.API, Bucket.IMPL})


def reduce_bucket(usages: Iterable[Usage], kind: SourceSetKind) -> Bucket:
    """Collapse the usages of one source-set kind to a single bucket.

    The most permissive bucket wins, so any observed use outranks absence of
    use in another variant.
    """
    observed = {usage.bucket for usage in usages}
    bucket = next((b for b in BUCKET_PRECEDENCE if b in observed), Bucket.NONE)
    # nothing consumes a test source set's ABI
    if bucket is Bucket.API and kind is not SourceSetKind.MAIN:
        return Bucket.IMPL
    return bucket


class StandardTransform:
    """Compute the advice for a single dependency."""

    def __init__(
        self,
        coordinates: Coordinates,
        declarations: Collection[Declaration],
        supported_source_sets: Collection[str],
        is_kapt_applied: bool = False,
    ) -> None:
        self.coordinates = coordinates
        self.declarations = declarations
        self.supported_source_sets = frozenset(supported_source_sets)
        self.is_kapt_applied = is_kapt_applied

    def reduce(self, usages: Iterable[Usage]) -> tuple[Advice, ...]:
        usages_by_kind: dict[SourceSetKind, list[Usage]] = {}
        for usage in usages:
            usages_by_kind.setdefault(usage.variant.kind, []).append(usage)

        declarations_by_kind: dict[
            SourceSetKind, list[tuple[Declaration, Variant]]
        ] = {}
        for declaration in sorted(self._own_declarations()):
            variant = declaration.variant(self.supported_source_sets)
            if variant is None or declaration.bucket is None:
                logger.debug(
                    "%s: ignoring declaration on unsupported configuration %s",
                    self.coordinates.gav(),
                    declaration.configuration_name,
                )
                continue
            declarations_by_kind.setdefault(variant.kind, []).append(
                (declaration, variant)
            )

        main_bucket = reduce_bucket(
            usages_by_kind.get(SourceSetKind.MAIN, ()), SourceSetKind.MAIN
        )

        advice: set[Advice] = set()
        for kind in SourceSetKind:
            kind_usages = usages_by_kind.get(kind, [])
            kind_declarations = declarations_by_kind.get(kind, [])
            if not kind_usages and not kind_declarations:
                continue
            if kind is SourceSetKind.MAIN:
                bucket = main_bucket
            else:
                bucket = reduce_bucket(kind_usages, kind)
            self._compute_advice(advice, kind, bucket, kind_declarations, main_bucket)

        return tuple(sorted(_simplify(advice)))

    def _own_declarations(self) -> list[Declaration]:
        identifier = self.coordinates.identifier
        return [d for d in self.declarations if d.identifier == identifier]

    def _remove(self, advice: set[Advice], declaration: Declaration) -> None:
        advice.add(Advice.of_remove(self.coordinates, declaration.configuration_name))

    def _compute_advice(
        self,
        advice: set[Advice],
        kind: SourceSetKind,
        bucket: Bucket,
        declarations: list[tuple[Declaration, Variant]],
        main_bucket: Bucket,
    ) -> None:
        removable = [(d, v) for d, v in declarations if d.bucket not in _UNTOUCHED]

        if not declarations:
            self._maybe_add(advice, kind, bucket, main_bucket)
            return

        if not bucket.is_used:
            if kind is not SourceSetKind.MAIN and main_bucket.is_used:
                # used elsewhere; leave the declaration alone
                return
            for declaration, _ in removable:
                self._remove(advice, declaration)
            return

        matching = [d for d, _ in declarations if bucket.matches(d.bucket)]
        if matching:
            # anything else is a redundant double declaration
            for declaration, _ in removable:
                if declaration not in matching:
                    self._remove(advice, declaration)
            return

        if not removable:
            return

        (first, first_variant), *rest = removable
        advice.add(
            Advice.of_change(
                self.coordinates,
                first.configuration_name,
                self._configuration_for(bucket, first_variant),
            )
        )
        for declaration, _ in rest:
            self._remove(advice, declaration)

    def _maybe_add(
        self,
        advice: set[Advice],
        kind: SourceSetKind,
        bucket: Bucket,
        main_bucket: Bucket,
    ) -> None:
        if not bucket.is_used or bucket in _UNTOUCHED:
            return
        if (
            kind is not SourceSetKind.MAIN
            and bucket in _VISIBLE_TO_TEST_SOURCE
            and main_bucket in _VISIBLE_TO_TEST_SOURCE
        ):
            return

        variant = Variant(kind.base_name, kind)
        if variant.name not in self.supported_source_sets:
            logger.debug(
                "%s: no supported source set for %s usage on %s",
                self.coordinates.gav(),
                bucket.value,
                variant.name,
            )
            return
        configuration = self._configuration_for(bucket, variant)
        advice.add(Advice.of_add(self.coordinates, configuration))

    def _configuration_for(self, bucket: Bucket, variant: Variant) -> str:
        return configurations.configuration_name(
            bucket, variant, kapt=self.is_kapt_applied
        )


def _simplify(advice: set[Advice]) -> set[Advice]:
    """Fold a lone remove-plus-add pair into a single change."""
    adds = [a for a in advice if a.is_add()]
    removes = [a for a in advice if a.is_remove()]
    if len(adds) != 1 or len(removes) != 1:
        return advice

    add, remove = adds[0], removes[0]
    simplified = advice - {add, remove}
    simplified.add(
        Advice.of_change(
            add.coordinates, remove.from_configuration, add.to_configuration
        )
    )
    return simplified
