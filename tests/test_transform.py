import random

from depadvice.model import Advice, Bucket, Declaration, SourceSetKind
from depadvice.transform import StandardTransform, reduce_bucket

from tests.helpers import module, usage

A = module("com.a:a")
SUPPORTED = {"main", "test"}


def _reduce(usages, declarations=(), supported=SUPPORTED, kapt=False):
    decls = [Declaration(A.identifier, c) for c in declarations]
    return StandardTransform(A, decls, supported, kapt).reduce(usages)


def test_api_usage_changes_implementation_declaration() -> None:
    assert _reduce({usage(Bucket.API, "debug")}, ["implementation"]) == (
        Advice.of_change(A, "implementation", "api"),
    )


def test_undeclared_usage_is_added() -> None:
    assert _reduce({usage(Bucket.IMPL, "release")}) == (
        Advice.of_add(A, "implementation"),
    )


def test_matching_declaration_yields_no_advice() -> None:
    assert _reduce({usage(Bucket.IMPL, "debug")}, ["implementation"]) == ()
    both = {usage(Bucket.API, "debug"), usage(Bucket.API, "release")}
    assert _reduce(both, ["api"]) == ()


def test_unused_declaration_is_removed() -> None:
    usages = {usage(Bucket.NONE, "debug"), usage(Bucket.NONE, "release")}
    assert _reduce(usages, ["implementation"]) == (
        Advice.of_remove(A, "implementation"),
    )


def test_usage_in_one_variant_wins_over_absence_in_another() -> None:
    usages = {usage(Bucket.NONE, "debug"), usage(Bucket.API, "release")}

    assert _reduce(usages, ["implementation"]) == (
        Advice.of_change(A, "implementation", "api"),
    )
    assert _reduce(usages, ["api"]) == ()
    assert not any(a.is_remove() for a in _reduce(usages, ["implementation"]))


def test_most_permissive_bucket_wins() -> None:
    usages = [
        usage(Bucket.IMPL, "debug"),
        usage(Bucket.API, "release"),
        usage(Bucket.NONE, "staging"),
    ]
    assert reduce_bucket(usages, SourceSetKind.MAIN) is Bucket.API
    assert reduce_bucket([], SourceSetKind.MAIN) is Bucket.NONE
    # test sources have no consumers
    assert reduce_bucket([usage(Bucket.API, "test")], SourceSetKind.TEST) is Bucket.IMPL


def test_unused_dependency_without_declaration_yields_nothing() -> None:
    assert _reduce({usage(Bucket.NONE, "debug")}) == ()


def test_compile_only_and_runtime_only_are_left_alone() -> None:
    assert _reduce({usage(Bucket.NONE)}, ["compileOnly"]) == ()
    assert _reduce({usage(Bucket.API)}, ["runtimeOnly"]) == ()
    assert _reduce({usage(Bucket.COMPILE_ONLY)}) == ()
    assert _reduce({usage(Bucket.RUNTIME_ONLY)}) == ()


def test_implementation_used_only_at_compile_time_changes() -> None:
    assert _reduce({usage(Bucket.COMPILE_ONLY)}, ["implementation"]) == (
        Advice.of_change(A, "implementation", "compileOnly"),
    )


def test_redundant_double_declaration_is_removed() -> None:
    assert _reduce({usage(Bucket.API)}, ["api", "implementation"]) == (
        Advice.of_remove(A, "implementation"),
    )


def test_conflicting_declarations_resolve_deterministically() -> None:
    advice = _reduce({usage(Bucket.COMPILE_ONLY)}, ["implementation", "api"])

    assert advice == (
        Advice.of_change(A, "api", "compileOnly"),
        Advice.of_remove(A, "implementation"),
    )


def test_unsupported_source_set_gives_no_advice() -> None:
    assert _reduce({usage(Bucket.IMPL, "test")}, supported={"main"}) == ()
    assert _reduce({usage(Bucket.IMPL, "debug")}, supported={"test"}) == ()


def test_declarations_on_unsupported_source_sets_are_ignored() -> None:
    assert _reduce({usage(Bucket.NONE)}, ["releaseImplementation"]) == ()


def test_variant_declaration_changes_within_its_variant() -> None:
    advice = _reduce(
        {usage(Bucket.API, "debug")},
        ["debugImplementation"],
        supported={"main", "debug"},
    )
    assert advice == (Advice.of_change(A, "debugImplementation", "debugApi"),)


def test_test_only_usage_moves_declaration_to_test() -> None:
    usages = {usage(Bucket.NONE, "debug"), usage(Bucket.IMPL, "testDebug")}
    assert _reduce(usages, ["implementation"]) == (
        Advice.of_change(A, "implementation", "testImplementation"),
    )


def test_main_declaration_is_visible_to_tests() -> None:
    usages = {usage(Bucket.IMPL, "debug"), usage(Bucket.IMPL, "testDebug")}
    assert _reduce(usages, ["implementation"]) == ()


def test_test_usage_is_added_to_test_configuration() -> None:
    assert _reduce({usage(Bucket.API, "testDebug")}) == (
        Advice.of_add(A, "testImplementation"),
    )
    assert _reduce({usage(Bucket.IMPL, "debugUnitTest")}) == (
        Advice.of_add(A, "testImplementation"),
    )


def test_test_declaration_kept_when_used_in_main() -> None:
    usages = {usage(Bucket.IMPL, "debug"), usage(Bucket.NONE, "testDebug")}
    assert _reduce(usages, ["implementation", "testImplementation"]) == ()


def test_processor_added_to_kapt_when_applied() -> None:
    used = {usage(Bucket.ANNOTATION_PROCESSOR)}

    assert _reduce(used, kapt=True) == (Advice.of_add(A, "kapt"),)
    assert _reduce(used) == (Advice.of_add(A, "annotationProcessor"),)
    assert _reduce({usage(Bucket.ANNOTATION_PROCESSOR, "testDebug")}, kapt=True) == (
        Advice.of_add(A, "kaptTest"),
    )


def test_processor_declarations() -> None:
    used = {usage(Bucket.ANNOTATION_PROCESSOR)}
    unused = {usage(Bucket.NONE)}

    assert _reduce(used, ["annotationProcessor"], kapt=True) == ()
    assert _reduce(used, ["kapt"], kapt=True) == ()
    # kapt and annotationProcessor declarations satisfy each other
    assert _reduce(used, ["kapt"]) == ()
    assert _reduce(unused, ["kapt"], kapt=True) == (Advice.of_remove(A, "kapt"),)


def test_other_dependencies_declarations_are_ignored() -> None:
    other = Declaration("com.other:other", "implementation")
    advice = StandardTransform(A, [other], SUPPORTED).reduce({usage(Bucket.IMPL)})
    assert advice == (Advice.of_add(A, "implementation"),)


def test_reduce_is_deterministic() -> None:
    usages = [
        usage(Bucket.COMPILE_ONLY, "debug"),
        usage(Bucket.NONE, "release"),
        usage(Bucket.IMPL, "testDebug"),
    ]
    configs = ["implementation", "api", "testImplementation", "compileOnly"]
    expected = _reduce(usages, configs)

    rng = random.Random(7)
    for _ in range(5):
        rng.shuffle(usages)
        rng.shuffle(configs)
        assert _reduce(usages, configs) == expected
