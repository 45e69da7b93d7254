import pytest

from depadvice import configurations
from depadvice.model import Bucket, SourceSetKind, Variant

SUPPORTED = {"main", "test", "debug", "androidTest"}


@pytest.mark.parametrize(
    ("configuration", "expected"),
    [
        ("implementation", Variant("main", SourceSetKind.MAIN)),
        ("api", Variant("main", SourceSetKind.MAIN)),
        ("debugImplementation", Variant("debug", SourceSetKind.MAIN)),
        ("testImplementation", Variant("test", SourceSetKind.TEST)),
        (
            "androidTestImplementation",
            Variant("androidTest", SourceSetKind.ANDROID_TEST),
        ),
        ("annotationProcessor", Variant("main", SourceSetKind.MAIN)),
        ("testAnnotationProcessor", Variant("test", SourceSetKind.TEST)),
        ("kapt", Variant("main", SourceSetKind.MAIN)),
        ("kaptTest", Variant("test", SourceSetKind.TEST)),
        ("releaseImplementation", None),
        ("classpath", None),
    ],
)
def test_variant_from(configuration: str, expected: Variant | None) -> None:
    assert configurations.variant_from(configuration, SUPPORTED) == expected


def test_regular_and_processor_configurations() -> None:
    assert configurations.is_for_regular_dependency("api")
    assert configurations.is_for_regular_dependency("testCompileOnly")
    assert not configurations.is_for_regular_dependency("annotationProcessor")
    assert not configurations.is_for_regular_dependency("kapt")

    assert configurations.is_for_annotation_processor("kapt")
    assert configurations.is_for_annotation_processor("testAnnotationProcessor")
    assert not configurations.is_for_annotation_processor("implementation")


@pytest.mark.parametrize(
    ("bucket", "variant", "kapt", "expected"),
    [
        (Bucket.IMPL, Variant("main"), False, "implementation"),
        (Bucket.API, Variant("debug"), False, "debugApi"),
        (Bucket.IMPL, Variant("test", SourceSetKind.TEST), False, "testImplementation"),
        (Bucket.ANNOTATION_PROCESSOR, Variant("main"), False, "annotationProcessor"),
        (Bucket.ANNOTATION_PROCESSOR, Variant("main"), True, "kapt"),
        (
            Bucket.ANNOTATION_PROCESSOR,
            Variant("test", SourceSetKind.TEST),
            True,
            "kaptTest",
        ),
    ],
)
def test_configuration_name(
    bucket: Bucket, variant: Variant, kapt: bool, expected: str
) -> None:
    assert configurations.configuration_name(bucket, variant, kapt=kapt) == expected


def test_unused_bucket_has_no_configuration() -> None:
    with pytest.raises(ValueError):
        configurations.configuration_name(Bucket.NONE, Variant("main"))
