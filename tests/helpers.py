from depadvice.graph import DependencyGraphView
from depadvice.model import (
    Bucket,
    Coordinates,
    ModuleCoordinates,
    ProjectCoordinates,
    Usage,
    Variant,
)

PROJECT = ProjectCoordinates(":app")


def module(identifier: str, version: str = "1.0") -> ModuleCoordinates:
    return ModuleCoordinates(identifier, version)


def usage(bucket: Bucket, variant: str = "debug") -> Usage:
    return Usage(variant=Variant.of(variant), bucket=bucket)


def view(
    edges: list[tuple[Coordinates, Coordinates]],
    variant: str = "debug",
    configuration: str = "compileClasspath",
) -> DependencyGraphView:
    return DependencyGraphView.from_edges(
        Variant.of(variant), configuration, PROJECT, edges
    )
