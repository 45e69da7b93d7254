"""Command-line interface for depadvice."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from depadvice.config import load_config
from depadvice.pipeline import run


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="depadvice",
        description=(
            "Compute add/remove/change advice for a project's"
            " dependency declarations."
        ),
    )
    parser.add_argument(
        "project_path",
        help="Project path of the analyzed project, e.g. ':app'",
    )
    parser.add_argument(
        "--reports",
        type=Path,
        nargs="+",
        required=True,
        help="Per-variant usage reports (JSON or YAML)",
    )
    parser.add_argument(
        "--graphs",
        type=Path,
        nargs="+",
        required=True,
        help="Per-variant dependency graph views (JSON or YAML)",
    )
    parser.add_argument(
        "--declarations",
        type=Path,
        required=True,
        help="Current dependency declarations (JSON or YAML)",
    )
    parser.add_argument(
        "--redundant-plugins",
        type=Path,
        default=None,
        help="Externally computed redundant-plugin advice",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("build/depadvice"),
        help="Directory for the output files (default: build/depadvice)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("."),
        help="Directory holding .depadvice.toml or pyproject.toml (default: .)",
    )
    parser.add_argument(
        "--kapt",
        action="store_true",
        default=None,
        help="The kapt annotation-processing plugin is applied",
    )
    parser.add_argument(
        "--no-ignore-ktx",
        action="store_false",
        dest="ignore_ktx",
        default=None,
        help="Do not bundle -ktx artifacts with their base artifact",
    )
    parser.add_argument(
        "--source-set",
        action="append",
        dest="source_sets",
        default=None,
        help="A supported source set; may be repeated (default: main, test)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("depadvice").setLevel(logging.DEBUG)

    config = load_config(args.config_dir).override(
        kapt=args.kapt,
        ignore_ktx=args.ignore_ktx,
        supported_source_sets=(
            frozenset(args.source_sets) if args.source_sets else None
        ),
    )

    run(
        args.project_path,
        reports=args.reports,
        graphs=args.graphs,
        declarations=args.declarations,
        output_dir=args.output_dir,
        config=config,
        redundant_plugins=args.redundant_plugins,
    )
