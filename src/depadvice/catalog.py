"""Derive bundle rules from a Gradle version catalog (libs.versions.toml)."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from depadvice.bundles import BundleRules

logger = logging.getLogger(__name__)


def _parse_version_catalog(
    catalog_path: Path,
) -> tuple[
    dict[str, str],  # library alias -> "group:artifact"
    dict[str, list[str]],  # bundle name -> [library aliases]
]:
    libraries: dict[str, str] = {}
    bundles: dict[str, list[str]] = {}

    if not catalog_path.exists():
        return libraries, bundles

    try:
        with open(catalog_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Could not parse version catalog %s: %s", catalog_path, e)
        return libraries, bundles

    for alias, spec in data.get("libraries", {}).items():
        if isinstance(spec, str):
            # "group:artifact:version" shorthand
            parts = spec.split(":")
            if len(parts) >= 2:
                libraries[alias] = f"{parts[0]}:{parts[1]}"
        elif isinstance(spec, dict):
            module = spec.get("module")
            if not module and spec.get("group") and spec.get("name"):
                module = f"{spec['group']}:{spec['name']}"
            if module:
                libraries[alias] = module

    for bundle_name, members in data.get("bundles", {}).items():
        if isinstance(members, list):
            bundles[bundle_name] = [m for m in members if isinstance(m, str)]

    return libraries, bundles


def bundle_rules_from_catalog(
    catalog_path: Path, rules: BundleRules | None = None
) -> BundleRules:
    """Turn every ``[bundles]`` entry of a version catalog into a bundle rule.

    Members are matched by exact ``group:artifact``.  Aliases that do not
    resolve to a library are skipped.
    """
    rules = rules or BundleRules()
    libraries, bundles = _parse_version_catalog(catalog_path)

    for bundle_name, aliases in sorted(bundles.items()):
        for alias in aliases:
            # Gradle accessors treat '-', '_' and '.' as equivalent separators
            coord = libraries.get(alias) or libraries.get(alias.replace(".", "-"))
            if coord is None:
                logger.debug("Bundle %s: unknown library alias %s", bundle_name, alias)
                continue
            rules = rules.include_dependency(bundle_name, coord)

    logger.debug("Version catalog %s: %d bundles", catalog_path, len(rules.rules))
    return rules
