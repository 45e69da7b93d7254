"""Read depadvice settings from .depadvice.toml or pyproject.toml."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from depadvice.bundles import BundleRules
from depadvice.catalog import bundle_rules_from_catalog

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_SETS = ("main", "test")


@dataclass(frozen=True)
class AdviceConfig:
    ignore_ktx: bool = True
    kapt: bool = False
    supported_source_sets: frozenset[str] = frozenset(DEFAULT_SOURCE_SETS)
    bundle_rules: BundleRules = field(default_factory=BundleRules)

    def override(self, **changes: Any) -> AdviceConfig:
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config(project_dir: Path) -> AdviceConfig:
    """Load settings for *project_dir*; missing or broken files give defaults."""
    table = _read_table(project_dir)
    if table is None:
        return AdviceConfig()
    return _config_from_table(table, project_dir)


def _read_table(project_dir: Path) -> dict[str, Any] | None:
    # Try .depadvice.toml first
    depadvice_toml = project_dir / ".depadvice.toml"
    if depadvice_toml.exists():
        try:
            with open(depadvice_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("depadvice", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", depadvice_toml, e)

    # Fall back to [tool.depadvice] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get("depadvice")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", pyproject, e)

    return None


def _config_from_table(table: dict[str, Any], project_dir: Path) -> AdviceConfig:
    config = AdviceConfig()

    if isinstance(table.get("ignore_ktx"), bool):
        config = replace(config, ignore_ktx=table["ignore_ktx"])
    if isinstance(table.get("kapt"), bool):
        config = replace(config, kapt=table["kapt"])

    source_sets = table.get("supported_source_sets")
    if isinstance(source_sets, list) and all(isinstance(s, str) for s in source_sets):
        config = replace(config, supported_source_sets=frozenset(source_sets))
    elif source_sets is not None:
        logger.warning("Ignoring supported_source_sets: expected a list of strings")

    rules = BundleRules()
    bundles = table.get("bundles", {})
    if isinstance(bundles, dict):
        try:
            rules = BundleRules.from_mapping(
                {
                    name: patterns
                    for name, patterns in bundles.items()
                    if isinstance(patterns, list)
                }
            )
        except re.error as e:
            logger.warning("Ignoring bundles: invalid pattern %r: %s", e.pattern, e)
    else:
        logger.warning("Ignoring bundles: expected a table of pattern lists")

    catalog = table.get("version_catalog")
    if isinstance(catalog, str):
        rules = bundle_rules_from_catalog(project_dir / catalog, rules)

    return replace(config, bundle_rules=rules)
