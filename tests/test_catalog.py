from pathlib import Path

from depadvice.bundles import BundleRules
from depadvice.catalog import bundle_rules_from_catalog

from tests.helpers import module

CATALOG = """
[versions]
retrofit = "2.9.0"

[libraries]
retrofit-core = { module = "com.squareup.retrofit2:retrofit", version.ref = "retrofit" }
retrofit-gson = { group = "com.squareup.retrofit2", name = "converter-gson" }
okhttp = "com.squareup.okhttp3:okhttp:4.12.0"

[bundles]
retrofit = ["retrofit-core", "retrofit-gson", "not-a-library"]
"""


def test_catalog_bundles_become_rules(tmp_path: Path) -> None:
    path = tmp_path / "libs.versions.toml"
    path.write_text(CATALOG, encoding="utf-8")

    rules = bundle_rules_from_catalog(path)

    assert rules.names == ("retrofit",)
    assert rules.matching_bundles(module("com.squareup.retrofit2:retrofit"))
    assert rules.matching_bundles(module("com.squareup.retrofit2:converter-gson"))
    assert not rules.matching_bundles(module("com.squareup.okhttp3:okhttp"))


def test_catalog_rules_extend_existing_rules(tmp_path: Path) -> None:
    path = tmp_path / "libs.versions.toml"
    path.write_text(CATALOG, encoding="utf-8")

    existing = BundleRules().include_group("okhttp", "com.squareup.okhttp3")

    rules = bundle_rules_from_catalog(path, existing)

    assert rules.names == ("okhttp", "retrofit")


def test_missing_or_broken_catalog_gives_no_rules(tmp_path: Path) -> None:
    broken = tmp_path / "broken.toml"
    broken.write_text("[bundles\n", encoding="utf-8")

    assert not bundle_rules_from_catalog(tmp_path / "absent.toml")
    assert not bundle_rules_from_catalog(broken)
