import json
from pathlib import Path

import pytest


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
