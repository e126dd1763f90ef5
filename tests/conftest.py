from datetime import datetime
from pathlib import Path
from typing import Dict

import pytest

from lookandfeel.config import build_config


def make_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 17, 9, 30, 15)


@pytest.fixture
def config(tmp_path: Path, home: Path):
    return build_config(
        home=home,
        wallpapers=False,
        environ={"XDG_CACHE_HOME": str(tmp_path / "cache")},
    )
