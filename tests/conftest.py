from typing import Callable
from pathlib import Path

import pytest


FeatureFileFactory = Callable[[str, str], Path]


@pytest.fixture
def feature_file(tmp_path: Path) -> FeatureFileFactory:
    def create(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')

        return path

    return create
