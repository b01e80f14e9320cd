import os
import sys

import pytest

# Ensure project root is first on sys.path so the local packages are used
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def models_dir():
    return os.path.join(DATA_DIR, "models")


@pytest.fixture
def worlds_dir():
    return os.path.join(DATA_DIR, "worlds")


@pytest.fixture
def loader(models_dir):
    """A loader with its own cache, searching only the test models."""
    from core.loader import SdfLoader
    return SdfLoader(model_path=[models_dir])


@pytest.fixture
def write_sdf(tmp_path):
    """Write an SDF document to a temporary file and return its path."""
    def write(content, name="model.sdf"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return str(path)
    return write
