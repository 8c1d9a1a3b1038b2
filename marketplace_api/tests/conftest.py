import copy
import json
import os
from pathlib import Path

import pytest

# Settings are read once at import time, so the test environment has to be in
# place before any marketplace module is imported.
os.environ["REPOSITORY_TYPE"] = "in_memory"
os.environ["EMAIL_PROVIDER"] = "in_memory"
os.environ["LOG_FILE"] = ""
os.environ.setdefault("LOG_LEVEL", "DEBUG")

DATA_SOURCE_DIR = Path(__file__).resolve().parents[2] / "scripts" / "data-source"

_cache: dict[str, list] = {}


def load_data_source(file_name: str) -> list[dict]:
    """Load one of the seed JSON files (fresh copy per call)."""
    if file_name not in _cache:
        with open(DATA_SOURCE_DIR / file_name, "r") as f:
            _cache[file_name] = json.load(f)
    return copy.deepcopy(_cache[file_name])


@pytest.fixture
def trainers_data() -> list[dict]:
    return load_data_source("trainers_data.json")


@pytest.fixture
def listings_data() -> list[dict]:
    return load_data_source("listings_data.json")


@pytest.fixture
def search_alerts_data() -> list[dict]:
    return load_data_source("search_alerts_data.json")
