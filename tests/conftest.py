import os
import json
import pytest
from routebuilder.services.catalog import row_to_record

CATALOG_TEST_PATH = os.path.join(os.path.dirname(__file__), "catalog_test.json")


@pytest.fixture
def catalog_rows():
    with open(CATALOG_TEST_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def catalog(catalog_rows):
    return [row_to_record(r) for r in catalog_rows]
