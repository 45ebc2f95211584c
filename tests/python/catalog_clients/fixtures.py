import uuid

import pytest

from catalogkit._internal.catalog_clients import CatalogAPIClient

BASE_URL = "https://catalog.example.com"
ACCESS_TOKEN = "exampletoken"
MANAGEMENT_URL = f"{BASE_URL}/management/v1"

NAMESPACE_ID = uuid.UUID("0b8d8f4e-5c7a-4a3c-9d7e-3f1f2c6a8b10")

SEARCH_USER_URL = f"{MANAGEMENT_URL}/search/user"
NAMESPACE_ASSIGNMENTS_URL = f"{MANAGEMENT_URL}/permissions/namespace/{NAMESPACE_ID}/assignments"


@pytest.fixture
def catalog_client() -> CatalogAPIClient:
    return CatalogAPIClient(BASE_URL, access_token=ACCESS_TOKEN)


__all__ = ["catalog_client"]
