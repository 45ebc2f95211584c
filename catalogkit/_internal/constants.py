import os
import tempfile
from pathlib import Path

from platformdirs import user_config_path

import catalogkit

DEFAULT_CATALOG_SERVER_URL = "http://localhost:8181"
MANAGEMENT_API_BASE = "management/v1"

CONFIG_DIR = Path(
    os.getenv(
        "CATALOGKIT_CONFIG_DIR",
        Path(user_config_path(catalogkit.__name__, appauthor=False, roaming=True)),
    )
)
CONFIG_DIR = CONFIG_DIR.resolve()

LOCK_DIR = Path(tempfile.gettempdir()) / "catalogkit" / "locks"

BUNDLED_SCHEMA_TABLE_PATH = Path(__file__).parent / "schemas" / "catalog_models.yaml"
SCHEMA_TABLE_PATH = Path(os.getenv("CATALOGKIT_SCHEMA_TABLE", BUNDLED_SCHEMA_TABLE_PATH))
