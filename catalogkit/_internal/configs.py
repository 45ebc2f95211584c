import os
import tempfile
import typing as t
from pathlib import Path

from filelock import FileLock
from pydantic import AnyHttpUrl, BaseModel, Field

from catalogkit._internal import constants
from catalogkit._internal.logging import log_info
from catalogkit.exceptions import NotConfigured


def default_config_path() -> Path:
    return constants.CONFIG_DIR / "config.json"


def default_config_lock_path() -> Path:
    return constants.LOCK_DIR / "config.json.lock"


class CatalogClientConfig(BaseModel):
    url: AnyHttpUrl = Field(
        default=constants.DEFAULT_CATALOG_SERVER_URL, validate_default=True
    )
    access_token: t.Optional[str] = None

    @property
    def base_url(self) -> str:
        return str(self.url).rstrip("/")

    def save(self, path: t.Optional[Path] = None, lock_path: t.Optional[Path] = None):
        path = path if path else default_config_path()
        lock_path = lock_path if lock_path else default_config_lock_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_path.parent.mkdir(parents=True, exist_ok=True)

        dumped = self.model_dump_json()
        tmp_config_fd, tmp_config_path_str = tempfile.mkstemp(
            suffix=path.name, dir=path.parent
        )
        try:
            tmp_config_path = Path(tmp_config_path_str)
            with FileLock(lock_path, timeout=30.0):
                tmp_config_path.write_text(dumped)
                os.close(tmp_config_fd)
                os.replace(tmp_config_path, path)
        finally:
            try:
                os.close(tmp_config_fd)
            except OSError:
                pass
        log_info(f"Saved catalog client config to {path}", pretty=False)

    @staticmethod
    def from_env(path: t.Optional[Path] = None) -> "CatalogClientConfig":
        path = path if path else default_config_path()
        if not path.exists():
            raise NotConfigured(f"No catalog client config found at {path}")
        return CatalogClientConfig.model_validate_json(path.read_text())
