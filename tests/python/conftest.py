import atexit
import os
import shutil
import tempfile

import pytest

# Prepare app dirs
config_dir = tempfile.mkdtemp(prefix="catalogkit-test-")
os.environ["CATALOGKIT_CONFIG_DIR"] = config_dir
atexit.register(shutil.rmtree, config_dir, True)

# Load fixtures
from .catalog_clients.fixtures import *  # noqa
from .descriptor_fixtures import *  # noqa

# Enable vscode debugger to catch exc
if os.getenv("_PYTEST_RAISE", "0") != "0":

    @pytest.hookimpl(tryfirst=True)
    def pytest_exception_interact(call):
        raise call.excinfo.value

    @pytest.hookimpl(tryfirst=True)
    def pytest_internalerror(excinfo):
        raise excinfo.value
