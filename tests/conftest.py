"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local codemap package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of codemap modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("codemap"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user-level config and CODEMAP__ env vars out of every test."""
    from codemap.config import loader

    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", home / ".config" / "codemap" / "config.yaml")
    for key in list(os.environ):
        if key.upper().startswith("CODEMAP__"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_root_handlers() -> Iterator[None]:
    """configure_logging() replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
