"""YAML configuration loading utilities."""

import os
from pathlib import Path

import yaml

from geo_visibility.config.models import EngineConfig

CONFIG_PATH_ENV = "GEO_VISIBILITY_CONFIG"

# src/geo_visibility/config/loader.py -> repository root
_REPO_ROOT = Path(__file__).resolve().parents[3]


def load_config(path: Path | str) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Missing sections fall back to the model defaults, so a file holding
    only ``scoring:`` still yields the default provider list.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated EngineConfig. An empty file yields the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    with Path(path).open() as f:
        raw = yaml.safe_load(f)
    return EngineConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Resolve the config file used when none is given on the command line.

    ``$GEO_VISIBILITY_CONFIG`` wins when set. Otherwise this is
    ``configs/default.yaml`` at the repository root, which only exists for
    a source checkout or an editable install of the src layout.
    """
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return _REPO_ROOT / "configs" / "default.yaml"
