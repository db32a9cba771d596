"""
Export configuration loading.

The export config is a YAML file declaring the archive name prefix, the
attachment name filter and the ordered owner projection.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from hrms.contexts.export.data_structures import FieldType
from hrms.contexts.export.exceptions import InvalidExportConfigError

load_dotenv()
DEFAULT_CONFIG_PATH = Path(__file__).parent / "export_config.yaml"
CONFIG_PATH = Path(os.getenv("EXPORT_CONFIG", str(DEFAULT_CONFIG_PATH)))

REQUIRED_KEYS = ("archive_prefix", "name_filter", "projection")


@dataclass(frozen=True)
class ExportConfig:
    """Settings for one kind of attachment export."""

    archive_prefix: str
    name_filter: str
    projection: Tuple[FieldType, ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.projection)


def load_export_config(config_path: Path = None) -> ExportConfig:
    """
    Load an export config from YAML.

    Args:
        config_path: YAML file to load. Defaults to EXPORT_CONFIG from environment,
                     falling back to the packaged export_config.yaml

    Returns:
        ExportConfig with the projection in declared order

    Raises:
        FileNotFoundError: If the config file doesn't exist
        InvalidExportConfigError: If keys are missing or the projection is malformed
    """
    if config_path is None:
        config_path = CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Export config not found at {config_path}")

    config = OmegaConf.load(config_path)
    config_dict = OmegaConf.to_container(config, resolve=True)

    return export_config_from_dict(config_dict, source=str(config_path))


def export_config_from_dict(config_dict: Dict[str, Any], source: str = "<dict>") -> ExportConfig:
    """Validate a plain config dict and build an ExportConfig."""
    if not isinstance(config_dict, dict):
        raise InvalidExportConfigError(f"Export config {source} must be a mapping")

    missing = [key for key in REQUIRED_KEYS if key not in config_dict]
    if missing:
        raise InvalidExportConfigError(
            f"Export config {source} is missing required keys: {', '.join(missing)}"
        )

    projection = config_dict["projection"]
    if not isinstance(projection, list) or not projection:
        raise InvalidExportConfigError(f"Export config {source}: projection must be a non-empty list")

    fields = []
    for item in projection:
        if not isinstance(item, dict) or not item.get("name"):
            raise InvalidExportConfigError(
                f"Export config {source}: every projection item needs a name, got {item!r}"
            )
        fields.append(FieldType(name=str(item["name"]), type=item.get("type")))

    names = [field.name for field in fields]
    if len(set(names)) != len(names):
        raise InvalidExportConfigError(f"Export config {source}: projection names must be unique")

    return ExportConfig(
        archive_prefix=str(config_dict["archive_prefix"]),
        name_filter=str(config_dict["name_filter"]),
        projection=tuple(fields),
    )
