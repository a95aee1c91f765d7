"""
Configuration loading for the registry validation gate.

Limits are read from config/validation.yaml. Any key missing from the
file keeps its default from core.constants.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.constants import (
    DISPOSABLE_EMAIL_DOMAINS,
    LOGO_SIZE_ERROR,
    LOGO_SIZE_WARNING,
    MAX_CONTRACTS_PER_PROJECT,
    MAX_JSON_BYTES,
    MAX_PROJECTS,
    MAX_SOURCE_BYTES,
    MAX_TOKENS,
    RECOMMENDED_MAX_DECIMALS,
)


CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_FILE = CONFIG_DIR / "validation.yaml"


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filepath: Path to the YAML file

    Returns:
        Parsed YAML as dict
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass
class ValidationConfig:
    """Limits applied during a validation run."""

    # Registry-wide caps (exceeding one is fatal)
    max_tokens: int = MAX_TOKENS
    max_projects: int = MAX_PROJECTS
    max_contracts_per_project: int = MAX_CONTRACTS_PER_PROJECT

    # Per-file read ceilings
    max_json_bytes: int = MAX_JSON_BYTES
    max_source_bytes: int = MAX_SOURCE_BYTES

    # Logo size thresholds
    logo_size_warning: int = LOGO_SIZE_WARNING
    logo_size_error: int = LOGO_SIZE_ERROR

    # Advisory
    recommended_max_decimals: int = RECOMMENDED_MAX_DECIMALS

    extra_disposable_domains: frozenset[str] = field(default_factory=frozenset)

    @property
    def disposable_domains(self) -> frozenset[str]:
        return DISPOSABLE_EMAIL_DOMAINS | self.extra_disposable_domains


def load_validation_config(config_path: Optional[Path] = None) -> ValidationConfig:
    """
    Load validation limits from YAML.

    Args:
        config_path: Path to a YAML file (default: config/validation.yaml)

    Returns:
        ValidationConfig; defaults when the default file is absent
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE
        if not config_path.exists():
            return ValidationConfig()

    data = load_yaml(Path(config_path))
    limits = data.get("limits") or {}
    defaults = ValidationConfig()

    def _int(key: str) -> int:
        value = limits.get(key, getattr(defaults, key))
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f"Config limit {key} must be a non-negative integer, got {value!r}")
        return value

    domains = data.get("extra_disposable_domains", []) or []

    return ValidationConfig(
        max_tokens=_int("max_tokens"),
        max_projects=_int("max_projects"),
        max_contracts_per_project=_int("max_contracts_per_project"),
        max_json_bytes=_int("max_json_bytes"),
        max_source_bytes=_int("max_source_bytes"),
        logo_size_warning=_int("logo_size_warning"),
        logo_size_error=_int("logo_size_error"),
        recommended_max_decimals=_int("recommended_max_decimals"),
        extra_disposable_domains=frozenset(str(d).lower() for d in domains),
    )
