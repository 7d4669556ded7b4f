"""Configuration loader for docsections.

Settings are resolved in this order, later sources winning:

1. Built-in defaults (docsections.config.defaults)
2. An optional YAML file
3. Environment variables

Nothing is cached between calls; every load reads the sources again.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from docsections.config.validator import flatten_pydantic_errors
from docsections.lib.errors import ConfigError, OcrConfigurationError
from docsections.lib.logging_config import get_logger
from docsections.models.config import IngestConfig, OcrConfig

logger = get_logger(__name__)

# Top-level field name -> environment variable
ENV_VAR_MAP = {
    "min_text_characters": "DOCSECTIONS_MIN_TEXT_CHARACTERS",
    "ocr_timeout": "DOCSECTIONS_OCR_TIMEOUT",
}

# OCR field name -> environment variable
OCR_ENV_VAR_MAP = {
    "project_id": "GOOGLE_CLOUD_PROJECT_ID",
    "location": "GOOGLE_CLOUD_LOCATION",
    "processor_id": "GOOGLE_CLOUD_PROCESSOR_ID",
    "endpoint": "DOCSECTIONS_OCR_ENDPOINT",
}

OCR_REQUIRED_FIELDS = ("project_id", "processor_id")


def _parse_env_value(field_name: str, value: str) -> Any:
    """Parse an environment variable value to the field's type.

    Raises:
        ValueError: If value cannot be parsed
    """
    if field_name == "min_text_characters":
        return int(value)
    if field_name == "ocr_timeout":
        return float(value)
    return value


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect top-level overrides from the environment.

    Raises:
        ConfigError: If a variable is set but cannot be parsed
    """
    overrides: dict[str, Any] = {}
    for field_name, env_var in ENV_VAR_MAP.items():
        raw = env.get(env_var)
        if raw is None or not raw.strip():
            continue
        try:
            overrides[field_name] = _parse_env_value(field_name, raw.strip())
        except ValueError as e:
            raise ConfigError(env_var, f"Invalid value {raw!r}: {e}") from e
    return overrides


def _ocr_env_overrides(env: Mapping[str, str]) -> dict[str, str]:
    """Collect OCR overrides from the environment, ignoring blank values."""
    overrides: dict[str, str] = {}
    for field_name, env_var in OCR_ENV_VAR_MAP.items():
        value = (env.get(env_var) or "").strip()
        if value:
            overrides[field_name] = value
    return overrides


def ocr_config_from_env(env: Mapping[str, str] | None = None) -> OcrConfig:
    """Build OCR settings purely from environment variables.

    Args:
        env: Environment mapping (default: os.environ)

    Returns:
        OcrConfig for the configured processor.

    Raises:
        OcrConfigurationError: If the project or processor id is missing
    """
    values = _ocr_env_overrides(os.environ if env is None else env)
    missing = [
        OCR_ENV_VAR_MAP[name] for name in OCR_REQUIRED_FIELDS if name not in values
    ]
    if missing:
        raise OcrConfigurationError(missing)
    return OcrConfig(**values)


class ConfigLoader:
    """Load and validate ingestion settings.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load("docsections.yaml")
        >>> config.min_text_characters
        25
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the loader.

        Args:
            env: Environment mapping to read (default: os.environ at load time)
        """
        self._env = env

    @property
    def env(self) -> Mapping[str, str]:
        return os.environ if self._env is None else self._env

    def read_yaml(self, path: str | Path) -> dict[str, Any]:
        """Read a YAML settings file.

        Args:
            path: Path to the file

        Returns:
            Parsed mapping, empty when the file is empty.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigError("config", f"Configuration file not found: {file_path}")

        try:
            content = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError("config", f"Failed to read {file_path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError("config", f"{file_path} must contain a mapping")
        return content

    def load(self, path: str | Path | None = None) -> IngestConfig:
        """Resolve ingestion settings from defaults, YAML and environment.

        OCR settings are only included when a project and processor id are
        available from either source.

        Args:
            path: Optional YAML file

        Returns:
            Validated IngestConfig.

        Raises:
            ConfigError: On unreadable files or invalid values
        """
        data: dict[str, Any] = self.read_yaml(path) if path is not None else {}
        data.update(_env_overrides(self.env))

        raw_ocr = data.get("ocr") or {}
        if not isinstance(raw_ocr, Mapping):
            raise ConfigError("ocr", "must be a mapping of OCR settings")
        ocr_data = dict(raw_ocr)
        ocr_data.update(_ocr_env_overrides(self.env))
        if all(ocr_data.get(name) for name in OCR_REQUIRED_FIELDS):
            data["ocr"] = ocr_data
        else:
            if ocr_data:
                logger.warning(
                    "Ignoring partial OCR configuration; set %s to enable OCR",
                    " and ".join(OCR_ENV_VAR_MAP[n] for n in OCR_REQUIRED_FIELDS),
                )
            data.pop("ocr", None)

        try:
            config = IngestConfig(**data)
        except PydanticValidationError as e:
            raise ConfigError("config", "; ".join(flatten_pydantic_errors(e))) from e

        logger.debug(
            "Resolved config: min_text_characters=%d, ocr=%s",
            config.min_text_characters,
            "enabled" if config.ocr else "disabled",
        )
        return config
