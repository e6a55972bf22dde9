"""Environment driven configuration for the watermark pipeline."""

import os
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import WatermarkConfig
from .watermark_source import validate_watermark_reference

ENV_BUCKET = "S3_BUCKET"
ENV_SOURCE_PREFIX = "SOURCE_PREFIX"
ENV_TARGET_PREFIX = "TARGET_PREFIX"
ENV_LEFT_WATERMARK = "LEFT_WATERMARK_PATH"
ENV_RIGHT_WATERMARK = "RIGHT_WATERMARK_PATH"

REQUIRED_VARIABLES = {
    ENV_BUCKET: ("bucket", "S3 bucket name"),
    ENV_SOURCE_PREFIX: ("source_prefix", "Source directory prefix in S3"),
    ENV_TARGET_PREFIX: ("target_prefix", "Target directory prefix in S3"),
    ENV_LEFT_WATERMARK: ("left_watermark", "Path to left watermark PNG file or URL"),
    ENV_RIGHT_WATERMARK: ("right_watermark", "Path to right watermark PNG file or URL"),
}

OPTIONAL_VARIABLES = {
    "MAX_WATERMARK_HEIGHT": "max_watermark_height",
    "WATERMARK_PADDING": "watermark_padding",
    "MAX_WORKERS": "max_workers",
    "PROCESSOR": "processor",
    "WATERMARK_DOWNLOAD_TIMEOUT": "download_timeout",
    "S3_MAX_ATTEMPTS": "s3_max_attempts",
    "DEBUG": "debug",
}


def describe_required_environment() -> str:
    """Usage text listing every required environment variable."""
    lines = ["Required environment variables:"]
    for name, (_, description) in REQUIRED_VARIABLES.items():
        lines.append(f"  {name}: {description}")
    return "\n".join(lines)


def load_config(environ: Optional[Mapping[str, str]] = None) -> WatermarkConfig:
    """
    Build a WatermarkConfig from environment variables.

    Every missing required variable is reported in a single error.

    Raises:
        ConfigurationError: On missing or malformed settings
    """
    environ = os.environ if environ is None else environ

    missing: List[str] = []
    values: Dict[str, Any] = {}
    for name, (field_name, _) in REQUIRED_VARIABLES.items():
        value = environ.get(name, "")
        if not value:
            missing.append(name)
        else:
            values[field_name] = value

    if missing:
        raise ConfigurationError(
            "required environment variable(s) not set: " + ", ".join(missing)
        )

    for name, field_name in OPTIONAL_VARIABLES.items():
        value = environ.get(name)
        if value:
            values[field_name] = value

    try:
        return WatermarkConfig(**values)
    except ValidationError as e:
        env_names = {field: env for env, field in OPTIONAL_VARIABLES.items()}
        problems = []
        for error in e.errors():
            field_name = str(error["loc"][0]) if error["loc"] else ""
            problems.append(f"{env_names.get(field_name, field_name)}: {error['msg']}")
        raise ConfigurationError(
            "invalid configuration: " + "; ".join(problems)
        ) from e


def validate_config(config: WatermarkConfig) -> None:
    """Validate both watermark references of a configuration."""
    validate_watermark_reference(config.left_watermark)
    validate_watermark_reference(config.right_watermark)


def load_and_validate_config(
    environ: Optional[Mapping[str, str]] = None,
) -> WatermarkConfig:
    config = load_config(environ)
    validate_config(config)
    return config
