from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import FormatterConfig, SeparatorConfig, SessionConfig, SheetConfig

"""Config loader.

Responsibilities:
- Load the YAML session config (default ``config/rowsync.yml``)
- Validate it against the packaged JSON schema
- Apply defaults (has_headers=true, separators of NumericFormatter)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_CONFIG_PATH = Path("config/rowsync.yml")

_UNSET = object()


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data not matching it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _separator_config(raw: dict[str, Any] | None, default: SeparatorConfig) -> SeparatorConfig:
    raw = raw or {}
    # null は「区切り無し」として明示指定可能なので未指定と区別する
    decimal = raw.get("decimal", _UNSET)
    thousand = raw.get("thousand", _UNSET)
    return SeparatorConfig(
        decimal=default.decimal if decimal is _UNSET else decimal,
        thousand=default.thousand if thousand is _UNSET else thousand,
    )


def load_config(path: Path) -> SessionConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")
    _validate_config_schema(data)

    defaults = FormatterConfig()
    seps = data.get("separators") or {}
    formatter = FormatterConfig(
        input=_separator_config(seps.get("input"), defaults.input),
        output=_separator_config(seps.get("output"), defaults.output),
    )

    sheets: dict[str, SheetConfig] = {}
    for title, raw in (data.get("sheets") or {}).items():
        raw = raw or {}
        sheets[str(title)] = SheetConfig(
            title=str(title),
            columns={str(k): v.upper() for k, v in (raw.get("columns") or {}).items()},
            keys=tuple(raw.get("keys") or ()),
        )

    workbook = Path(data["workbook"])
    if not workbook.is_absolute():
        # 相対パスは設定ファイルではなくカレントディレクトリ基準 (CLI と同じ)
        workbook = Path.cwd() / workbook

    return SessionConfig(
        workbook=str(workbook),
        has_headers=data.get("has_headers", True),
        first_data_row=data.get("first_data_row"),
        formatter=formatter,
        sheets=sheets,
    )
