"""Config file loading.

Settings live in a ``[depgrapher]`` table. The table is looked up in this
order:

* ``[tool.depgrapher]``, so a project's ``pyproject.toml`` can carry it
* ``[depgrapher]`` in a dedicated ``depgrapher.toml`` / ``.json``
* the top level of the document

Command-line values are applied on top of the file values.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from depgrapher.config.schema import GrapherConfig
from depgrapher.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger("depgrapher.config.loader")

CONFIG_TABLE = "depgrapher"

PathLike = Union[str, Path]


def _load_toml(path: Path) -> Any:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


_READERS: Dict[str, Callable[[Path], Any]] = {
    ".toml": _load_toml,
    ".json": _load_json,
}


def read_config_file(path: PathLike) -> Dict[str, Any]:
    """Read the depgrapher settings table from a TOML or JSON file.

    Raises:
        ConfigError: Unsupported suffix, unreadable or malformed file, or
            a settings table that is not a mapping.
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ConfigError(
            f"unsupported config file type {path.suffix or '(none)'!r}, "
            "expected .toml or .json",
            path,
        )
    try:
        document = reader(path)
    except OSError as exc:
        raise ConfigError(f"cannot read config file: {exc}", path) from exc
    except ValueError as exc:
        raise ConfigError(f"malformed config file: {exc}", path) from exc
    return config_table(document, path)


def config_table(document: Any, path: Optional[Path] = None) -> Dict[str, Any]:
    """Pick the depgrapher table out of a parsed config document."""
    if not isinstance(document, dict):
        raise ConfigError("config document must be a table/object", path)

    tool = document.get("tool")
    if isinstance(tool, dict) and CONFIG_TABLE in tool:
        table = tool[CONFIG_TABLE]
    elif CONFIG_TABLE in document:
        table = document[CONFIG_TABLE]
    else:
        table = document

    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] must be a table", path)
    return table


def load_config(path: Optional[PathLike] = None, **overrides: Any) -> GrapherConfig:
    """Build the effective configuration.

    Args:
        path: Config file, or None for built-in defaults.
        **overrides: Command-line values; None means "not given".

    Returns:
        GrapherConfig: Validated settings.

    Raises:
        ConfigError: If the file cannot be used or a value is invalid.
    """
    values: Dict[str, Any] = {}
    if path is not None:
        values = read_config_file(path)
        logger.info("Loaded configuration from %s", path)

    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return GrapherConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}", Path(path) if path else None) from exc


__all__ = ["CONFIG_TABLE", "config_table", "load_config", "read_config_file"]
