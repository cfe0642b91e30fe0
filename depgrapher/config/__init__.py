"""Configuration model and config file loading."""

from depgrapher.config.loader import CONFIG_TABLE, load_config, read_config_file
from depgrapher.config.schema import DEFAULT_SYNTAX, GrapherConfig

__all__ = ["CONFIG_TABLE", "DEFAULT_SYNTAX", "GrapherConfig", "load_config", "read_config_file"]
