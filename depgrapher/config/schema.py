"""Settings model for ingestion and rendering.

The syntax selector is parsed during validation, so a bad selector in a
config file fails before any input is opened.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from depgrapher.errors import SyntaxConfigError
from depgrapher.syntax.selector import parse_syntaxes

DEFAULT_SYNTAX = "Makefile,Dot"


class GrapherConfig(BaseModel):
    """Top-level configuration for ingestion and rendering.

    Attributes:
        syntax: Syntax selector string (presets and inline definitions).
        workers: Worker threads used for edge insertion (None = CPU count).
        queue_size: Bound of the ingestion task queue (None = workers).
        shared_marker: Prefix drawn before nodes already rendered.
        synthetic_root: Name of the root used for whole-graph renders.
        wrap: Wrap the ASCII tree to the terminal width.
        terminal_width: Fixed wrap width; None detects the terminal,
            0 disables wrapping.
        encoding: Encoding of the input files.
    """

    syntax: str = DEFAULT_SYNTAX
    workers: Optional[int] = Field(default=None, ge=1, le=512)
    queue_size: Optional[int] = Field(default=None, ge=1)
    shared_marker: str = Field(default="&", min_length=1)
    synthetic_root: str = Field(default="_all", min_length=1)
    wrap: bool = True
    terminal_width: Optional[int] = Field(default=None, ge=0)
    encoding: str = "utf-8"

    model_config = {"extra": "forbid"}

    @field_validator("syntax")
    @classmethod
    def validate_syntax(cls, v: str) -> str:
        """Validate that the selector resolves to at least one syntax."""
        try:
            parse_syntaxes(v)
        except SyntaxConfigError as exc:
            raise ValueError(str(exc)) from exc
        return v
