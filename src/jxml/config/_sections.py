"""Sections of ``jxml.toml``.

Each ``[section]`` has a frozen model that ignores unknown keys, so a
misspelt key never blocks a build. :func:`strict_variant` derives a copy
that rejects them, for ``jxml config validate --strict``. The built-in
defaults live on the model fields and nowhere else.
"""

import logging
from enum import StrEnum
from functools import cache
from typing import Annotated, ClassVar, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

type IndentSetting = Annotated[int, Field(ge=0)] | Literal["\t", "tab"]


class LogLevel(StrEnum):
    """Log level thresholds, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def number(self) -> int:
        """The matching :mod:`logging` level number."""
        return logging.getLevelNamesMapping()[self.name]


class LogFormat(StrEnum):
    JSON = "json"
    TEXT = "text"


class Section(BaseModel):
    """Base for the ``jxml.toml`` section models."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")


class LoggingConfig(Section):
    """``[logging]``: where build events are written.

    Attributes:
        level: Threshold below which events are dropped.
        format: ``text`` for console lines, ``json`` for one object per line.
        file: Log file to append to; empty writes to stderr.
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: str = ""

    @field_validator("level", "format", mode="before")
    @classmethod
    def _fold_case(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


class BuildConfig(Section):
    """``[build]``: the files a build reads and writes.

    Relative paths are resolved against the project root.

    Attributes:
        library: Script library defining shared Embeds and helpers.
        template_dir: Directory holding templates.
        fragment_dir: Directory receiving rendered fragments.
        input_xml: Master document the fragments are spliced into.
        output_xml: Destination of the merged document.
        indent: Spaces per indentation level, or a tab.
        template_suffix: File suffix identifying templates.
        fragment_suffix: File suffix given to rendered fragments.
        payload_start: Marker opening the payload inside a fragment.
        payload_end: Marker closing the payload inside a fragment.
    """

    library: str = "library.jxs"
    template_dir: str = "jxml"
    fragment_dir: str = "cxml"
    input_xml: str = ""
    output_xml: str = ""
    indent: IndentSetting = "\t"
    template_suffix: str = Field(default=".jxml", min_length=1)
    fragment_suffix: str = Field(default=".cxml", min_length=1)
    payload_start: str = Field(default="<Objects>", min_length=1)
    payload_end: str = Field(default="</Objects>", min_length=1)


class ExpansionConfig(Section):
    """``[expansion]``: template syntax and the pass limit.

    Attributes:
        parameter_sigil: Leading character naming a positional parameter.
        silent_sigil: Leading character marking a capture whose result is
            discarded.
        max_iterations: Upper bound on rendering passes per template.
    """

    parameter_sigil: str = Field(default="_", min_length=1, max_length=1)
    silent_sigil: str = Field(default="!", min_length=1, max_length=1)
    max_iterations: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _check_distinct_sigils(self) -> Self:
        if self.parameter_sigil == self.silent_sigil:
            msg = "parameter_sigil and silent_sigil must differ"
            raise ValueError(msg)
        return self


@cache
def strict_variant[S: Section](section: type[S]) -> type[S]:
    """Return a subclass of ``section`` that rejects unknown keys."""
    return type(
        f"{section.__name__}Strict",
        (section,),
        {
            "__module__": __name__,
            "model_config": ConfigDict(frozen=True, extra="forbid"),
        },
    )


SECTIONS: dict[str, type[Section]] = {
    "logging": LoggingConfig,
    "build": BuildConfig,
    "expansion": ExpansionConfig,
}
"""Every ``jxml.toml`` table, by name."""
