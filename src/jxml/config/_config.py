# pyright: reportExplicitAny=false, reportAny=false
"""The merged settings a command runs with."""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING, Any, ClassVar, Self

import tomli_w
from pydantic import BaseModel, ConfigDict, ValidationError

from ._layers import collect_layers, merge
from ._sections import BuildConfig, ExpansionConfig, LoggingConfig
from ._validation import ValidationIssue, raise_for_issues

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ._layers import ConfigLayer


class Config(BaseModel):
    """Validated settings, one attribute per ``jxml.toml`` section.

    ``Config()`` holds the built-in defaults. Unknown sections and keys are
    ignored.

    Example:
        >>> Config.from_dict({"build": {"indent": 2}}).build.indent
        2
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    build: BuildConfig = BuildConfig()
    expansion: ExpansionConfig = ExpansionConfig()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate nested tables over the defaults.

        Raises:
            ConfigValidationError: If a value is rejected.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise_for_issues(ValidationIssue.from_error(error) for error in e.errors())
            raise

    @classmethod
    def from_layers(cls, layers: Sequence[ConfigLayer]) -> Self:
        """Merge layers, lowest precedence first, and validate the result.

        A rejected value is blamed on the highest layer that sets it.

        Raises:
            ConfigValidationError: If a merged value is rejected.
        """
        merged = reduce(merge, (layer.values for layer in layers), {})
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            issues: list[ValidationIssue] = []
            for error in e.errors():
                blamed = next(
                    (layer for layer in reversed(layers) if layer.defines(error["loc"])),
                    None,
                )
                origin = blamed.label if blamed else None
                issues.append(ValidationIssue.from_error(error, origin))
            raise_for_issues(issues)
            raise

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        config_file: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Read and merge the user file, ``jxml.toml``, environment and flags.

        Args:
            project_root: Directory holding ``jxml.toml``; searched for
                upward from the working directory when omitted.
            config_file: Settings file to use instead of ``jxml.toml``.
            include_env: Read ``JXML_*`` environment variables.
            cli_overrides: Values given on the command line.

        Raises:
            ConfigLoadError: If a settings file cannot be parsed.
            ConfigValidationError: If a merged value is rejected.
        """
        return cls.from_layers(
            collect_layers(
                project_root=project_root,
                config_file=config_file,
                include_env=include_env,
                cli_overrides=cli_overrides,
            )
        )

    def to_dict(self, *, include_defaults: bool = True) -> dict[str, Any]:
        """Nested plain tables; without ``include_defaults`` only changed values."""
        return self.model_dump(mode="json", exclude_defaults=not include_defaults)

    def to_toml(self, *, include_defaults: bool = False) -> str:
        """Render as ``jxml.toml`` text."""
        return tomli_w.dumps(self.to_dict(include_defaults=include_defaults))
