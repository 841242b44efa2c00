# pyright: reportAny=false, reportExplicitAny=false
"""Checking settings against the section models.

Problems are collected as :class:`ValidationIssue` records rather than
raised, so ``jxml config validate`` can list them all. Unknown keys are
only problems in strict mode.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import cache
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from jxml.exceptions import ConfigLoadError, ConfigValidationError

from ._layers import read_toml
from ._sections import SECTIONS, strict_variant

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from pydantic_core import ErrorDetails

type Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found in a set of settings.

    Attributes:
        key: Dotted path of the offending setting, such as ``build.indent``;
            empty when the problem is with the whole file.
        message: What is wrong.
        expected: What would have been accepted, when known.
        actual: The rejected value.
        origin: Layer or file the value came from, when known.
        severity: ``error`` fails validation, ``warning`` does not.
    """

    key: str
    message: str
    expected: str | None = None
    actual: Any = None
    origin: str | None = None
    severity: Severity = "error"

    @classmethod
    def from_error(cls, error: ErrorDetails, origin: str | None = None) -> ValidationIssue:
        """Translate one pydantic error."""
        key = ".".join(str(part) for part in error["loc"])
        if error["type"] == "extra_forbidden":
            return cls(key, f"Unknown key '{key}'", actual=error.get("input"), origin=origin)

        ctx = error.get("ctx") or {}
        expected: str | None = None
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "ge" in ctx:
            expected = f">= {ctx['ge']}"
        elif "min_length" in ctx:
            expected = f"at least {ctx['min_length']} character(s)"
        return cls(key, error["msg"], expected, error.get("input"), origin)


@cache
def _schema(*, strict: bool) -> type[BaseModel]:
    sections: dict[str, Any] = {
        name: (strict_variant(model) if strict else model, model())
        for name, model in SECTIONS.items()
    }
    return create_model(
        "ConfigFile",
        __config__=ConfigDict(extra="forbid" if strict else "ignore"),
        **sections,
    )


def validate_config(
    data: Mapping[str, Any],
    *,
    strict: bool = False,
    origin: str | None = None,
) -> list[ValidationIssue]:
    """Check a settings table, returning its problems.

    Args:
        data: Nested tables as read from TOML.
        strict: Also report unknown sections and keys.
        origin: Recorded on each issue.
    """
    try:
        _ = _schema(strict=strict).model_validate(data)
    except ValidationError as e:
        return [ValidationIssue.from_error(error, origin) for error in e.errors()]
    return []


def check_config_file(path: Path, origin: str, *, strict: bool) -> list[ValidationIssue]:
    """Check one settings file.

    Unknown keys are warnings, or errors when ``strict``. A file that is not
    valid TOML yields a single error.
    """
    try:
        data = read_toml(path)
    except ConfigLoadError as e:
        return [ValidationIssue("", f"Failed to parse file: {e}", origin=origin)]

    issues = validate_config(data, strict=True, origin=origin)
    if strict:
        return issues
    return [
        replace(issue, severity="warning") if issue.message.startswith("Unknown key") else issue
        for issue in issues
    ]


def raise_for_issues(issues: Iterable[ValidationIssue]) -> None:
    """Raise for the first error among ``issues``; warnings pass.

    Raises:
        ConfigValidationError: If any issue is an error.
    """
    issue = next((i for i in issues if i.severity == "error"), None)
    if issue is None:
        return
    msg = f"Invalid configuration value for '{issue.key}'"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
        source=issue.origin,
    )
