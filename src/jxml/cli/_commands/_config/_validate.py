# ruff: noqa: D415
"""Validate command for configuration files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from cyclopts import Parameter

from jxml.cli._commands._context import CLIContext
from jxml.cli._commands._shared import ExitCode
from jxml.config import check_config_file, config_files

from ._app import app

if TYPE_CHECKING:
    from pathlib import Path

    from jxml.config import ValidationIssue


def _report(origin: str, path: Path, issues: list[ValidationIssue]) -> list[str]:
    lines = [f"{origin} ({path}):"]
    if not issues:
        lines.append("  OK")
    for issue in issues:
        prefix = "ERROR" if issue.severity == "error" else "WARNING"
        key_info = f" '{issue.key}'" if issue.key and issue.key not in issue.message else ""
        lines.append(f"  {prefix}: {issue.message}{key_info}")
        if issue.expected:
            lines.append(f"         Expected: {issue.expected}")
    return lines


@app.command(name="validate")
def _validate(
    *,
    strict: Annotated[
        bool,
        Parameter(name="--strict", help="Treat unknown keys as errors"),
    ] = False,
) -> None:
    """Validate config files against the schema

    Checks the user and project config files for syntax errors and invalid
    values. Unknown keys are reported as warnings unless --strict is used.

    Args:
        strict: Treat unknown keys as errors.
    """
    ctx = CLIContext.get_current()
    files = list(config_files(ctx.project_root))
    if not files:
        print("No config files found to validate")  # noqa: T201
        raise SystemExit(ExitCode.SUCCESS)

    lines = ["Validating config files...", ""]
    errors = warnings = 0
    for origin, path in files:
        issues = check_config_file(path, origin, strict=strict)
        errors += sum(issue.severity == "error" for issue in issues)
        warnings += sum(issue.severity == "warning" for issue in issues)
        lines.extend([*_report(origin, path, issues), ""])

    lines.append(f"Validation complete: {errors} error(s), {warnings} warning(s)")
    print("\n".join(lines))  # noqa: T201
    raise SystemExit(ExitCode.FAILURE if errors else ExitCode.SUCCESS)
