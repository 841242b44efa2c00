"""Build orchestration: render templates, splice fragments, write output."""

from ._files import delete_files, find_files, read_text, write_text
from ._pipeline import (
    BuildOptions,
    BuildReport,
    BuildStage,
    FragmentFailure,
    build,
    render_all,
    render_template,
    run_build,
)

__all__ = [
    "BuildOptions",
    "BuildReport",
    "BuildStage",
    "FragmentFailure",
    "build",
    "delete_files",
    "find_files",
    "read_text",
    "render_all",
    "render_template",
    "run_build",
    "write_text",
]
