"""Loading settings for the command line without crashing on bad files."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, NoReturn

from jxml.exceptions import ConfigError

from ._config import Config

if TYPE_CHECKING:
    from pathlib import Path


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_root: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load settings, falling back to the defaults when they are unusable.

    A broken settings file prints a warning and yields ``Config()`` along
    with the reason. With ``JXML_STRICT_CONFIG=1`` it exits with status 1
    instead. A ``config_path`` that does not exist always exits, since the
    user named it.

    Returns:
        The settings and the load error, which is None on success.
    """
    if config_path is not None and not config_path.is_file():
        _fail(f"Config file not found: {config_path}")

    try:
        config = Config.load(
            project_root=project_root,
            config_file=config_path,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, OSError) as e:
        if os.environ.get("JXML_STRICT_CONFIG") == "1":
            _fail(str(e))
        print(f"Warning: Failed to load config: {e}", file=sys.stderr)  # noqa: T201
        return Config(), str(e)
    return config, None
