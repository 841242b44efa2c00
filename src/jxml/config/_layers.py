"""Where configuration values come from.

A build's settings are stacked from up to four layers, lowest precedence
first: the user file, the project's ``jxml.toml``, ``JXML_*`` environment
variables and command-line flags. Model defaults sit beneath them all.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import platformdirs

from jxml.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

PROJECT_CONFIG_NAME = "jxml.toml"
ENV_PREFIX = "JXML_"

# Process switches that share the prefix but are not settings.
_SWITCHES = frozenset({"DEBUG", "STRICT_CONFIG", "CONFIG"})

type Table = dict[str, Any]  # pyright: ignore[reportExplicitAny]


class LayerName(StrEnum):
    USER = "user"
    PROJECT = "project"
    ENV = "env"
    CLI = "cli"


@dataclass(frozen=True, slots=True)
class ConfigLayer:
    """Settings contributed by one place.

    Attributes:
        name: Which place the values came from.
        values: Nested tables as read, before validation.
        path: File the values were read from, for file layers.
    """

    name: LayerName
    values: Table = field(repr=False)
    path: Path | None = None

    def defines(self, key: tuple[str | int, ...]) -> bool:
        """Whether this layer sets the value at ``key`` or one containing it.

        Validation errors can point inside a value, such as at a union member.
        """
        node: object = self.values
        for part in key:
            if not isinstance(node, dict):
                return True
            if part not in node:
                return False
            node = node[part]  # pyright: ignore[reportUnknownVariableType]
        return True

    @property
    def label(self) -> str:
        return f"{self.name} ({self.path})" if self.path else str(self.name)


def find_project_root(start: Path | None = None) -> Path | None:
    """Return the nearest directory at or above ``start`` holding ``jxml.toml``.

    ``start`` defaults to the working directory.
    """
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        if (directory / PROJECT_CONFIG_NAME).is_file():
            return directory
    return None


def user_config_path() -> Path:
    """The per-user settings file, such as ``~/.config/jxml/config.toml``."""
    return platformdirs.user_config_path("jxml") / "config.toml"


def read_toml(path: Path) -> Table:
    """Parse a TOML settings file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        # lineno and colno exist from Python 3.14
        line, column = getattr(e, "lineno", None), getattr(e, "colno", None)
        raise ConfigLoadError(msg, path=path, line=line, column=column) from e


def merge(base: Table, override: Table) -> Table:
    """Overlay ``override`` on ``base`` without modifying either.

    Tables merge key by key; any other value in ``override`` replaces the
    one beneath it.
    """
    merged = dict(base)
    for key, value in override.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            merged[key] = merge(below, value)  # pyright: ignore[reportUnknownArgumentType]
        else:
            merged[key] = value
    return merged


def coerce_env_value(raw: str) -> bool | int | float | str:
    """Read a boolean or number out of an environment string.

    Examples:
        >>> coerce_env_value("4"), coerce_env_value("TRUE"), coerce_env_value("debug")
        (4, True, 'debug')
    """
    if raw.lower() in {"true", "false"}:
        return raw.lower() == "true"
    for kind in (int, float):
        try:
            return kind(raw)
        except ValueError:
            continue
    return raw


def environment_layer(
    environ: Mapping[str, str] | None = None,
    prefix: str = ENV_PREFIX,
) -> ConfigLayer:
    """Collect ``JXML_SECTION__KEY`` variables into a layer.

    ``JXML_BUILD__INDENT=2`` sets ``build.indent``. The ``JXML_DEBUG``,
    ``JXML_STRICT_CONFIG`` and ``JXML_CONFIG`` switches are skipped.
    """
    values: Table = {}
    for variable, raw in (os.environ if environ is None else environ).items():
        key = variable.removeprefix(prefix)
        if key == variable or not key or key in _SWITCHES:
            continue
        *sections, leaf = key.lower().split("__")
        table = values
        for section in sections:
            table = table.setdefault(section, {})
            if not isinstance(table, dict):
                break
        else:
            table[leaf] = coerce_env_value(raw)
    return ConfigLayer(LayerName.ENV, values)


def config_files(
    project_root: Path | None = None,
    config_file: Path | None = None,
) -> Iterator[tuple[LayerName, Path]]:
    """Yield the settings files that exist, lowest precedence first.

    ``config_file`` replaces the project's ``jxml.toml``; without either
    argument the project root is searched for from the working directory.
    """
    user = user_config_path()
    if user.is_file():
        yield LayerName.USER, user

    project = config_file
    if project is None:
        root = project_root or find_project_root()
        project = root / PROJECT_CONFIG_NAME if root else None
    if project is not None and project.is_file():
        yield LayerName.PROJECT, project


def collect_layers(
    *,
    project_root: Path | None = None,
    config_file: Path | None = None,
    include_env: bool = True,
    cli_overrides: Table | None = None,
) -> list[ConfigLayer]:
    """Read every layer that applies, lowest precedence first.

    Raises:
        ConfigLoadError: If a settings file is not valid TOML.
    """
    layers = [
        ConfigLayer(name, read_toml(path), path)
        for name, path in config_files(project_root, config_file)
    ]
    if include_env:
        layers.append(environment_layer())
    if cli_overrides:
        layers.append(ConfigLayer(LayerName.CLI, cli_overrides))
    return layers
