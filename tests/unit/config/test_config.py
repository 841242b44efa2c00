# pyright: reportAny=false, reportUnknownArgumentType=false
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from jxml.config import Config, ConfigLayer, LayerName, LogLevel
from jxml.exceptions import ConfigLoadError, ConfigValidationError

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestDefaults:
    def test_default_sections(self) -> None:
        config = Config()

        assert config.logging.level == LogLevel.INFO
        assert config.build.library == "library.jxs"
        assert config.build.indent == "\t"
        assert config.expansion.parameter_sigil == "_"
        assert config.expansion.silent_sigil == "!"
        assert config.expansion.max_iterations == 100

    def test_is_frozen(self) -> None:
        config = Config()

        with pytest.raises(ValueError, match="frozen"):
            config.build = config.build  # pyright: ignore[reportAttributeAccessIssue]


class TestFromDict:
    def test_fills_in_defaults(self) -> None:
        config = Config.from_dict({"build": {"indent": 2}})

        assert config.build.indent == 2
        assert config.build.template_dir == "jxml"

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            Config.from_dict({"expansion": {"max_iterations": 0}})

        assert exc_info.value.key == "expansion.max_iterations"
        assert exc_info.value.value == 0
        assert exc_info.value.expected == ">= 1"
        assert exc_info.value.source is None

    def test_identical_sigils_are_rejected(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            Config.from_dict({"expansion": {"silent_sigil": "_"}})

        assert exc_info.value.key == "expansion"

    def test_unknown_sections_and_keys_are_ignored(self) -> None:
        config = Config.from_dict({"build": {"unknown": 1}, "extras": {"a": 1}})

        assert config == Config()


class TestFromLayers:
    def test_higher_layers_win(self) -> None:
        layers = [
            ConfigLayer(LayerName.USER, {"build": {"indent": 8, "template_dir": "u"}}),
            ConfigLayer(LayerName.PROJECT, {"build": {"indent": 2}}),
            ConfigLayer(LayerName.CLI, {"logging": {"level": "debug"}}),
        ]

        config = Config.from_layers(layers)

        assert config.build.indent == 2
        assert config.build.template_dir == "u"
        assert config.logging.level == LogLevel.DEBUG

    def test_no_layers_means_defaults(self) -> None:
        assert Config.from_layers([]) == Config()

    def test_rejected_value_is_blamed_on_the_layer_that_set_it(self) -> None:
        layers = [
            ConfigLayer(
                LayerName.PROJECT,
                {"logging": {"level": "loud"}},
                Path("/project/jxml.toml"),
            ),
            ConfigLayer(LayerName.ENV, {"build": {"indent": 2}}),
        ]

        with pytest.raises(ConfigValidationError) as exc_info:
            Config.from_layers(layers)

        assert exc_info.value.key == "logging.level"
        assert exc_info.value.source == "project (/project/jxml.toml)"

    def test_overridden_value_is_blamed_on_the_top_layer(self) -> None:
        layers = [
            ConfigLayer(LayerName.PROJECT, {"expansion": {"max_iterations": 5}}),
            ConfigLayer(LayerName.ENV, {"expansion": {"max_iterations": "none"}}),
        ]

        with pytest.raises(ConfigValidationError) as exc_info:
            Config.from_layers(layers)

        assert exc_info.value.source == "env"

    def test_errors_inside_a_union_are_blamed_too(self) -> None:
        layers = [
            ConfigLayer(LayerName.PROJECT, {"build": {"indent": "spaces"}}, Path("/p.toml")),
        ]

        with pytest.raises(ConfigValidationError) as exc_info:
            Config.from_layers(layers)

        assert exc_info.value.key.startswith("build.indent")
        assert exc_info.value.source == "project (/p.toml)"


class TestLoad:
    def test_precedence(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _ = fs.create_file(
            "/project/jxml.toml",
            contents='[build]\nindent = 2\nlibrary = "project.jxs"\n',
        )
        monkeypatch.setenv("JXML_BUILD__INDENT", "3")

        config = Config.load(
            project_root=Path("/project"),
            cli_overrides={"build": {"library": "cli.jxs"}},
        )

        assert config.build.indent == 3
        assert config.build.library == "cli.jxs"

    def test_user_config_is_below_project(
        self, fs: FakeFilesystem, isolated_user_config: Path
    ) -> None:
        _ = fs.create_file(
            isolated_user_config, contents='[build]\ntemplate_dir = "u"\nindent = 8\n'
        )
        _ = fs.create_file("/project/jxml.toml", contents="[build]\nindent = 2\n")

        config = Config.load(project_root=Path("/project"))

        assert config.build.template_dir == "u"
        assert config.build.indent == 2

    def test_explicit_config_file(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/project/jxml.toml", contents="[build]\nindent = 2\n")
        _ = fs.create_file("/ci/jxml.toml", contents="[build]\nindent = 4\n")

        config = Config.load(
            project_root=Path("/project"), config_file=Path("/ci/jxml.toml")
        )

        assert config.build.indent == 4

    def test_environment_can_be_left_out(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _ = fs.create_dir("/project")
        monkeypatch.setenv("JXML_BUILD__INDENT", "3")

        config = Config.load(project_root=Path("/project"), include_env=False)

        assert config.build.indent == "\t"

    def test_invalid_env_value_raises(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _ = fs.create_dir("/project")
        monkeypatch.setenv("JXML_EXPANSION__MAX_ITERATIONS", "none")

        with pytest.raises(ConfigValidationError) as exc_info:
            Config.load(project_root=Path("/project"))

        assert exc_info.value.source == "env"

    def test_unparseable_file_raises(self, fs: FakeFilesystem) -> None:
        _ = fs.create_file("/project/jxml.toml", contents="[build\n")

        with pytest.raises(ConfigLoadError):
            Config.load(project_root=Path("/project"))


class TestSerialization:
    def test_to_dict_includes_defaults(self) -> None:
        data = Config().to_dict()

        assert data["build"]["indent"] == "\t"
        assert data["logging"] == {"level": "info", "format": "text", "file": ""}

    def test_to_dict_without_defaults(self) -> None:
        config = Config.from_dict({"build": {"indent": 2}})

        assert config.to_dict(include_defaults=False) == {"build": {"indent": 2}}

    def test_to_toml_without_defaults_is_empty_for_defaults(self) -> None:
        assert Config().to_toml() == ""

    def test_to_toml_round_trips(self) -> None:
        config = Config.from_dict({"logging": {"level": "debug"}})

        parsed = tomllib.loads(config.to_toml(include_defaults=True))

        assert parsed["logging"]["level"] == "debug"
        assert parsed["build"]["payload_start"] == "<Objects>"
        assert Config.from_dict(parsed) == config
