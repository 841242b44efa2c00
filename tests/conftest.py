"""Shared test fixtures for JXML tests."""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console

from jxml.cli import CLIContext

SAMPLE_LIBRARY = """\
// =============== GENERIC HELPER FUNCTIONS ===============

var sayTemplate = Embed(`<Behavior text="{_text}" bubbleTime="{_time}">Say</Behavior>`);
var sayState = Embed(`<Transition playerSays="{_id}">{_id}</Transition>`);
var say = (text, time) => sayTemplate(text, time || 0.0);

var deleteObjectTemplate = Embed(`<Behavior objectId="{_objectId}" radius="{_radius}">DeleteObject</Behavior>`);
var deleteDecoy = (radius) => {
  return deleteObjectTemplate("Decoy", radius) +
    deleteObjectTemplate("Dire Decoy", radius)
};
"""

MASTER_XML = """\
<Objects>
  <Object id="Boss">
    <!-- START(boss.cxml) -->
    <Stale/>
    <!-- END(boss.cxml) -->
  </Object>
  <Object id="Minion">
    <!-- START(minion.cxml) -->
    <!-- END(minion.cxml) -->
  </Object>
</Objects>
"""


@dataclass(frozen=True, slots=True)
class JxmlProject:
    """Paths for a test build project."""

    root: Path
    library: Path
    template_dir: Path
    fragment_dir: Path
    input_xml: Path
    output_xml: Path

    def add_template(self, name: str, body: str) -> Path:
        path = self.template_dir / name
        path.write_text(body, encoding="utf-8")
        return path


@pytest.fixture
def jxml_project(tmp_path: Path) -> JxmlProject:
    """Create a project with a library, two templates and a master document.

    Structure:
        tmp_path/
            library.jxs
            jxml/
                boss.jxml
                minion.jxml
            cxml/
            master.xml
    """
    root = tmp_path
    library = root / "library.jxs"
    library.write_text(SAMPLE_LIBRARY, encoding="utf-8")

    template_dir = root / "jxml"
    template_dir.mkdir()
    fragment_dir = root / "cxml"
    fragment_dir.mkdir()

    input_xml = root / "master.xml"
    input_xml.write_text(MASTER_XML, encoding="utf-8")

    project = JxmlProject(
        root=root,
        library=library,
        template_dir=template_dir,
        fragment_dir=fragment_dir,
        input_xml=input_xml,
        output_xml=root / "out.xml",
    )
    project.add_template(
        "boss.jxml",
        '<Objects>{say("Hello", 2)}{deleteDecoy(5)}</Objects>',
    )
    project.add_template(
        "minion.jxml",
        '<Objects>{sayState("flee")}</Objects>',
    )
    return project


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture(autouse=True)
def reset_cli_context() -> None:
    """Start every test without a CLI context left over from another."""
    CLIContext.reset()


@pytest.fixture
def sample_library() -> str:
    return SAMPLE_LIBRARY


@pytest.fixture(autouse=True)
def clean_jxml_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide JXML_* variables from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("JXML_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config at a path that never exists."""
    path = Path("/nonexistent-jxml-user/config.toml")
    monkeypatch.setattr("jxml.config._layers.user_config_path", lambda: path)
    return path
