"""End-to-end builds driven by configuration, without the CLI."""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING

from jxml.build import BuildOptions, run_build
from jxml.config import Config, LogFormat
from jxml.utils import create_logger

if TYPE_CHECKING:
    from tests.conftest import JxmlProject


def _options(project: JxmlProject, toml: str) -> BuildOptions:
    (project.root / "jxml.toml").write_text(toml, encoding="utf-8")
    config = Config.load(project_root=project.root, include_env=False)
    return BuildOptions.from_config(
        config.build, config.expansion, base_dir=project.root
    )


class TestConfiguredBuild:
    def test_output_matches_expected_document(self, jxml_project: JxmlProject) -> None:
        options = _options(
            jxml_project,
            '[build]\ninput_xml = "master.xml"\noutput_xml = "out.xml"\nindent = 2\n',
        )

        report = run_build(options, create_logger(io.StringIO()))

        assert report.ok
        assert jxml_project.output_xml.read_text(encoding="utf-8") == (
            "<Objects>\n"
            '  <Object id="Boss">\n'
            "    <!-- START(boss.cxml) -->\n"
            '    <Behavior text="Hello" bubbleTime="2">Say</Behavior>\n'
            '    <Behavior objectId="Decoy" radius="5">DeleteObject</Behavior>\n'
            '    <Behavior objectId="Dire Decoy" radius="5">DeleteObject</Behavior>\n'
            "    <!-- END(boss.cxml) -->\n"
            "  </Object>\n"
            '  <Object id="Minion">\n'
            "    <!-- START(minion.cxml) -->\n"
            '    <Transition playerSays="flee">flee</Transition>\n'
            "    <!-- END(minion.cxml) -->\n"
            "  </Object>\n"
            "</Objects>\n"
        )

    def test_custom_sigils_and_suffixes(self, jxml_project: JxmlProject) -> None:
        (jxml_project.root / "alt.jxs").write_text(
            "var hide = Embed(`<Hide who='{$who}'/>`);", encoding="utf-8"
        )
        (jxml_project.template_dir / "minion.tpl").write_text(
            "<Objects>{#String(1)}{hide('minion')}</Objects>", encoding="utf-8"
        )
        options = _options(
            jxml_project,
            "[build]\n"
            'library = "alt.jxs"\n'
            'input_xml = "master.xml"\n'
            'output_xml = "out.xml"\n'
            'template_suffix = ".tpl"\n'
            "[expansion]\n"
            'parameter_sigil = "$"\n'
            'silent_sigil = "#"\n',
        )

        report = run_build(options, create_logger(io.StringIO()))

        assert report.rendered == ("minion.cxml",)
        output = jxml_project.output_xml.read_text(encoding="utf-8")
        assert "<Hide who=\"minion\"/>" in output
        assert "<Stale/>" in output

    def test_json_log_records(self, jxml_project: JxmlProject) -> None:
        options = _options(
            jxml_project, '[build]\ninput_xml = "master.xml"\noutput_xml = "out.xml"\n'
        )
        stream = io.StringIO()

        _ = run_build(options, create_logger(stream, log_format=LogFormat.JSON))

        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        assert events[0] == "build_started"
        assert events[-1] == "build_finished"
