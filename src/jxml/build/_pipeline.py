"""The build pipeline: render every template, then splice the results.

A build runs in two phases. Rendering turns each ``<name>.jxml`` template
into a canonical ``<name>.cxml`` fragment; templates render concurrently in
an anyio task group, each against its own evaluation of the library.
Splicing then folds every fragment found in the fragment directory into
the master document, one after another, and writes the merged output.

Problems with a single fragment are logged and recorded in the
:class:`BuildReport`; only missing top-level inputs, an unparseable library
or a failure to produce the output document abort the build.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

import anyio

from jxml.exceptions import JXMLError, MissingFixedAnchorError, MissingSourceFileError
from jxml.expansion import ExpansionSettings, Library
from jxml.formatting import TAB, Indent, canonicalize_xml, parse_indent
from jxml.splice import DEFAULT_PAYLOAD_MARKERS, Fragment, MarkerPair, splice_fragments

from ._files import delete_files, find_files, read_text, write_text

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from jxml.config import BuildConfig, ExpansionConfig


class BuildStage(StrEnum):
    """Phase of the build in which a fragment failed."""

    RENDER = "render"
    SPLICE = "splice"


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Resolved inputs for one build.

    Attributes:
        library: Library script defining Embeds and helpers.
        template_dir: Directory searched for templates.
        fragment_dir: Directory rendered fragments are written to.
        input_xml: Master document containing the fragment anchors.
        output_xml: Destination of the merged document.
        indent: Indentation unit for canonical XML.
        template_suffix: Suffix identifying templates.
        fragment_suffix: Suffix identifying rendered fragments.
        payload_markers: Markers delimiting the spliced part of a fragment.
        expansion: Sigils and iteration cap for template expansion.
    """

    library: Path
    template_dir: Path
    fragment_dir: Path
    input_xml: Path
    output_xml: Path
    indent: Indent = TAB
    template_suffix: str = ".jxml"
    fragment_suffix: str = ".cxml"
    payload_markers: MarkerPair = DEFAULT_PAYLOAD_MARKERS
    expansion: ExpansionSettings = field(default_factory=ExpansionSettings)

    @classmethod
    def from_config(
        cls,
        build: BuildConfig,
        expansion: ExpansionConfig,
        *,
        base_dir: Path | None = None,
    ) -> BuildOptions:
        """Build options from configuration sections.

        Relative paths are resolved against ``base_dir`` (default: the
        current working directory).
        """
        base = base_dir or Path.cwd()
        return cls(
            library=base / build.library,
            template_dir=base / build.template_dir,
            fragment_dir=base / build.fragment_dir,
            input_xml=base / build.input_xml,
            output_xml=base / build.output_xml,
            indent=parse_indent(build.indent),
            template_suffix=build.template_suffix,
            fragment_suffix=build.fragment_suffix,
            payload_markers=MarkerPair(build.payload_start, build.payload_end),
            expansion=ExpansionSettings(
                parameter_sigil=expansion.parameter_sigil,
                silent_sigil=expansion.silent_sigil,
                max_iterations=expansion.max_iterations,
            ),
        )

    def fragment_path(self, template: Path) -> Path:
        """Where the fragment rendered from ``template`` is written."""
        stem = template.name.removesuffix(self.template_suffix)
        return self.fragment_dir / f"{stem}{self.fragment_suffix}"


@dataclass(frozen=True, slots=True)
class FragmentFailure:
    """A fragment left out of the build, and why."""

    key: str
    stage: BuildStage
    error: JXMLError


@dataclass(frozen=True, slots=True)
class BuildReport:
    """Summary of a completed build.

    Attributes:
        output: Path of the merged document.
        library_size: Size of the library script in characters.
        input_size: Size of the master document in characters.
        cleaned: Number of stale fragments deleted before rendering.
        rendered: Keys of fragments written in this build, sorted.
        spliced: Keys of fragments spliced into the output, in order.
        failures: Fragments that were skipped.
        output_size: Size of the written output in bytes.
    """

    output: Path
    library_size: int
    input_size: int
    cleaned: int
    rendered: tuple[str, ...]
    spliced: tuple[str, ...]
    failures: tuple[FragmentFailure, ...]
    output_size: int

    @property
    def ok(self) -> bool:
        """Whether every fragment made it into the output."""
        return not self.failures


async def _render_fragment(
    template_path: Path,
    library: Library,
    options: BuildOptions,
    logger: FilteringBoundLogger,
) -> str:
    template = await read_text(template_path)
    scope = library.instantiate(options.expansion)
    rendered = canonicalize_xml(scope.expand(template), options.indent)

    fragment_path = options.fragment_path(template_path)
    size = await write_text(fragment_path, rendered)
    logger.info(
        "fragment_rendered",
        template=str(template_path),
        fragment=str(fragment_path),
        size=size,
    )
    return fragment_path.name


async def render_all(
    templates: list[Path],
    library: Library,
    options: BuildOptions,
    logger: FilteringBoundLogger,
) -> tuple[list[str], list[FragmentFailure]]:
    """Render ``templates`` concurrently into the fragment directory.

    Returns:
        The keys of fragments written (sorted) and the failures.
    """
    rendered: list[str] = []
    failures: list[FragmentFailure] = []

    async def render_one(template_path: Path) -> None:
        try:
            rendered.append(
                await _render_fragment(template_path, library, options, logger)
            )
        except JXMLError as e:
            key = options.fragment_path(template_path).name
            logger.error(  # noqa: TRY400
                "fragment_skipped",
                template=str(template_path),
                stage=BuildStage.RENDER.value,
                error=str(e),
            )
            failures.append(FragmentFailure(key, BuildStage.RENDER, e))

    async with anyio.create_task_group() as tg:
        for template_path in templates:
            tg.start_soon(render_one, template_path)

    return sorted(rendered), sorted(failures, key=lambda f: f.key)


async def _load_fragments(
    paths: list[Path],
    logger: FilteringBoundLogger,
) -> tuple[list[Fragment], list[FragmentFailure]]:
    fragments: list[Fragment] = []
    failures: list[FragmentFailure] = []
    for path in paths:
        try:
            fragments.append(Fragment(path.name, await read_text(path)))
        except MissingSourceFileError as e:
            logger.error("fragment_unreadable", path=str(path), error=str(e))  # noqa: TRY400
            failures.append(FragmentFailure(path.name, BuildStage.SPLICE, e))
    return fragments, failures


async def build(options: BuildOptions, logger: FilteringBoundLogger) -> BuildReport:
    """Run a full build.

    Args:
        options: Resolved build inputs.
        logger: Structured logger receiving pipeline events.

    Returns:
        A report of what was rendered, spliced and skipped.

    Raises:
        MissingSourceFileError: If the library, the template directory or
            the master document is missing, or no templates are found.
        LibraryError: If the library script does not parse.
        XmlFormatError: If the merged document is not well-formed XML.
        WriteFailureError: If the output document cannot be written.
    """
    library_source = await read_text(options.library)
    master = await read_text(options.input_xml)
    templates = await find_files(options.template_dir, options.template_suffix)
    if not templates:
        msg = (
            f"No '*{options.template_suffix}' templates found in "
            f"{options.template_dir}"
        )
        raise MissingSourceFileError(msg, path=options.template_dir)

    library = Library.parse(library_source, path=options.library)
    logger.info(
        "build_started",
        library=str(options.library),
        library_size=len(library_source),
        input=str(options.input_xml),
        input_size=len(master),
        templates=len(templates),
    )

    await anyio.Path(options.fragment_dir).mkdir(parents=True, exist_ok=True)
    trash = await find_files(options.fragment_dir, options.fragment_suffix)
    cleaned = await delete_files(trash, logger)

    rendered, render_failures = await render_all(templates, library, options, logger)

    fragment_paths = await find_files(options.fragment_dir, options.fragment_suffix)
    fragments, read_failures = await _load_fragments(fragment_paths, logger)

    result = splice_fragments(master, fragments, options.payload_markers)
    splice_failures = [
        FragmentFailure(skipped.key, BuildStage.SPLICE, skipped)
        for skipped in result.skipped
    ]
    for failure in splice_failures:
        _log_missing_anchor(logger, failure.error)

    merged = canonicalize_xml(result.document, options.indent)
    output_size = await write_text(options.output_xml, merged)
    logger.info(
        "build_finished",
        output=str(options.output_xml),
        output_size=output_size,
        rendered=len(rendered),
        spliced=len(result.applied),
        skipped=len(render_failures) + len(read_failures) + len(splice_failures),
    )

    return BuildReport(
        output=options.output_xml,
        library_size=len(library_source),
        input_size=len(master),
        cleaned=cleaned,
        rendered=tuple(rendered),
        spliced=result.applied,
        failures=(*render_failures, *read_failures, *splice_failures),
        output_size=output_size,
    )


def _log_missing_anchor(logger: FilteringBoundLogger, error: JXMLError) -> None:
    if isinstance(error, MissingFixedAnchorError):
        logger.warning(
            "splice_anchor_missing",
            key=error.key,
            has_start=error.has_start,
            has_end=error.has_end,
        )


def run_build(options: BuildOptions, logger: FilteringBoundLogger) -> BuildReport:
    """Run :func:`build` on a fresh event loop."""
    return anyio.run(build, options, logger)


async def render_template(
    template_path: Path,
    library_path: Path,
    settings: ExpansionSettings | None = None,
) -> str:
    """Expand a single template file against a library, without formatting.

    Raises:
        MissingSourceFileError: If either file cannot be read.
        LibraryError: If the library fails to parse or evaluate.
        TemplateError: If the template fails to expand.
    """
    library = Library.parse(await read_text(library_path), path=library_path)
    template = await read_text(template_path)
    return library.instantiate(settings).expand(template)
