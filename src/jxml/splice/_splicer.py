"""Marker-delimited splicing of rendered fragments into a master document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import reduce
from typing import TYPE_CHECKING

from jxml.exceptions import MissingFixedAnchorError

from ._markers import DEFAULT_PAYLOAD_MARKERS, MarkerPair

if TYPE_CHECKING:
    from collections.abc import Iterable

_XML_DECLARATION = re.compile(r"\A\s*<\?xml\s[^>]*\?>\s*")


@dataclass(frozen=True, slots=True)
class Fragment:
    """One rendered unit of output.

    Attributes:
        key: Identity used to build the fixed anchors, normally the
            fragment's file name (``boss.cxml``).
        text: Rendered fragment text.
    """

    key: str
    text: str


@dataclass(frozen=True, slots=True)
class SpliceResult:
    """Outcome of splicing a sequence of fragments.

    Attributes:
        document: The master document after every applicable splice.
        applied: Keys of fragments that were spliced, in order.
        skipped: Diagnostics for fragments that were left out.
    """

    document: str
    applied: tuple[str, ...] = ()
    skipped: tuple[MissingFixedAnchorError, ...] = field(default=())


def extract_payload(text: str, markers: MarkerPair = DEFAULT_PAYLOAD_MARKERS) -> str:
    """Return the part of a fragment that belongs in the master document.

    The payload lies between the first ``markers.start`` and the last
    ``markers.end``. When the two markers touch or overlap the payload is
    empty. When either is absent the whole fragment is the payload, less
    any leading XML declaration, which cannot appear inside the master.
    """
    start = text.find(markers.start)
    end = text.rfind(markers.end)
    if start == -1 or end == -1:
        return _XML_DECLARATION.sub("", text, count=1)

    inner_start = start + len(markers.start)
    if inner_start < end:
        return text[inner_start:end]
    return ""


def splice_fragment(
    document: str,
    fragment: Fragment,
    markers: MarkerPair = DEFAULT_PAYLOAD_MARKERS,
) -> str:
    """Replace a fragment's anchored span in ``document`` with its payload.

    The span runs from the first start anchor through the last end anchor and
    is rewritten as the start anchor, a newline, the payload, a newline and
    the end anchor.

    Raises:
        MissingFixedAnchorError: If either anchor is missing, or the end
            anchor only occurs before the start anchor.
    """
    anchors = MarkerPair.for_fragment(fragment.key)
    start = document.find(anchors.start)
    end = document.rfind(anchors.end)

    if start == -1 or end == -1 or end < start + len(anchors.start):
        msg = (
            "Unable to find a well-formed start and end sequence for "
            f"'{fragment.key}' in the document"
        )
        raise MissingFixedAnchorError(
            msg,
            key=fragment.key,
            has_start=start != -1,
            has_end=end != -1,
        )

    payload = extract_payload(fragment.text, markers)
    replacement = f"{anchors.start}\n{payload}\n{anchors.end}"
    return document[:start] + replacement + document[end + len(anchors.end) :]


def _apply(
    result: SpliceResult,
    fragment: Fragment,
    markers: MarkerPair,
) -> SpliceResult:
    try:
        document = splice_fragment(result.document, fragment, markers)
    except MissingFixedAnchorError as e:
        return SpliceResult(result.document, result.applied, (*result.skipped, e))
    return SpliceResult(document, (*result.applied, fragment.key), result.skipped)


def splice_fragments(
    document: str,
    fragments: Iterable[Fragment],
    markers: MarkerPair = DEFAULT_PAYLOAD_MARKERS,
) -> SpliceResult:
    """Splice ``fragments`` into ``document`` one after another.

    Each step reads the document produced by the previous one, so order
    matters and steps must not run concurrently. A fragment whose anchors
    are missing is recorded in :attr:`SpliceResult.skipped` and leaves the
    document untouched; the remaining fragments still apply.
    """
    return reduce(
        lambda result, fragment: _apply(result, fragment, markers),
        fragments,
        SpliceResult(document),
    )
