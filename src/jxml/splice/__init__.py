"""Splice rendered fragments into a master document.

The master document marks each insertion point with comment anchors named
after the fragment::

    <!-- START(boss.cxml) -->
    ...replaced on every build...
    <!-- END(boss.cxml) -->
"""

from ._markers import (
    DEFAULT_PAYLOAD_END,
    DEFAULT_PAYLOAD_MARKERS,
    DEFAULT_PAYLOAD_START,
    MarkerPair,
)
from ._splicer import (
    Fragment,
    SpliceResult,
    extract_payload,
    splice_fragment,
    splice_fragments,
)

__all__ = [
    "DEFAULT_PAYLOAD_END",
    "DEFAULT_PAYLOAD_MARKERS",
    "DEFAULT_PAYLOAD_START",
    "Fragment",
    "MarkerPair",
    "SpliceResult",
    "extract_payload",
    "splice_fragment",
    "splice_fragments",
]
