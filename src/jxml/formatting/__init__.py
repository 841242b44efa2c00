"""XML canonicalization for rendered fragments and merged documents."""

from ._xml import TAB, Indent, canonicalize_xml, indent_unit, parse_indent

__all__ = ["TAB", "Indent", "canonicalize_xml", "indent_unit", "parse_indent"]
