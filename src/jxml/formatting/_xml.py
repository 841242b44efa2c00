"""Canonical XML formatting."""

from __future__ import annotations

from lxml import etree

from jxml.exceptions import XmlFormatError

type Indent = int | str

TAB = "\t"


def parse_indent(value: str | int | None) -> Indent:
    """Interpret an indentation setting.

    Integers (or numeric strings) are a count of spaces; anything else means
    one tab per level.

    Examples:
        >>> parse_indent("4")
        4
        >>> parse_indent("tab")
        '\\t'
    """
    if isinstance(value, bool):
        return TAB
    if isinstance(value, int):
        return max(value, 0)
    if value is None:
        return TAB
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return TAB


def indent_unit(indent: Indent) -> str:
    """Return the whitespace used for one level of ``indent``."""
    if isinstance(indent, int):
        return " " * indent
    return indent


def canonicalize_xml(text: str, indent: Indent = TAB) -> str:
    """Parse ``text`` as XML and serialize it with uniform indentation.

    Whitespace-only text between elements is discarded and regenerated, so
    formatting the output again yields identical text. An XML declaration in
    the input is preserved.

    Args:
        text: XML document text.
        indent: Spaces per level, or a string such as ``"\\t"``.

    Returns:
        The formatted document, ending with a newline.

    Raises:
        XmlFormatError: If ``text`` is not well-formed XML.
    """
    parser = etree.XMLParser(remove_blank_text=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position
        msg = f"Unable to parse XML: {e.msg}"
        raise XmlFormatError(msg, line=line, column=column) from e

    unit = indent_unit(indent)
    if unit:
        etree.indent(root, space=unit)

    tree = root.getroottree()
    body = etree.tostring(tree, encoding="unicode")

    if text.lstrip().startswith("<?xml"):
        docinfo = tree.docinfo
        encoding = docinfo.encoding or "UTF-8"
        declaration = f'<?xml version="{docinfo.xml_version}" encoding="{encoding}"?>'
        body = f"{declaration}\n{body}"

    return body if body.endswith("\n") else f"{body}\n"
