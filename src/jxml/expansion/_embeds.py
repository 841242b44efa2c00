"""Embeds: named reusable templates callable from expressions."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, final

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jxml.script import Value

    from ._expander import Expander


class TrimPolicy(StrEnum):
    """Whether an Embed strips surrounding whitespace from its body."""

    TRIM = "trim"
    VERBATIM = "verbatim"


@final
class Embed:
    """A template body bound to an expander, invoked like a function.

    ``Embed`` bodies (``TrimPolicy.TRIM``) are meant for blocks of markup
    and lose their leading and trailing whitespace; ``StringEmbed`` bodies
    (``TrimPolicy.VERBATIM``) are rendered exactly as written.

    Calling an Embed renders its body with the call's positional arguments
    bound to the body's own sigil-prefixed names, in first-appearance order.
    """

    __slots__ = ("body", "expander", "name", "trim")

    def __init__(
        self,
        body: str,
        expander: Expander,
        *,
        trim: TrimPolicy = TrimPolicy.TRIM,
        name: str = "<embed>",
    ) -> None:
        self.body: str = body
        self.expander: Expander = expander
        self.trim: TrimPolicy = trim
        self.name: str = name

    @property
    def template(self) -> str:
        """The body as it will be rendered."""
        return self.body.strip() if self.trim is TrimPolicy.TRIM else self.body

    def __call__(self, *arguments: Value) -> str:
        return self.expander.expand(self.template, arguments)

    def __repr__(self) -> str:
        return f"<Embed {self.name} ({self.trim.value})>"


def collect_embeds(bindings: Mapping[str, Value]) -> dict[str, Embed]:
    """Return the Embeds among ``bindings``, keyed by their bound name."""
    return {
        name: value for name, value in bindings.items() if isinstance(value, Embed)
    }
