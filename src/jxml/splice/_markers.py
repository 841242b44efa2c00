"""Marker pairs used to locate insertion points and payloads."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PAYLOAD_START = "<Objects>"
DEFAULT_PAYLOAD_END = "</Objects>"


@dataclass(frozen=True, slots=True)
class MarkerPair:
    """A start/end pair of literal anchor strings."""

    start: str
    end: str

    @classmethod
    def for_fragment(cls, key: str) -> MarkerPair:
        """Build the comment anchors that bracket ``key`` in a master document."""
        return cls(start=f"<!-- START({key}) -->", end=f"<!-- END({key}) -->")


DEFAULT_PAYLOAD_MARKERS = MarkerPair(DEFAULT_PAYLOAD_START, DEFAULT_PAYLOAD_END)
