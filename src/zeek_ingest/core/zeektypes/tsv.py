"""Header handling for Zeek's tab-separated log format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import InvalidZeekRecord

_CONTAINER_PREFIXES = ("set[", "vector[", "table[")


def _unescape(value: str) -> str:
    # Header values are written with \xNN escapes, e.g. "#separator \x09".
    return value.encode("ascii", errors="backslashreplace").decode("unicode_escape")


@dataclass(slots=True)
class ZeekTsvHeader:
    """State built from the `#` directives at the top of a TSV log."""

    separator: str = "\t"
    set_separator: str = ","
    empty_field: str = "(empty)"
    unset_field: str = "-"
    path: str | None = None
    fields: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)

    def consume(self, line: str) -> bool:
        """Apply a header directive. Return False if line is not one."""
        if not line.startswith("#"):
            return False

        if line.startswith("#separator"):
            _, _, value = line.partition(" ")
            self.separator = _unescape(value.strip())
            return True

        key, _, value = line.partition(self.separator)
        if key == "#set_separator":
            self.set_separator = _unescape(value)
        elif key == "#empty_field":
            self.empty_field = value
        elif key == "#unset_field":
            self.unset_field = value
        elif key == "#path":
            self.path = value
        elif key == "#fields":
            self.fields = value.split(self.separator)
        elif key == "#types":
            self.types = value.split(self.separator)
        # #open, #close and unknown directives carry nothing we need
        return True

    def row(self, line: str) -> dict[str, Any]:
        """Split a data row into a field -> value mapping.

        Unset values are left out so model defaults apply.
        """
        if not self.fields:
            raise InvalidZeekRecord("data row before #fields header")

        values = line.split(self.separator)
        if len(values) != len(self.fields):
            raise InvalidZeekRecord(
                f"expected {len(self.fields)} fields, got {len(values)}"
            )

        out: dict[str, Any] = {}
        for i, (name, value) in enumerate(zip(self.fields, values)):
            if value == self.unset_field:
                continue
            type_name = self.types[i] if i < len(self.types) else ""
            if type_name.startswith(_CONTAINER_PREFIXES):
                out[name] = [] if value == self.empty_field else value.split(self.set_separator)
            elif value == self.empty_field:
                out[name] = ""
            else:
                out[name] = value
        return out
