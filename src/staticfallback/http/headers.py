"""
=============================================================================
HTTP HEADER COLLECTION
=============================================================================

A case-insensitive multimap of header names to ordered value lists.

=============================================================================
WHY A LIST PER NAME?
=============================================================================

A header may legally appear more than once in a message:

    Set-Cookie: a=1
    Set-Cookie: b=2

Collapsing these into one dict entry loses data, so every name maps to a
list. Names are stored in canonical form so lookups ignore case:

    content-type   ─┐
    CONTENT-TYPE   ─┼──►  "Content-Type"
    Content-type   ─┘

=============================================================================
"""

from typing import Dict, Iterator, List, Optional, Tuple


def canonical_header_name(name: str) -> str:
    """
    Canonicalize a header name: first letter and every letter after a
    hyphen upper case, the rest lower case.

        >>> canonical_header_name("x-content-type-options")
        'X-Content-Type-Options'
    """
    return "-".join(part.capitalize() for part in name.strip().split("-"))


class Headers:
    """
    Ordered, case-insensitive header multimap.

    Usage:
        headers = Headers()
        headers.set("content-type", "text/plain")
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")

        headers.get("Content-Type")       # "text/plain"
        headers.get_all("set-cookie")     # ["a=1", "b=2"]
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, List[str]] = {}
        for name, value in (initial or {}).items():
            self.add(name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value for `name`, or `default`."""
        values = self._values.get(canonical_header_name(name))
        return values[0] if values else default

    def get_all(self, name: str) -> List[str]:
        """All values for `name` (a copy; empty list if absent)."""
        return list(self._values.get(canonical_header_name(name), []))

    def set(self, name: str, value: str) -> "Headers":
        """Replace every value of `name` with a single value."""
        self._values[canonical_header_name(name)] = [value]
        return self

    def add(self, name: str, value: str) -> "Headers":
        """Append a value to `name`, keeping existing ones."""
        self._values.setdefault(canonical_header_name(name), []).append(value)
        return self

    def replace(self, name: str, values: List[str]) -> "Headers":
        """Replace the whole value list of `name` with a copy of `values`."""
        self._values[canonical_header_name(name)] = list(values)
        return self

    def delete(self, name: str) -> None:
        self._values.pop(canonical_header_name(name), None)

    def lists(self) -> Iterator[Tuple[str, List[str]]]:
        """Iterate `(name, values)` pairs."""
        return iter(self._values.items())

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate `(name, value)` pairs, one per value (wire order)."""
        for name, values in self._values.items():
            for value in values:
                yield name, value

    def copy(self) -> "Headers":
        clone = Headers()
        for name, values in self._values.items():
            clone.replace(name, values)
        return clone

    def to_dict(self) -> Dict[str, str]:
        """Flatten to one string per name, joining repeats with ", "."""
        return {name: ", ".join(values) for name, values in self._values.items()}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_header_name(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"
