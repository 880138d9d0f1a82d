"""
Route table models

A route binds a URL path pattern to a document and a set of HTTP methods.
The table is built once at startup and is read-only afterwards; the compile
pipeline embeds it verbatim into the generated program.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple


METHOD_ANY = "ANY"


@dataclass(frozen=True)
class RouteEntry:
    """
    Single path -> document -> methods binding

    Attributes:
        path: URL path pattern (e.g., "/greet", "/users/:id")
        file: Template identifier served for the path
        methods: Upper-cased method names in configuration order;
                 "ANY" stands for every method

    Example:
        RouteEntry(path="/greet", file="hello.html", methods=("GET",))
    """
    path: str
    file: str
    methods: Tuple[str, ...] = field(default_factory=tuple)

    def any_is(self) -> bool:
        """Check if this entry accepts every method"""
        return METHOD_ANY in self.methods


@dataclass(frozen=True)
class RouteTable:
    """Ordered, immutable sequence of RouteEntry"""
    entries: Tuple[RouteEntry, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "RouteTable":
        return cls()

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def as_literal(self) -> List[Dict[str, Any]]:
        """
        Plain data form of the table, suitable for embedding as a literal.

        Returns:
            List of {"path", "file", "methods"} dicts in table order
        """
        return [
            {"path": entry.path, "file": entry.file, "methods": list(entry.methods)}
            for entry in self.entries
        ]

    @classmethod
    def from_literal(cls, data: List[Dict[str, Any]]) -> "RouteTable":
        """Rebuild a table from the output of as_literal()"""
        return cls(
            entries=tuple(
                RouteEntry(
                    path=item["path"],
                    file=item["file"],
                    methods=tuple(item.get("methods", ())),
                )
                for item in data
            )
        )
