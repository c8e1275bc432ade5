"""Addressing table produced by the resolver."""

from __future__ import annotations

from collections.abc import Iterator

from treelox.model.expressions import Expression


class ResolutionTable:
    """Maps a reference node (by identity) to its scope distance.

    Distance 0 is the innermost enclosing scope.  References that are
    absent from the table are globals and are looked up by name.

    The table holds a reference to every node it addresses, so a node's
    ``id()`` cannot be recycled by another node while the table lives.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Expression, int]] = {}

    def record(self, node: Expression, depth: int) -> None:
        self._entries[id(node)] = (node, depth)

    def depth_of(self, node: Expression) -> int | None:
        entry = self._entries.get(id(node))
        if entry is None:
            return None
        return entry[1]

    def merge(self, other: ResolutionTable) -> None:
        """Absorb the entries of another (later) unit's table."""
        self._entries.update(other._entries)

    def depths(self) -> dict[int, int]:
        """Plain ``{node id: depth}`` snapshot."""
        return {key: depth for key, (_node, depth) in self._entries.items()}

    def __contains__(self, node: object) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[Expression, int]]:
        return iter(self._entries.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolutionTable):
            return NotImplemented
        return self.depths() == other.depths()

    def __repr__(self) -> str:
        return f"ResolutionTable({len(self)} locals)"
