"""Matrices: fixed-size matrix values, arithmetic kernels and the slot registry.

Matrices are immutable tuples of rows. Kernels never modify their inputs,
they return a fresh value which the registry installs into the output slot.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from config import MATRIX_SIZE, SLOT_NAMES

Matrix = tuple[tuple[float, ...], ...]


def zero_matrix(size: int = MATRIX_SIZE) -> Matrix:
    """Create a size x size matrix filled with zeros."""
    return tuple(tuple(0.0 for _ in range(size)) for _ in range(size))


def from_elements(elements: Sequence[float], size: int = MATRIX_SIZE) -> Matrix:
    """Build a matrix from row-major elements.

    Cells past the end of `elements` are zero-filled, extra elements are ignored.
    """
    cells = [float(v) for v in elements[: size * size]]
    cells += [0.0] * (size * size - len(cells))
    return tuple(tuple(cells[i * size : (i + 1) * size]) for i in range(size))


def add(a: Matrix, b: Matrix) -> Matrix:
    return tuple(tuple(x + y for x, y in zip(ra, rb)) for ra, rb in zip(a, b))


def sub(a: Matrix, b: Matrix) -> Matrix:
    return tuple(tuple(x - y for x, y in zip(ra, rb)) for ra, rb in zip(a, b))


def mul(a: Matrix, b: Matrix) -> Matrix:
    """Matrix product a x b."""
    size = len(a)
    return tuple(tuple(sum(a[i][k] * b[k][j] for k in range(size)) for j in range(size)) for i in range(size))


def mul_scalar(a: Matrix, scalar: float) -> Matrix:
    return tuple(tuple(scalar * x for x in row) for row in a)


def transpose(a: Matrix) -> Matrix:
    return tuple(tuple(col) for col in zip(*a))


def format_matrix(a: Matrix) -> str:
    """Render a matrix the way `print_mat` shows it.

    Every element is left-aligned in 9 columns with 2 decimals and followed
    by a tab; each row ends with a newline.
    """
    lines: list[str] = []
    for row in a:
        lines.append("".join(f"{v:<9.2f}\t" for v in row))
    return "\n".join(lines) + "\n"


class SlotRegistry:
    """Owner of the named matrix slots.

    Callers read slots as immutable values and replace a slot only through
    `install`, so a failed computation can never leave a slot half-written.
    """

    names: tuple[str, ...]
    size: int
    _slots: list[Matrix]

    def __init__(self, names: Iterable[str] = SLOT_NAMES, size: int = MATRIX_SIZE) -> None:
        """Create the registry with every slot zero-filled."""
        self.names = tuple(names)
        self.size = int(size)
        self._index = {n: i for i, n in enumerate(self.names)}
        self._slots = [zero_matrix(self.size) for _ in self.names]

    def __len__(self) -> int:
        return len(self._slots)

    def index_of(self, name: str) -> int | None:
        """Return the slot index for `name`, or None for an unknown name."""
        return self._index.get(name)

    def get(self, index: int) -> Matrix:
        return self._slots[index]

    def by_name(self, name: str) -> Matrix:
        idx = self.index_of(name)
        if idx is None:
            msg = f"unknown matrix slot {name!r}"
            raise KeyError(msg)
        return self._slots[idx]

    def install(self, index: int, value: Matrix) -> None:
        """Replace the matrix held by slot `index` with `value`."""
        if len(value) != self.size or any(len(row) != self.size for row in value):
            msg = f"matrix must be {self.size}x{self.size}"
            raise ValueError(msg)
        logging.debug("SlotRegistry: %s replaced", self.names[index])
        self._slots[index] = value

    def snapshot(self) -> dict[str, list[list[float]]]:
        """Plain-list copy of every slot, keyed by slot name."""
        return {n: [list(row) for row in self._slots[i]] for i, n in enumerate(self.names)}
