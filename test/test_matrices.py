"""Tests for matrix kernels and the slot registry."""

from __future__ import annotations

import pytest

import matrices
from config import MATRIX_SIZE, SLOT_NAMES
from matrices import SlotRegistry

A = matrices.from_elements(range(1, 17))
IDENTITY = matrices.from_elements([1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1])


def test_from_elements_zero_fills_and_truncates() -> None:
    m = matrices.from_elements([1, 2, 3])
    assert m[0] == (1.0, 2.0, 3.0, 0.0)
    assert m[1:] == matrices.zero_matrix()[1:]
    assert matrices.from_elements(range(40)) == matrices.from_elements(range(16))


def test_add_sub() -> None:
    doubled = matrices.add(A, A)
    assert doubled[3][3] == 32.0
    assert matrices.sub(doubled, A) == A


def test_mul_by_identity_and_square() -> None:
    assert matrices.mul(A, IDENTITY) == A
    assert matrices.mul(IDENTITY, A) == A
    sq = matrices.mul(A, A)
    # first row of A times first column of A: 1*1 + 2*5 + 3*9 + 4*13
    assert sq[0][0] == 90.0
    assert sq[3][3] == 13 * 4 + 14 * 8 + 15 * 12 + 16 * 16


def test_mul_scalar_and_transpose() -> None:
    assert matrices.mul_scalar(A, 2.5)[1][0] == 12.5
    t = matrices.transpose(A)
    assert t[0] == (1.0, 5.0, 9.0, 13.0)
    assert matrices.transpose(t) == A


def test_format_matrix() -> None:
    text = matrices.format_matrix(matrices.from_elements([1.005, -2.5, 1000]))
    lines = text.split("\n")
    assert len(lines) == MATRIX_SIZE + 1
    assert lines[-1] == ""
    assert lines[0] == f"{1.005:<9.2f}\t-2.50    \t1000.00  \t0.00     \t"
    assert lines[1] == "0.00     \t" * MATRIX_SIZE


def test_registry_lookup(slots: SlotRegistry) -> None:
    assert len(slots) == len(SLOT_NAMES) == 6
    for i, name in enumerate(SLOT_NAMES):
        assert slots.index_of(name) == i
        assert slots.get(i) == matrices.zero_matrix()
    assert slots.index_of("MAT_G") is None
    assert slots.index_of("mat_a") is None
    assert slots.index_of("") is None


def test_registry_install_replaces_value(slots: SlotRegistry) -> None:
    slots.install(2, A)
    assert slots.by_name("MAT_C") == A
    assert slots.snapshot()["MAT_C"][3] == [13.0, 14.0, 15.0, 16.0]
    assert slots.by_name("MAT_A") == matrices.zero_matrix()


def test_registry_rejects_bad_shapes(slots: SlotRegistry) -> None:
    with pytest.raises(ValueError):
        slots.install(0, ((1.0, 2.0), (3.0, 4.0)))
    with pytest.raises(KeyError):
        slots.by_name("MAT_Z")
