"""Tests for the command table."""

from __future__ import annotations

import dataclasses

import pytest

from commands import COMMANDS, CommandId, descriptor, lookup_command, signature


def test_table_order_matches_ids() -> None:
    assert [c.id for c in COMMANDS] == list(CommandId)
    assert [c.name for c in COMMANDS] == [
        "read_mat",
        "print_mat",
        "add_mat",
        "sub_mat",
        "mul_mat",
        "mul_scalar",
        "trans_mat",
        "stop",
    ]


@pytest.mark.parametrize(
    ("name", "mat_inputs", "takes_scalar", "has_output", "reads_elements", "parameters_count"),
    [
        ("read_mat", 0, False, True, True, 2),
        ("print_mat", 1, False, False, False, 1),
        ("add_mat", 2, False, True, False, 3),
        ("sub_mat", 2, False, True, False, 3),
        ("mul_mat", 2, False, True, False, 3),
        ("mul_scalar", 1, True, True, False, 3),
        ("trans_mat", 1, False, True, False, 2),
        ("stop", 0, False, False, False, 0),
    ],
)
def test_arity(
    name: str,
    mat_inputs: int,
    takes_scalar: bool,
    has_output: bool,
    reads_elements: bool,
    parameters_count: int,
) -> None:
    cmd = lookup_command(name)
    assert cmd is not None
    assert (cmd.mat_inputs, cmd.takes_scalar, cmd.has_output, cmd.reads_elements, cmd.parameters_count) == (
        mat_inputs,
        takes_scalar,
        has_output,
        reads_elements,
        parameters_count,
    )
    assert descriptor(cmd.id) is cmd


@pytest.mark.parametrize("name", ["", "foo", "ADD_MAT", "add_mat ", "add_mat,"])
def test_lookup_is_exact(name: str) -> None:
    assert lookup_command(name) is None


def test_descriptors_are_frozen() -> None:
    cmd = descriptor(CommandId.ADD_MAT)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cmd.name = "plus"  # type: ignore[misc]


def test_signature() -> None:
    assert signature(descriptor(CommandId.MUL_SCALAR)) == "mul_scalar MAT, SCALAR, MAT"
    assert signature(descriptor(CommandId.READ_MAT)) == "read_mat MAT, N1, N2, ..."
    assert signature(descriptor(CommandId.STOP)) == "stop"
