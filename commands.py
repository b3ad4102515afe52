"""Commands: the calculator's command table and lookup helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class CommandId(IntEnum):
    """Keeps ids of all commands, in table order."""

    READ_MAT = 0
    PRINT_MAT = 1
    ADD_MAT = 2
    SUB_MAT = 3
    MUL_MAT = 4
    MUL_SCALAR = 5
    TRANS_MAT = 6
    STOP = 7


@dataclass(frozen=True)
class CommandDescriptor:
    """Static metadata of one command: its name and parameter kinds.

    `parameters_count` counts the matrix and scalar parameters. The element
    list of `read_mat` is counted too, which keeps its output matrix from
    being the last parameter.
    """

    id: CommandId
    name: str
    mat_inputs: int = 0  # 0, 1 or 2
    takes_scalar: bool = False
    has_output: bool = False
    reads_elements: bool = False
    parameters_count: int = 0


COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(CommandId.READ_MAT, "read_mat", 0, False, True, True, 2),
    CommandDescriptor(CommandId.PRINT_MAT, "print_mat", 1, False, False, False, 1),
    CommandDescriptor(CommandId.ADD_MAT, "add_mat", 2, False, True, False, 3),
    CommandDescriptor(CommandId.SUB_MAT, "sub_mat", 2, False, True, False, 3),
    CommandDescriptor(CommandId.MUL_MAT, "mul_mat", 2, False, True, False, 3),
    CommandDescriptor(CommandId.MUL_SCALAR, "mul_scalar", 1, True, True, False, 3),
    CommandDescriptor(CommandId.TRANS_MAT, "trans_mat", 1, False, True, False, 2),
    CommandDescriptor(CommandId.STOP, "stop"),
)

_BY_NAME: dict[str, CommandDescriptor] = {c.name: c for c in COMMANDS}


def lookup_command(name: str) -> CommandDescriptor | None:
    """Return the descriptor whose name matches exactly, or None."""
    return _BY_NAME.get(name)


def descriptor(command_id: CommandId) -> CommandDescriptor:
    """Get descriptor by id."""
    return COMMANDS[int(command_id)]


def signature(cmd: CommandDescriptor) -> str:
    """Get a human-readable usage line, e.g. `add_mat MAT, MAT, MAT`."""
    parts: list[str] = ["MAT"] * cmd.mat_inputs
    if cmd.takes_scalar:
        parts.append("SCALAR")
    if cmd.has_output:
        parts.append("MAT")
    if cmd.reads_elements:
        parts.append("N1, N2, ...")
    if not parts:
        return cmd.name
    return f"{cmd.name} {', '.join(parts)}"
