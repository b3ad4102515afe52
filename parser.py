"""Module: tokenize and validate one calculator input line.

This module contains:
- LineCursor: character-level primitives over a single buffered line
- Diagnostic / Invocation / ParseResult records
- read_mat_parameter / read_scalar_parameter / read_elements validators
- parse_line(line, slots) -> ParseResult

Every validator reports failure by returning a Diagnostic; nothing here
raises for malformed input. A line yields at most one diagnostic.
"""

from __future__ import annotations

# ruff: noqa: A005
import logging
from dataclasses import dataclass
from enum import Enum

from commands import CommandDescriptor, lookup_command
from config import MATRIX_SIZE
from matrices import SlotRegistry

TERMINATOR = "\n"
WHITES = (" ", "\t")
MAX_ELEMENTS = MATRIX_SIZE * MATRIX_SIZE

# chars that may directly follow an identifier for it to count as an unknown matrix name
_NAME_ENDINGS = (TERMINATOR, " ", "\t", ",")
_NUMBER_STARTS = (".", "-")


def is_mat_char(c: str) -> bool:
    """Matrix names consist of upper case letters and underscores only."""
    return ("A" <= c <= "Z") or c == "_"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


class LineCursor:
    """Cursor over one line of input with single-char lookahead.

    The buffer always ends with a line terminator; reading past the end
    keeps returning the terminator.
    """

    text: str
    pos: int

    def __init__(self, line: str) -> None:
        """Wrap `line`, appending a terminator when it has none."""
        self.text = line if line.endswith(TERMINATOR) else line + TERMINATOR
        self.pos = 0

    def current(self) -> str:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return TERMINATOR

    def advance(self) -> str:
        """Consume and return the current char."""
        c = self.current()
        if self.pos < len(self.text):
            self.pos += 1
        return c

    def skip_whites(self) -> str:
        """Skip spaces and tabs, return the first other char (not consumed)."""
        while self.current() in WHITES:
            self.pos += 1
        return self.current()

    def peek(self) -> str:
        """Skip whitespace and return the next char without consuming it."""
        return self.skip_whites()

    def skip_line(self) -> None:
        """Discard the rest of the line."""
        self.pos = len(self.text)

    def read_command(self) -> str:
        """Read the command word: the first run of non-whitespace chars."""
        self.skip_whites()
        start = self.pos
        while not self.current().isspace():
            self.pos += 1
        word = self.text[start : self.pos]
        self.skip_whites()
        return word

    def read_identifier(self) -> tuple[str, str]:
        """Consume `[A-Z_]*`, return (name, first non-matching char)."""
        start = self.pos
        while is_mat_char(self.current()):
            self.pos += 1
        return self.text[start : self.pos], self.current()

    def read_number(self) -> tuple[float, int]:
        """Read `-?digits(.digits)?` and return (value, digits_count).

        A lone `-` or `.` is consumed but gives zero digits, so callers can
        tell it apart from a real `0`.
        """
        sign = 1.0
        if self.current() == "-":
            sign = -1.0
            self.pos += 1

        start = self.pos
        while _is_digit(self.current()):
            self.pos += 1
        int_part = self.text[start : self.pos]

        frac_part = ""
        if self.current() == ".":
            self.pos += 1
            start = self.pos
            while _is_digit(self.current()):
                self.pos += 1
            frac_part = self.text[start : self.pos]

        digits = len(int_part) + len(frac_part)
        if not digits:
            return 0.0, 0
        return sign * float(f"{int_part or '0'}.{frac_part or '0'}"), digits


class Severity(Enum):
    ERROR = "Error"
    WARNING = "Warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single user-facing message about a line."""

    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


def _error(message: str) -> Diagnostic:
    return Diagnostic(Severity.ERROR, message)


def _warning(message: str) -> Diagnostic:
    return Diagnostic(Severity.WARNING, message)


@dataclass(frozen=True)
class Invocation:
    """A fully validated command, ready for dispatch.

    `inputs` and `output` are slot indices; `elements` holds the values
    actually read by `read_mat` (at most MAX_ELEMENTS of them).
    """

    command: CommandDescriptor
    inputs: tuple[int, ...] = ()
    output: int | None = None
    scalar: float | None = None
    elements: tuple[float, ...] = ()


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one line: an invocation, a diagnostic, both (warning) or neither (blank line)."""

    invocation: Invocation | None = None
    diagnostic: Diagnostic | None = None

    @property
    def accepted(self) -> bool:
        return self.invocation is not None


# --- matrix parameters ---
def _mat_parameter_error(name: str, known: bool, last: bool, next_char: str, c: str) -> Diagnostic:
    """Pick the one diagnostic for a rejected matrix parameter.

    `next_char` is the char right after the identifier, `c` the first
    non-white char after it. Checks run in priority order.
    """
    if last and c != TERMINATOR and known:
        return _error("extraneous text at end of command")
    if not last and is_mat_char(c) and known:
        return _error("missing comma")
    if c == TERMINATOR and (not name or (not last and known)):
        return _error("too few arguments")
    if not name and c == ",":
        return _error("multiple consecutive commas")
    if not is_mat_char(c) and known:
        return _error(f'illegal character "{c}" following matrix name')
    if not known and next_char in _NAME_ENDINGS:
        return _error(f'unknown matrix "{name}"')
    return _error("matrix name must contain only uppercase letters and underscores")


def read_mat_parameter(cur: LineCursor, slots: SlotRegistry, last: bool) -> tuple[int | None, Diagnostic | None]:
    """Read one matrix name and its separator.

    The last parameter of a command must be followed by the line terminator,
    any other by a comma (which is consumed). Returns (slot_index, None) on
    success and (None, diagnostic) otherwise.
    """
    name, next_char = cur.read_identifier()
    index = slots.index_of(name)
    c = cur.skip_whites()

    if index is not None:
        if last and c == TERMINATOR:
            return index, None
        if not last and c == ",":
            cur.advance()
            cur.skip_whites()
            return index, None

    logging.debug("matrix parameter rejected: name=%r next=%r peek=%r last=%s", name, next_char, c, last)
    return None, _mat_parameter_error(name, index is not None, last, next_char, c)


# --- scalar parameter ---
def _scalar_parameter_error(digits: int, c: str, nxt: str) -> Diagnostic:
    """Pick the diagnostic for a rejected scalar.

    `c` is the char after the number when digits were read, else the char
    the number should have started with; `nxt` is the current lookahead.
    """
    if c in _NUMBER_STARTS and not digits:
        return _error(f"illegal character '{c}'")
    if not digits and nxt == ",":
        return _error("multiple consecutive commas")
    # a scalar is never the last parameter, so a terminator here means arguments are missing
    if nxt == TERMINATOR:
        return _error("too few arguments")
    if digits:
        return _error(f"illegal character '{c}' following scalar")
    return _error(f"illegal character '{c}'")


def read_scalar_parameter(cur: LineCursor) -> tuple[float | None, Diagnostic | None]:
    """Read a number that must be followed by a comma."""
    c = cur.peek()
    value, digits = cur.read_number()
    if digits:
        c = cur.peek()
        if c == ",":
            cur.advance()
            cur.skip_whites()
            return value, None

    logging.debug("scalar parameter rejected: digits=%d char=%r", digits, c)
    return None, _scalar_parameter_error(digits, c, cur.peek())


# --- element list ---
def read_elements(cur: LineCursor, limit: int = MAX_ELEMENTS) -> tuple[tuple[float, ...], Diagnostic | None]:
    """Read up to `limit` comma separated numbers.

    Reading stops at the first value not followed by a comma. Anything after
    the `limit`-th value is ignored. A short list yields a warning when the
    line simply ended or had an empty field, and an error for anything else.
    """
    values: list[float] = []
    prefix = cur.peek()
    digits = 0
    while len(values) < limit:
        value, digits = cur.read_number()
        if not digits:
            break
        values.append(value)
        if cur.peek() != ",":
            break
        cur.advance()
        prefix = cur.peek()

    n = len(values)
    if n >= limit:
        return tuple(values), None

    c = cur.peek()
    if prefix in _NUMBER_STARTS and not digits:
        diag = _error(f"illegal character '{prefix}', only {n} elements read")
    elif _is_digit(c) or c in _NUMBER_STARTS:
        diag = _error(f"elements must be comma separated, only {n} elements read")
    elif c == TERMINATOR:
        diag = _warning(f"too few elements, only {n} elements read")
    elif c == ",":
        diag = _warning(f"multiple consecutive commas, only {n} elements read")
    else:
        diag = _error(f"illegal character '{c}', only {n} elements read")
    return tuple(values), diag


# --- whole line ---
def _read_parameters(cmd: CommandDescriptor, cur: LineCursor, slots: SlotRegistry) -> ParseResult:
    """Read the parameters of `cmd` in order: inputs, scalar, output, elements."""
    remaining = cmd.parameters_count

    inputs: list[int] = []
    for _ in range(cmd.mat_inputs):
        index, diag = read_mat_parameter(cur, slots, last=remaining == 1)
        remaining -= 1
        if index is None:
            return ParseResult(diagnostic=diag)
        inputs.append(index)

    scalar: float | None = None
    if cmd.takes_scalar:
        scalar, diag = read_scalar_parameter(cur)
        remaining -= 1
        if scalar is None:
            return ParseResult(diagnostic=diag)

    output: int | None = None
    if cmd.has_output:
        output, diag = read_mat_parameter(cur, slots, last=remaining == 1)
        remaining -= 1
        if output is None:
            return ParseResult(diagnostic=diag)

    elements: tuple[float, ...] = ()
    warning: Diagnostic | None = None
    if cmd.reads_elements:
        elements, warning = read_elements(cur)
        if warning is not None and warning.severity is Severity.ERROR:
            return ParseResult(diagnostic=warning)

    cur.skip_line()
    inv = Invocation(cmd, tuple(inputs), output, scalar, elements)
    return ParseResult(inv, warning)


def parse_line(line: str, slots: SlotRegistry) -> ParseResult:
    """Tokenize and validate one input line against the command table."""
    cur = LineCursor(line)
    word = cur.read_command()
    if not word:
        return ParseResult()

    cmd = lookup_command(word)
    if cmd is None:
        logging.debug("unknown command %r", word)
        return ParseResult(diagnostic=_error(f'unknown command "{word}"'))

    if cur.peek() == ",":
        cur.skip_line()
        return ParseResult(diagnostic=_error("invalid comma after command, skipping line"))

    result = _read_parameters(cmd, cur, slots)
    logging.debug("parsed %s: accepted=%s diagnostic=%s", cmd.name, result.accepted, result.diagnostic)
    return result
