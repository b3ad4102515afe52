"""Calculator (LineSource + dispatcher loop) and CLI wrapper.

Provides the interactive read-echo-validate-dispatch loop over the matrix
slots, logging initialization and a `run_text` helper for driving the
calculator programmatically.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from collections.abc import Callable
from typing import Any, TextIO

import matrices
from commands import COMMANDS, CommandId, signature
from config import ConfigError, load_config
from matrices import SlotRegistry
from parser import Invocation, ParseResult, parse_line

LOGFILE = "calculator.log"

BANNER = (
    "This is the simple matrix calculator program.\n"
    "Please enter your input line by line, each line\n"
    "must be terminated with a line break. The marker\n"
    '">>>" marks a new line where you can enter your\n'
    "next input. Each line must start with a command followed\n"
    "by any number of spaces or tabs, then by the desired parameters\n"
    "separated by commas (and any number of spaces or tabs).\n"
    'When you\'re done, please terminate the program by calling\n'
    'the "stop" command.'
)

# run states reported by Calculator.run
STOPPED = "stopped"
EOF = "eof"
OVERFLOW = "overflow"


def init_logging(logfile: str = LOGFILE, debug: bool = False, console: bool = False) -> None:
    """Configure root logger to write to `logfile`.

    If debug=True set DEBUG level. If console=True also echo logs to stderr,
    so that they never mix with the calculator's own output on stdout.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    lvl = logging.DEBUG if debug else logging.CRITICAL
    root.setLevel(lvl)

    if debug:
        file_fmt = "%(levelname)s %(name)s:%(filename)s:%(lineno)d %(message)s"
    else:
        file_fmt = "%(levelname)-5s %(message)s"

    # always create a FileHandler even when not debug to allow easier inspection if asked
    fh = logging.FileHandler(logfile, mode="w", encoding="utf-8")
    fh.setLevel(lvl)
    fh.setFormatter(logging.Formatter(file_fmt))
    root.addHandler(fh)

    if debug and console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(lvl)
        ch.setFormatter(logging.Formatter("%(levelname)5s %(message)s"))
        root.addHandler(ch)


class LineSource:
    """Reads bounded lines from a stream and echoes each one to `out`.

    A line must fit in `max_line_size - 1` chars including its terminator.
    A longer line, or end of input before a terminator, is fatal: a message
    is printed, `state` is set and no further lines are read.
    """

    stream: TextIO
    out: TextIO
    max_line_size: int
    state: str | None

    def __init__(self, stream: TextIO, out: TextIO, max_line_size: int = 2048) -> None:
        """Create a LineSource reading `stream` and echoing to `out`."""
        self.stream = stream
        self.out = out
        self.max_line_size = int(max_line_size)
        self.state = None

    def read_line(self) -> str | None:
        """Read and echo one line. Returns it with its terminator, or None when fatal."""
        if self.state is not None:
            return None
        raw = self.stream.readline(self.max_line_size - 1)
        terminated = raw.endswith("\n")
        content = raw[:-1] if terminated else raw
        self.out.write(content + "\n")
        if terminated:
            return raw

        if len(raw) >= self.max_line_size - 1:
            self.state = OVERFLOW
            self.out.write(f"Error: line should be up to {self.max_line_size} chars, terminating...\n")
        else:
            self.state = EOF
            self.out.write("Error: End of File character detected, terminating...\n")
        logging.debug("LineSource: fatal %s after %d chars", self.state, len(raw))
        return None


class Calculator:
    """Validates lines and dispatches accepted invocations onto the slot registry."""

    out: TextIO
    slots: SlotRegistry
    halted: bool

    def __init__(self, out: TextIO, slots: SlotRegistry | None = None) -> None:
        """Create a Calculator writing results and diagnostics to `out`."""
        self.out = out
        self.slots = slots if slots is not None else SlotRegistry()
        self.halted = False

        self._binary_kernels: dict[CommandId, Callable[[matrices.Matrix, matrices.Matrix], matrices.Matrix]] = {
            CommandId.ADD_MAT: matrices.add,
            CommandId.SUB_MAT: matrices.sub,
            CommandId.MUL_MAT: matrices.mul,
        }
        self._handlers: dict[CommandId, Callable[[Invocation], None]] = {
            CommandId.READ_MAT: self._handle_read,
            CommandId.PRINT_MAT: self._handle_print,
            CommandId.ADD_MAT: self._handle_binary,
            CommandId.SUB_MAT: self._handle_binary,
            CommandId.MUL_MAT: self._handle_binary,
            CommandId.MUL_SCALAR: self._handle_mul_scalar,
            CommandId.TRANS_MAT: self._handle_transpose,
            CommandId.STOP: self._handle_stop,
        }

    # --- handlers ---
    def _handle_stop(self, inv: Invocation) -> None:
        self.halted = True

    def _handle_read(self, inv: Invocation) -> None:
        assert inv.output is not None
        self.slots.install(inv.output, matrices.from_elements(inv.elements, self.slots.size))

    def _handle_print(self, inv: Invocation) -> None:
        self.out.write(matrices.format_matrix(self.slots.get(inv.inputs[0])))

    def _handle_binary(self, inv: Invocation) -> None:
        assert inv.output is not None
        kernel = self._binary_kernels[inv.command.id]
        a, b = (self.slots.get(i) for i in inv.inputs)
        self.slots.install(inv.output, kernel(a, b))

    def _handle_mul_scalar(self, inv: Invocation) -> None:
        assert inv.output is not None and inv.scalar is not None
        self.slots.install(inv.output, matrices.mul_scalar(self.slots.get(inv.inputs[0]), inv.scalar))

    def _handle_transpose(self, inv: Invocation) -> None:
        assert inv.output is not None
        self.slots.install(inv.output, matrices.transpose(self.slots.get(inv.inputs[0])))

    # --- main entry points ---
    def dispatch(self, inv: Invocation) -> None:
        """Execute a validated invocation."""
        logging.debug(
            "dispatch %s inputs=%s output=%s scalar=%s elements=%d",
            inv.command.name,
            [self.slots.names[i] for i in inv.inputs],
            None if inv.output is None else self.slots.names[inv.output],
            inv.scalar,
            len(inv.elements),
        )
        self._handlers[inv.command.id](inv)

    def process_line(self, line: str) -> ParseResult:
        """Validate one line, print its diagnostic (if any) and dispatch it when accepted."""
        result = parse_line(line, self.slots)
        if result.diagnostic is not None:
            self.out.write(f"{result.diagnostic}\n")
        if result.invocation is not None:
            self.dispatch(result.invocation)
        return result

    def run(self, source: LineSource, prompt: str = ">>> ") -> str:
        """Prompt, read and process lines until `stop` or a fatal input condition."""
        while not self.halted:
            self.out.write(prompt)
            self.out.flush()
            line = source.read_line()
            if line is None:
                return source.state or EOF
            self.process_line(line)
        logging.debug("stop command received")
        return STOPPED


def usage() -> str:
    """List every command with its parameters, one per line."""
    return "\n".join(signature(c) for c in COMMANDS)


# ---------- Public API ----------
def run_text(text: str, config: dict[str, Any] | None = None) -> tuple[str, str, SlotRegistry]:
    """Run the calculator over `text` and return (stdout, state, slots)."""
    cfg = load_config(config)
    out = io.StringIO()
    if cfg["banner"]:
        out.write(BANNER + "\n")
    calc = Calculator(out)
    source = LineSource(io.StringIO(text), out, cfg["max_line_size"])
    state = calc.run(source, cfg["prompt"])
    return out.getvalue(), state, calc.slots


# ---------- CLI ----------
def main(argv: list[str] | None = None) -> int:
    """Run the interactive calculator on stdin/stdout."""
    ap = argparse.ArgumentParser(
        description="Matrix calculator. Reads commands line by line from stdin.",
        epilog="commands:\n" + usage(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("--config", help="path to yaml config", default=None)

    help_debug = "enable debug logging to logfile (parser decisions and dispatches)."
    help_logfile = "path to calculator log (default: from config)"
    help_console = "also echo logs to stderr (only when --debug)"
    ap.add_argument("--debug", action="store_true", help=help_debug)
    ap.add_argument("--logfile", default=None, help=help_logfile)
    ap.add_argument("--console", action="store_true", help=help_console)
    ap.add_argument("--no-banner", action="store_true", help="do not print the welcome text")
    args = ap.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print("Bad config:", e)
        return 2

    init_logging(
        logfile=args.logfile or cfg["logfile"],
        debug=args.debug or cfg["debug"],
        console=args.console,
    )

    if cfg["banner"] and not args.no_banner:
        print(BANNER)

    calc = Calculator(sys.stdout)
    source = LineSource(sys.stdin, sys.stdout, cfg["max_line_size"])
    state = calc.run(source, cfg["prompt"])
    sys.stdout.flush()
    logging.debug("calculator finished: %s", state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
