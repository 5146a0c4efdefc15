"""Cleanup plans: steps, their execution and command formatting."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, TextIO, Tuple

_UNSAFE_CHARS = frozenset(" \t\n'\"\\$`!*?[]{}()<>|&;")


class CleanupError(Exception):
    """Raised when a cleanup plan cannot be carried out.

    ``results`` holds the results of the steps handled before the failure.
    """

    def __init__(self, message: str, results: Iterable["StepResult"] = ()) -> None:
        super().__init__(message)
        self.results: List[StepResult] = list(results)


@dataclass(frozen=True)
class Step:
    """One argv-form command of a cleanup plan, run without shell expansion."""

    description: str
    command: Tuple[str, ...] = ()
    destructive: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", tuple(self.command))

    def is_valid(self) -> bool:
        return bool(self.description) and bool(self.command) and bool(self.command[0])


@dataclass
class StepResult:
    """Outcome of handling one step."""

    step: Step
    executed: bool = False
    error: str = ""


class Runner(Protocol):
    """Runs one argv-form command, raising an exception on failure."""

    def run(self, command: Sequence[str]) -> None:
        """Run ``command``; raise if it fails."""


class ExecRunner:
    """Runs commands as child processes."""

    def run(self, command: Sequence[str]) -> None:
        formatted = format_command(command)
        try:
            completed = subprocess.run(
                list(command),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as exc:
            raise CleanupError(f"{formatted}: {exc}") from exc
        if completed.returncode != 0:
            output = completed.stdout.decode(errors="replace").strip()
            raise CleanupError(
                f"{formatted}: exit status {completed.returncode}: {output}"
            )


def execute(
    out: TextIO,
    steps: Iterable[Step],
    *,
    dry_run: bool = False,
    force: bool = False,
    runner: Optional[Runner] = None,
) -> List[StepResult]:
    """Carry out ``steps`` in order, writing progress to ``out``.

    Dry runs execute nothing; destructive steps are skipped unless ``force``.
    Stops at the first failing step and raises :class:`CleanupError`.
    """
    if runner is None:
        runner = ExecRunner()

    results: List[StepResult] = []
    for step in steps:
        if not step.is_valid():
            raise CleanupError(f"invalid cleanup step: {step!r}", results)

        result = StepResult(step=step)
        out.write(f"- {step.description}\n  command: {format_command(step.command)}\n")

        if dry_run:
            out.write("  status: dry-run\n")
            results.append(result)
            continue

        if step.destructive and not force:
            out.write("  status: skipped, requires --force\n")
            results.append(result)
            continue

        try:
            runner.run(step.command)
        except Exception as exc:
            result.error = str(exc)
            results.append(result)
            out.write(f"  status: failed: {result.error}\n")
            raise CleanupError(result.error, results) from exc

        result.executed = True
        out.write("  status: executed\n")
        results.append(result)

    return results


def format_command(command: Sequence[str]) -> str:
    """Render an argv list as a shell-quoted string for display."""
    return " ".join(_quote_arg(arg) for arg in command)


def _quote_arg(arg: str) -> str:
    if arg == "":
        return "''"
    if any(char in _UNSAFE_CHARS for char in arg):
        return "'" + arg.replace("'", "'\\''") + "'"
    return arg