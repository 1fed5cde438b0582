"""Subprocess execution for the kubectl CLI with failure classification."""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Substrings (lowercase) of kubectl errors that mean the cluster is unreachable
# or kubectl is not configured, as opposed to a failed operation.
UNAVAILABLE_SIGNATURES = (
    "unable to connect to the server",
    "connection refused",
    "connection to the server",
    "no configuration has been provided",
    "context was not found",
    "no such file or directory",
)


_LITERAL_FLAG = "--from-literal="


def display_command(command: list[str]) -> str:
    """Command line for logs and messages, with literal secret values masked."""
    shown = []
    for arg in command:
        if arg.startswith(_LITERAL_FLAG) and "=" in arg[len(_LITERAL_FLAG):]:
            key = arg[len(_LITERAL_FLAG):].split("=", 1)[0]
            arg = f"{_LITERAL_FLAG}{key}=***"
        shown.append(arg)
    return " ".join(shown)


class CommandError(Exception):
    """Base class for classified command failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ToolUnavailableError(CommandError):
    """The tool could not be launched or could not reach its backend."""


class CommandFailedError(CommandError):
    """The tool ran and exited nonzero for an operational reason."""

    def __init__(self, command: list[str], exit_code: int, error_text: str):
        self.command = command
        self.exit_code = exit_code
        self.error_text = error_text
        super().__init__(f"Command failed ({display_command(command)}): {error_text.strip()}")


@dataclass(frozen=True)
class CommandOutput:
    exit_code: int
    stdout: str
    stderr: str

    @property
    def error_text(self) -> str:
        return self.stderr if self.stderr.strip() else self.stdout


def looks_unavailable(message: str) -> bool:
    lowered = message.lower()
    return any(signature in lowered for signature in UNAVAILABLE_SIGNATURES)


class CommandRunner:
    """Runs commands synchronously, optionally piping one into another.

    Processes are always waited for. There is no timeout: callers bound long
    operations with the tool's own flags (e.g. ``--timeout``).
    """

    def __init__(self, unavailable_message: str | None = None):
        self.unavailable_message = unavailable_message

    def run(self, command: list[str], pipe_to: list[str] | None = None) -> CommandOutput:
        """Run ``command`` (feeding its stdout into ``pipe_to`` if given).

        Raises:
            ToolUnavailableError: launch failure or a connectivity signature.
            CommandFailedError: any other nonzero exit.
        """
        output = self._checked(command)
        if pipe_to is None:
            return output
        return self._checked(pipe_to, stdin=output.stdout)

    def _checked(self, command: list[str], stdin: str | None = None) -> CommandOutput:
        output = self._execute(command, stdin)
        if output.exit_code == 0:
            return output

        error_text = output.error_text
        if looks_unavailable(error_text):
            logger.warning("Tool unavailable (exit=%d): %s", output.exit_code, command[0])
            raise ToolUnavailableError(self._unavailable(error_text))
        logger.error("Command exited %d: %s", output.exit_code, display_command(command))
        raise CommandFailedError(command, output.exit_code, error_text)

    def _execute(self, command: list[str], stdin: str | None) -> CommandOutput:
        try:
            completed = subprocess.run(
                command,
                input=stdin if stdin is not None else "",
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.warning("Could not launch %s: %s", command[0], exc)
            raise ToolUnavailableError(self._unavailable(str(exc))) from exc
        return CommandOutput(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def _unavailable(self, detail: str) -> str:
        return self.unavailable_message or detail.strip()
