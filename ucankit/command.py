"""Commands: slash-separated verbs that a UCAN grants or invokes."""

from __future__ import annotations

SEPARATOR = "/"


class CommandError(ValueError):
    """Raised when a string is not a valid command."""

    message = "invalid command"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class RequiresLeadingSlashError(CommandError):
    """The command does not start with a slash."""

    message = "a command requires a leading slash character"


class DisallowsTrailingSlashError(CommandError):
    """The command ends with a slash."""

    message = "a command must not include a trailing slash"


class RequiresLowercaseError(CommandError):
    """The command contains upper-case characters."""

    message = "UCAN path segments must must not contain upper-case characters"


class Command(str):
    """A leading slash optionally followed by slash-separated lower-case segments."""

    __slots__ = ()

    def join(self, *segments: str) -> Command:  # type: ignore[override]
        """Append segments to this command, separated by slashes."""
        if not any(segments):
            return self
        result = str(self)
        for segment in segments:
            if segment:
                if len(result) > 1:
                    result += SEPARATOR
                result += segment
        return Command(result)

    def segments(self) -> list[str]:
        """The ordered segments that make up the command."""
        if self == SEPARATOR:
            return []
        return str(self).split(SEPARATOR)[1:]

    def covers(self, other: str) -> bool:
        """Tell whether this command is identical to, or a parent of, ``other``."""
        if not other.startswith(self):
            return False
        return (
            self == SEPARATOR
            or len(self) == len(other)
            or other[len(self)] == SEPARATOR
        )

    def __repr__(self) -> str:
        return f"Command({str(self)!r})"


def top() -> Command:
    """The wildcard command, the most powerful capability."""
    return Command(SEPARATOR)


def new(*args: str) -> Command:
    """Build a command from the top command and the given segments."""
    return top().join(*args)


def parse(s: str) -> Command:
    """Validate ``s`` and return it as a Command."""
    if not s.startswith(SEPARATOR):
        raise RequiresLeadingSlashError()
    if len(s) > 1 and s.endswith(SEPARATOR):
        raise DisallowsTrailingSlashError()
    if s != s.lower():
        raise RequiresLowercaseError()
    return Command(s)


def is_valid(s: str) -> bool:
    """Tell whether ``s`` is a valid command."""
    try:
        parse(s)
    except CommandError:
        return False
    return True