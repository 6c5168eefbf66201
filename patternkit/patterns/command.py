"""
Command pattern.

Each action is an object with ``execute`` and, when it saved what it needs,
``unexecute``. :class:`CommandHistory` is the invoker: it runs commands now
or queues them for later, and keeps undo and redo stacks.
"""
from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Any, Callable, Deque, List, Optional, Sequence, Union

from patternkit.domain.events import CommandEvent
from patternkit.domain.exceptions import (
    CommandError,
    CommandExecutionError,
    UndoNotSupportedError,
)
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class Command(ABC):
    """Base class for all commands."""

    def __init__(self, description: str):
        self.description = description

    @abstractmethod
    def execute(self) -> Any:
        """Perform the action."""

    def unexecute(self) -> None:
        """Reverse the action. Commands without saved state cannot be undone."""
        raise UndoNotSupportedError(self.description)

    @property
    def undoable(self) -> bool:
        return type(self).unexecute is not Command.unexecute

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"


class CallableCommand(Command):
    """Wraps plain callables as a command."""

    def __init__(
        self,
        do: Callable[[], Any],
        undo: Optional[Callable[[], Any]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(description or getattr(do, "__name__", "callable"))
        self._do = do
        self._undo = undo

    @property
    def undoable(self) -> bool:
        return self._undo is not None

    def execute(self) -> Any:
        return self._do()

    def unexecute(self) -> None:
        if self._undo is None:
            raise UndoNotSupportedError(self.description)
        self._undo()


# =============================================================================
# FILE COMMANDS
# =============================================================================

class CreateFile(Command):
    def __init__(self, path: PathLike, contents: str):
        super().__init__(f"Create file: {path}")
        self.path = Path(path)
        self.contents = contents

    def execute(self) -> None:
        self.path.write_text(self.contents, encoding="utf-8")

    def unexecute(self) -> None:
        if self.path.exists():
            self.path.unlink()


class DeleteFile(Command):
    def __init__(self, path: PathLike):
        super().__init__(f"Delete file: {path}")
        self.path = Path(path)
        self._saved: Optional[str] = None

    def execute(self) -> None:
        if self.path.exists():
            self._saved = self.path.read_text(encoding="utf-8")
            self.path.unlink()

    def unexecute(self) -> None:
        if self._saved is not None:
            self.path.write_text(self._saved, encoding="utf-8")


class CopyFile(Command):
    def __init__(self, source: PathLike, target: PathLike):
        super().__init__(f"Copy file: {source} to {target}")
        self.source = Path(source)
        self.target = Path(target)
        self._overwritten: Optional[str] = None

    def execute(self) -> None:
        if self.target.exists():
            self._overwritten = self.target.read_text(encoding="utf-8")
        else:
            self._overwritten = None
        self.target.write_text(self.source.read_text(encoding="utf-8"), encoding="utf-8")

    def unexecute(self) -> None:
        if self._overwritten is not None:
            self.target.write_text(self._overwritten, encoding="utf-8")
        elif self.target.exists():
            self.target.unlink()


class CompositeCommand(Command):
    """Runs sub-commands in order and undoes them in reverse."""

    def __init__(self, commands: Optional[Sequence[Command]] = None, description: Optional[str] = None):
        super().__init__(description or "Composite command")
        self.commands: List[Command] = list(commands or [])

    def add_command(self, command: Command) -> "CompositeCommand":
        self.commands.append(command)
        return self

    def __lshift__(self, command: Command) -> "CompositeCommand":
        return self.add_command(command)

    def execute(self) -> None:
        """
        Execute every sub-command.

        Raises:
            CommandExecutionError: After undoing the sub-commands that already ran
        """
        done: List[Command] = []
        for command in self.commands:
            try:
                command.execute()
            except Exception as e:
                logger.warning(
                    "Sub-command failed, rolling back",
                    failed=command.description,
                    rolled_back=len(done),
                )
                self._roll_back(done)
                raise CommandExecutionError(command, e) from e
            done.append(command)

    @staticmethod
    def _roll_back(done: List[Command]) -> None:
        # Every finished sub-command gets its undo attempt, even after a failure
        for finished in reversed(done):
            try:
                finished.unexecute()
            except Exception as undo_error:
                logger.error(
                    "Rollback of sub-command failed",
                    command=finished.description,
                    error=str(undo_error),
                )

    def unexecute(self) -> None:
        for command in reversed(self.commands):
            command.unexecute()

    @property
    def undoable(self) -> bool:
        return all(command.undoable for command in self.commands)

    @property
    def description_lines(self) -> List[str]:
        return [command.description for command in self.commands]


# =============================================================================
# INVOKER
# =============================================================================

class CommandHistory:
    """Invoker keeping undo and redo stacks and a queue of deferred commands."""

    def __init__(
        self,
        max_length: int = 100,
        listener: Optional[Callable[[CommandEvent], None]] = None,
    ):
        if max_length < 1:
            raise CommandError("History length must be at least 1")
        self._done: Deque[Command] = deque(maxlen=max_length)
        self._undone: List[Command] = []
        self._queue: Deque[Command] = deque()
        self._listener = listener

    @property
    def can_undo(self) -> bool:
        return bool(self._done)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    @property
    def done(self) -> List[str]:
        return [command.description for command in self._done]

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run(self, command: Command) -> Any:
        """Execute ``command`` now and record it."""
        result = self._execute(command)
        self._done.append(command)
        self._undone.clear()
        self._publish("run", command)
        return result

    def undo(self) -> Command:
        if not self._done:
            raise CommandError("Nothing to undo")
        command = self._done[-1]
        command.unexecute()
        self._done.pop()
        self._undone.append(command)
        self._publish("undo", command)
        return command

    def redo(self) -> Command:
        if not self._undone:
            raise CommandError("Nothing to redo")
        command = self._undone[-1]
        self._execute(command)
        self._undone.pop()
        self._done.append(command)
        self._publish("redo", command)
        return command

    @staticmethod
    def _execute(command: Command) -> Any:
        try:
            return command.execute()
        except CommandError:
            raise
        except Exception as e:
            raise CommandExecutionError(command, e) from e

    def queue(self, command: Command) -> None:
        """Defer ``command`` until :meth:`flush`."""
        self._queue.append(command)

    def flush(self) -> List[Any]:
        """Run queued commands in order; stops at the first failure."""
        results = []
        while self._queue:
            command = self._queue.popleft()
            results.append(self.run(command))
        return results

    def _publish(self, action: str, command: Command) -> None:
        logger.debug("Command " + action, command=command.description)
        if self._listener:
            self._listener(
                CommandEvent(source=type(self).__name__, action=action, description=command.description)
            )
