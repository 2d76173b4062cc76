"""
Line-oriented command protocol on top of the store.

Each input line holds one command name followed by space-separated
arguments::

    SET a 10
    BEGIN
    NUMEQUALTO 10
    ROLLBACK
    GET a
    END
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import CommandError, InvalidArgumentsError, UnknownCommandError
from .logging import get_logger
from .store import Store

logger = get_logger("commands")

Handler = Callable[..., Optional[str]]


class CommandDispatcher:
    """Parses command lines and runs them against a ``Store``."""

    def __init__(
        self,
        store: Optional[Store] = None,
        *,
        null_token: str = "NULL",
        no_transaction_token: str = "NO TRANSACTION",
        result_prefix: str = "> ",
        echo: bool = False,
    ) -> None:
        self.store = store if store is not None else Store()
        self.null_token = null_token
        self.no_transaction_token = no_transaction_token
        self.result_prefix = result_prefix
        self.echo = echo
        self.finished = False

        # name -> (handler, number of required arguments)
        self._commands: Dict[str, Tuple[Handler, int]] = {
            "BEGIN": (self._begin, 0),
            "COMMIT": (self._commit, 0),
            "ROLLBACK": (self._rollback, 0),
            "END": (self._end, 0),
            "GET": (self._get, 1),
            "SET": (self._set, 2),
            "UNSET": (self._unset, 1),
            "NUMEQUALTO": (self._num_equal_to, 1),
        }

    @property
    def command_names(self) -> List[str]:
        """Names of the supported commands."""
        return sorted(self._commands)

    def execute(self, line: str) -> Optional[str]:
        """
        Execute a single command line.

        Args:
            line: The raw input line

        Returns:
            The line to display, or None if the command prints nothing

        Raises:
            UnknownCommandError: If the command name is not supported
            InvalidArgumentsError: If required arguments are missing
        """
        parts = line.split()
        if not parts:
            return None

        name, args = parts[0].upper(), parts[1:]
        try:
            handler, arity = self._commands[name]
        except KeyError:
            raise UnknownCommandError(f"Unknown command '{parts[0]}'", line) from None

        if len(args) < arity:
            raise InvalidArgumentsError(
                f"{name} expects {arity} argument(s), got {len(args)}", line
            )

        # trailing arguments beyond the arity are ignored
        return handler(*args[:arity])

    def run(
        self,
        lines: Iterable[str],
        on_error: Optional[Callable[[CommandError], None]] = None,
    ) -> Iterator[str]:
        """
        Execute lines in order until the input or an END command runs out.

        Yields the echoed input line first when ``echo`` is enabled, then the
        command's output if it has any. A line that fails is passed to
        ``on_error`` and skipped; without a callback the error propagates.
        """
        for raw in lines:
            if self.finished:
                break
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            if self.echo:
                yield line
            try:
                output = self.execute(line)
            except CommandError as e:
                if on_error is None:
                    raise
                on_error(e)
                continue
            if output is not None:
                yield output

    def process_input(self, text: str) -> List[str]:
        """Run a block of newline-separated commands and collect the output."""
        return list(self.run(text.splitlines()))

    def _result(self, value: object) -> str:
        return f"{self.result_prefix}{value}"

    def _begin(self) -> None:
        self.store.begin()

    def _commit(self) -> Optional[str]:
        if not self.store.commit():
            return self.no_transaction_token
        return None

    def _rollback(self) -> Optional[str]:
        if not self.store.rollback():
            return self.no_transaction_token
        return None

    def _end(self) -> None:
        logger.debug("end_of_input")
        self.finished = True

    def _get(self, key: str) -> str:
        value = self.store.get(key)
        return self._result(self.null_token if value is None else value)

    def _set(self, key: str, value: str) -> None:
        self.store.set(key, value)

    def _unset(self, key: str) -> None:
        self.store.unset(key)

    def _num_equal_to(self, value: str) -> str:
        return self._result(self.store.num_equal_to(value))


def process_input(text: str, store: Optional[Store] = None, **options) -> List[str]:
    """Run ``text`` through a fresh dispatcher and return its output lines."""
    return CommandDispatcher(store, **options).process_input(text)
