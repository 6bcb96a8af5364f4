from collections import deque

from calculator_config import HISTORY_CAPACITY

# Separator between the expression and the result in every history line
RESULT_SEPARATOR = " = "

# Shown in place of the list while the log is empty
EMPTY_HISTORY_MESSAGE = "No history yet."


def format_entry(expression: str, result: str) -> str:
    return f"{expression}{RESULT_SEPARATOR}{result}"


def split_entry(entry: str) -> tuple[str, str] | None:
    """
    Split "<expression> = <result>" into its two halves.

    The split happens at the LAST separator so the result is always the text
    after the final " = ". Returns None for lines without a separator.
    """
    expression, sep, result = entry.rpartition(RESULT_SEPARATOR)
    if not sep or not result:
        return None
    return expression, result


class HistoryLog:
    """Completed calculations, newest first, bounded to a fixed capacity."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        # deque(maxlen) drops from the right end, which is the oldest entry
        self._entries: deque[str] = deque(maxlen=capacity)

    @property
    def entries(self) -> list[str]:
        """Snapshot of the log, newest first."""
        return list(self._entries)

    def append(self, entry: str) -> None:
        self._entries.appendleft(entry)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
