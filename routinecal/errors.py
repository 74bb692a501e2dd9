"""
Error hierarchy for selection and export failures.

Every error here is recoverable by the caller: the CLI reports it as a
rejected command and exits with a non-zero code.

Schedule segments that don't parse are not errors; the parser drops them.
"""


class RoutineCalError(Exception):
    """
    Base exception for all routinecal errors.
    """


class SelectionError(RoutineCalError):
    """
    An operation on the user's selection was rejected.
    """


class DuplicateSelection(SelectionError):
    """
    The same session was already selected with the same kind (lecture or lab).
    """

    def __init__(self, session_id: str, kind: str) -> None:
        super().__init__(f"Session {session_id} is already selected as {kind}")
        self.session_id = session_id
        self.kind = kind


class IndexOutOfRange(SelectionError, IndexError):
    """
    Edit or remove referenced a position that no longer exists.
    """

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"No selection at index {index} (selection has {size} entries)")
        self.index = index
        self.size = size


class EmptySelection(SelectionError):
    """
    Export was requested with nothing selected.
    """

    def __init__(self, message: str = "No sessions selected") -> None:
        super().__init__(message)


class CatalogError(RoutineCalError):
    """
    The catalog feed or its local cache could not be read.
    """
