"""
Exceptions raised by the finite state machine.
"""

from typing import Sequence


class FSMError(Exception):
    """Base class for all state machine errors"""
    pass


class TransitionError(FSMError, ValueError):
    """A transition was misused: unknown, illegal from here, or redefined"""
    pass


class UnknownTransitionError(TransitionError):
    """Raised by move() for a transition name that was never registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"FSMInstance.move(): not found transition '{name}'")


class IllegalTransitionError(TransitionError):
    """Raised by move() when the current state is not a permitted source"""

    def __init__(self, name: str, expected: Sequence[str], actual: str):
        self.name = name
        self.expected = tuple(expected)
        self.actual = actual
        super().__init__(
            f"FSMInstance.move(): current state expected is "
            f"'{','.join(self.expected)}', actual is '{actual}'"
        )


class DuplicateTransitionError(TransitionError):
    """Raised by set() for a transition name that already exists"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"FSMInstance.set(): transition '{name}' already exists")


class DefinitionError(FSMError, ValueError):
    """Malformed state machine definition"""
    pass
