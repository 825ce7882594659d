"""
Simple FSM

A minimal finite state machine with named transitions and per-state listeners.
"""

__version__ = "0.1.0"

from .core import (
    WILDCARD,
    FSMInstance,
    Transition,
    TransitionCallback,
)
from .config import FSMConfig
from .exceptions import (
    FSMError,
    TransitionError,
    UnknownTransitionError,
    IllegalTransitionError,
    DuplicateTransitionError,
    DefinitionError,
)
from .loader import from_dict, from_yaml, from_file

__all__ = [
    "WILDCARD",
    "FSMInstance",
    "Transition",
    "TransitionCallback",
    "FSMConfig",
    "FSMError",
    "TransitionError",
    "UnknownTransitionError",
    "IllegalTransitionError",
    "DuplicateTransitionError",
    "DefinitionError",
    "from_dict",
    "from_yaml",
    "from_file",
]
