"""
Core finite state machine: named transitions, legality checks and
per-state listeners.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple, Union

from typing_extensions import Final, Protocol

from . import metrics
from .config import FSMConfig
from .exceptions import (
    DuplicateTransitionError,
    IllegalTransitionError,
    UnknownTransitionError,
)

logger = logging.getLogger(__name__)

# Any source list containing this token matches every current state
WILDCARD: Final = "*"


class TransitionCallback(Protocol):
    """Listener invoked after a transition lands on a state"""

    def __call__(self, instance: "FSMInstance", from_state: str, to_state: str) -> None:
        ...


@dataclass(frozen=True)
class Transition:
    """Represents a named transition from a set of sources to one destination"""
    name: str
    sources: Tuple[str, ...]
    dest: str
    wildcard: bool = False

    @classmethod
    def build(cls, name: str, sources: Union[str, Iterable[str]], dest: str) -> "Transition":
        """Normalize sources and collapse them to the wildcard if '*' is present"""
        if isinstance(sources, str):
            sources = (sources,)
        else:
            sources = tuple(sources)

        if WILDCARD in sources:
            return cls(name=name, sources=(WILDCARD,), dest=dest, wildcard=True)
        return cls(name=name, sources=sources, dest=dest)

    def allows(self, state: str) -> bool:
        return self.wildcard or state in self.sources


class FSMInstance:
    """
    A finite state machine.

    Transitions are registered by name with set(), checked with can() and
    performed with move(). Listeners registered with on() run synchronously,
    in registration order, whenever a transition lands on their state.
    Every mutating call returns the instance so calls can be chained.
    """

    def __init__(self,
                 initial: str,
                 name: str = "fsm",
                 config: Optional[FSMConfig] = None):
        """
        Initialize state machine.

        Args:
            initial: Initial state, need not appear in any transition
            name: Name used in log lines and metric labels
            config: Behaviour switches, read from the environment if omitted
        """
        self.name = name
        self.config = config if config is not None else FSMConfig.from_env()
        self._state = initial
        self._states: Set[str] = {initial}
        self._transitions: Dict[str, Transition] = {}
        self._paths: Dict[str, Set[str]] = {}
        self._listeners: Dict[str, List[TransitionCallback]] = {}

    def __repr__(self) -> str:
        return f"<FSMInstance {self.name!r} state={self._state!r}>"

    @property
    def state(self) -> str:
        """Current state"""
        return self._state

    @property
    def states(self) -> FrozenSet[str]:
        """All states seen so far: the initial state, every source and every destination"""
        return frozenset(self._states)

    @property
    def transitions(self) -> Mapping[str, Transition]:
        return MappingProxyType(self._transitions)

    def on(self, state: str, listener: TransitionCallback) -> "FSMInstance":
        """Register a listener for transitions landing on state"""
        self._listeners.setdefault(state, []).append(listener)
        return self

    def off(self, state: str, listener: Optional[TransitionCallback] = None) -> "FSMInstance":
        """
        Unregister listeners for state.

        Without a listener every listener for the state is dropped. Otherwise
        only the first entry identical to listener is removed.
        """
        if listener is None:
            self._listeners.pop(state, None)
            return self

        listeners = self._listeners.get(state, [])
        for i, registered in enumerate(listeners):
            if registered is listener:
                del listeners[i]
                break
        return self

    def can(self, name: str) -> bool:
        """Check whether the named transition is allowed from the current state"""
        transition = self._transitions.get(name)
        if transition is None:
            return False
        return transition.allows(self._state)

    def available(self) -> List[str]:
        """Names of all transitions allowed from the current state"""
        return sorted(name for name in self._transitions if self.can(name))

    def reachable(self, state: str) -> FrozenSet[str]:
        """Destinations registered from state, excluding the bare wildcard token"""
        return frozenset(self._paths.get(state, ()))

    def move(self, name: str) -> "FSMInstance":
        """
        Perform the named transition and run the destination's listeners.

        Raises:
            UnknownTransitionError: No transition with that name exists
            IllegalTransitionError: The current state is not a permitted source
        """
        transition = self._transitions.get(name)
        if transition is None:
            logger.warning(f"{self.name}: move to unknown transition '{name}'")
            self._count_error('unknown')
            raise UnknownTransitionError(name)

        if not transition.allows(self._state):
            logger.warning(
                f"{self.name}: transition '{name}' not allowed from '{self._state}'"
            )
            self._count_error('illegal')
            raise IllegalTransitionError(name, transition.sources, self._state)

        from_state = self._state
        dest = transition.dest
        self._state = dest

        if self.config.metrics_enabled:
            metrics.record_transition(self.name, name, from_state, dest)
        logger.info(f"{self.name}: {from_state} -> {dest} via {name}")

        listeners = self._listeners.get(dest)
        if listeners:
            if self.config.metrics_enabled:
                with metrics.LISTENER_DISPATCH.labels(machine=self.name).time():
                    self._dispatch(list(listeners), from_state, dest)
            else:
                self._dispatch(list(listeners), from_state, dest)
        return self

    def set(self, name: str, sources: Union[str, Iterable[str]], dest: str) -> "FSMInstance":
        """
        Register a transition.

        Args:
            name: Unique transition name
            sources: A state or sequence of states the transition may start from.
                Including '*' makes the transition valid from any state.
            dest: State the transition lands on

        Raises:
            DuplicateTransitionError: A transition with that name already exists
        """
        if name in self._transitions:
            logger.warning(f"{self.name}: transition '{name}' already registered")
            self._count_error('duplicate')
            raise DuplicateTransitionError(name)

        if isinstance(sources, str):
            sources = (sources,)
        else:
            sources = tuple(sources)

        transition = Transition.build(name, sources, dest)
        self._transitions[name] = transition
        self._states.add(dest)
        # Explicit sources mixed with the wildcard are still recorded
        for source in sources:
            if source == WILDCARD:
                continue
            self._states.add(source)
            self._paths.setdefault(source, set()).add(dest)

        logger.debug(
            f"{self.name}: added transition '{name}': {list(transition.sources)} -> {dest}"
        )
        return self

    def _dispatch(self, listeners: List[TransitionCallback], from_state: str, dest: str):
        # Iterates a snapshot: on()/off() during dispatch apply from the next transition
        for listener in listeners:
            if self.config.dev_mode:
                logger.debug(f"{self.name}: calling listener {listener!r} for '{dest}'")
            listener(self, from_state, dest)

    def _count_error(self, reason: str):
        if self.config.metrics_enabled:
            metrics.record_error(self.name, reason)
