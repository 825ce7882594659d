"""
Prometheus metrics shared by all state machine instances.

Metrics are registered once in the default registry and labelled by
machine name, so any number of instances can coexist in one process.
"""

from prometheus_client import Counter, Histogram

TRANSITIONS = Counter(
    'simple_fsm_transitions_total',
    'Total successful state transitions',
    labelnames=['machine', 'transition', 'from_state', 'to_state']
)

TRANSITION_ERRORS = Counter(
    'simple_fsm_transition_errors_total',
    'Total rejected transition operations',
    labelnames=['machine', 'reason']
)

LISTENER_DISPATCH = Histogram(
    'simple_fsm_listener_dispatch_seconds',
    'Time spent running listeners after a transition',
    labelnames=['machine'],
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1)
)


def record_transition(machine: str, transition: str, from_state: str, to_state: str):
    TRANSITIONS.labels(
        machine=machine,
        transition=transition,
        from_state=from_state,
        to_state=to_state
    ).inc()


def record_error(machine: str, reason: str):
    TRANSITION_ERRORS.labels(machine=machine, reason=reason).inc()
