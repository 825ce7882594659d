"""Shared fixtures for state machine tests."""
import pytest

from simple_fsm import FSMConfig, FSMInstance


@pytest.fixture
def config():
    return FSMConfig(metrics_enabled=True, dev_mode=False)


@pytest.fixture
def machine(config):
    """idle <-> running machine from the README."""
    return (FSMInstance("idle", config=config)
            .set("start", "idle", "running")
            .set("stop", "running", "idle"))


@pytest.fixture
def calls():
    """List collecting (instance, from_state, to_state) listener calls."""
    return []
