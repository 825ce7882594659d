"""
Build state machines from dictionary or YAML definitions.

A definition looks like::

    name: door
    initial: closed
    transitions:
      - name: open
        from: closed
        to: opened
      - name: close
        from: [opened, ajar]
        to: closed
"""

import logging
from pathlib import Path
from typing import Any, Dict, IO, Optional, Union

import yaml

from .config import FSMConfig
from .core import FSMInstance
from .exceptions import DefinitionError

logger = logging.getLogger(__name__)


def _check_transition(index: int, trans_data: Any):
    """Reject transition entries with missing keys or non-string states"""
    if not isinstance(trans_data, dict):
        raise DefinitionError(f"Transition #{index} must be a mapping")

    missing = [key for key in ('name', 'from', 'to') if key not in trans_data]
    if missing:
        raise DefinitionError(
            f"Transition #{index} is missing {', '.join(missing)}"
        )

    for key in ('name', 'to'):
        if not isinstance(trans_data[key], str):
            raise DefinitionError(
                f"Transition #{index} '{key}' must be a string, "
                f"got {type(trans_data[key]).__name__}"
            )

    sources = trans_data['from']
    if isinstance(sources, str):
        return
    if not isinstance(sources, list) or not sources or \
            not all(isinstance(source, str) for source in sources):
        raise DefinitionError(
            f"Transition #{index} 'from' must be a string or a list of strings"
        )


def from_dict(data: Dict[str, Any], config: Optional[FSMConfig] = None) -> FSMInstance:
    """Create a state machine from a parsed definition"""
    if not isinstance(data, dict):
        raise DefinitionError(f"Definition must be a mapping, got {type(data).__name__}")
    if 'initial' not in data:
        raise DefinitionError("Definition has no 'initial' state")

    fsm = FSMInstance(data['initial'], name=data.get('name') or 'fsm', config=config)

    for index, trans_data in enumerate(data.get('transitions') or []):
        _check_transition(index, trans_data)
        fsm.set(trans_data['name'], trans_data['from'], trans_data['to'])

    logger.debug(f"Loaded {fsm.name} with {len(fsm.transitions)} transitions")
    return fsm


def from_yaml(source: Union[str, IO[str]], config: Optional[FSMConfig] = None) -> FSMInstance:
    """Create a state machine from YAML text or an open stream"""
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML definition: {e}") from e
    return from_dict(data, config=config)


def from_file(filepath: Union[str, Path], config: Optional[FSMConfig] = None) -> FSMInstance:
    """Load a state machine definition from a YAML file"""
    filepath = Path(filepath)

    with open(filepath, 'r', encoding='utf-8') as f:
        return from_yaml(f, config=config)
