# inout/template.py
"""
Load the built-in steering template (templates/steering_template.yaml).
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml
from cerberus import Validator

from core.exceptions import TemplateError
from core.steering import SteeringParameterSet, Value
from utils.logging_config import get_logger

logger = get_logger(__name__)

TEMPLATE_PATH = Path(__file__).parent / "templates" / "steering_template.yaml"

# Cerberus schema for the template resource
TEMPLATE_SCHEMA: Dict[str, Any] = {
    'parameters': {
        'type': 'list',
        'required': True,
        'minlength': 1,
        'schema': {
            'type': 'dict',
            'schema': {
                'name': {'type': 'string', 'required': True, 'empty': False},
                'value': {
                    'type': ['boolean', 'integer', 'float', 'string', 'list'],
                    'required': True,
                    'nullable': False,
                },
            },
        },
    },
}


@lru_cache(maxsize=None)
def _load_template() -> Tuple[Tuple[str, Value], ...]:
    try:
        raw = yaml.safe_load(TEMPLATE_PATH.read_text(encoding="utf-8"))
    except OSError as e:
        raise TemplateError(f"Steering template resource not found: {TEMPLATE_PATH}") from e
    except yaml.YAMLError as e:
        raise TemplateError(f"Failed to read steering template '{TEMPLATE_PATH}': {e}") from e

    if not isinstance(raw, dict):
        raise TemplateError(f"Steering template '{TEMPLATE_PATH}' is not a mapping.")
    validator = Validator(TEMPLATE_SCHEMA, allow_unknown=False)
    if not validator.validate(raw):
        raise TemplateError(f"Steering template schema validation errors: {validator.errors}")

    # Read-only after this point; generate_template() wraps it in new sets.
    steering = SteeringParameterSet((entry['name'], entry['value']) for entry in raw['parameters'])
    logger.debug("Loaded %d template parameters from %s", len(steering), TEMPLATE_PATH)
    return tuple(steering.items())


def generate_template() -> SteeringParameterSet:
    """
    Return the built-in baseline steering parameters.

    The result has no ``source_file``; the resource is read once per process.

    Raises:
        TemplateError: If the template resource is missing or invalid.
    """
    return SteeringParameterSet(_load_template())
