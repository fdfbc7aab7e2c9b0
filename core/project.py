# core/project.py
"""
Hand-over points between a steering set and the rest of a TELEMAC project:
file names supplied by the geometry and boundary-condition tools, an
optional check of private variables against the geometry, and the final
write before the solver is started.
"""
from os import PathLike, fspath
from typing import Iterable, List, Optional, Union

from core.exceptions import SteeringError
from core.steering import SteeringParameterSet
from inout.cas_parser import parse_steering_text
from inout.cas_writer import serialize_steering, write_steering_file
from utils.logging_config import get_logger

logger = get_logger(__name__)

PRIVATE_VARIABLES_KEY = "NAMES OF PRIVATE VARIABLES"
GEOMETRY_FILE_KEY = "GEOMETRY FILE"
BOUNDARY_CONDITIONS_FILE_KEY = "BOUNDARY CONDITIONS FILE"


def check_private_variables(steering: SteeringParameterSet, geometry_variables: Iterable[str]) -> List[str]:
    """
    Return the private variable names declared in the steering set that the
    geometry does not provide. Names are compared trimmed and case-blind.
    The check is advisory: missing names are logged, never raised.
    """
    declared = steering.get(PRIVATE_VARIABLES_KEY)
    if declared is None:
        return []
    names = declared if isinstance(declared, tuple) else (declared,)
    available = {str(name).strip().upper() for name in geometry_variables}
    missing = [str(name).strip() for name in names if str(name).strip().upper() not in available]
    if missing:
        logger.warning("Private variables not found in the geometry: %s", ", ".join(missing))
    return missing


def attach_input_files(steering: SteeringParameterSet,
                       geometry_file: Optional[Union[str, PathLike]] = None,
                       boundary_conditions_file: Optional[Union[str, PathLike]] = None) -> SteeringParameterSet:
    updates = {}
    if geometry_file is not None:
        updates[GEOMETRY_FILE_KEY] = fspath(geometry_file)
    if boundary_conditions_file is not None:
        updates[BOUNDARY_CONDITIONS_FILE_KEY] = fspath(boundary_conditions_file)
    return steering.merge(updates)


def prepare_steering_file(steering: SteeringParameterSet, path: Optional[Union[str, PathLike]] = None) -> str:
    """
    Write the steering file the solver will be started with.

    The serialized text is parsed back first; the file is only written when
    it reproduces the set exactly.

    Returns:
        The path written.

    Raises:
        SteeringError: If the text does not reproduce the set, or no path is known.
        OSError: If the file cannot be written.
    """
    reparsed = parse_steering_text(serialize_steering(steering))
    if reparsed != steering:
        changed = [key for key in steering if key not in reparsed or reparsed[key] != steering[key]]
        raise SteeringError(f"Serialized steering text does not reproduce parameter(s): {', '.join(changed)}")
    return write_steering_file(steering, path)
