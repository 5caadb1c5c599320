# ============================================================================
# MODULE CONTEXT - CSAPI PARAMETER ENCODERS
# ============================================================================
# STATUS: Core - Query parameter encoders and validators
# PURPOSE: Encode z / datetime / bbox values into CSAPI query-string form
# EXPORTS: z_parameter_to_string, datetime_parameter_to_string, bbox_to_string,
#          validate_crs, extract_parameters
# DEPENDENCIES: pydantic, datetime, typing
# SCOPE: Pure functions, no I/O
# VALIDATION: Pydantic TypeAdapter for mapping input
# ============================================================================

"""
CSAPI Parameter Encoders

Pure value-to-string functions used by the query builder while assembling a
query string, plus the small validators shared with the resource layer.

Encodings:
    z (vertical levels):
        single      850           -> "850"
        interval    100..550      -> "100/550"
        list        [10, 80, 200] -> "10,80,200"
        repeating   R20 from 100  -> "R20/100/50"

    datetime:
        instant                  -> "2025-01-01T00:00:00.000Z"
        {start}                  -> "2025-01-01T00:00:00.000Z/.."
        {end}                    -> "../2025-01-01T00:00:00.000Z"
        {start, end}             -> "<start>/<end>"
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from .exceptions import MalformedParameterError, UnsupportedCrsError
from .models import (
    CSAPIParameter,
    DateTimeInterval,
    ZInterval,
    ZList,
    ZParameter,
    ZRepeating,
    ZSingle,
)

_z_parameter_adapter = TypeAdapter(ZParameter)


def _format_number(value: Union[int, float]) -> str:
    """Render a level the way the server expects: no trailing '.0' on integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ============================================================================
# VERTICAL LEVEL (z)
# ============================================================================

def z_parameter_to_string(z: Union[ZSingle, ZInterval, ZList, ZRepeating, Mapping[str, Any]]) -> str:
    """
    Convert a structured z parameter into its query-string form.

    Args:
        z: ZParameter variant, or a mapping with a ``type`` tag
           (e.g. ``{"type": "single", "level": 850}``)

    Returns:
        Encoded vertical level string

    Raises:
        MalformedParameterError: If a mapping does not describe a known variant
        TypeError: If ``z`` is a model type the encoder does not handle
    """
    if isinstance(z, Mapping):
        try:
            z = _z_parameter_adapter.validate_python(z)
        except ValidationError as e:
            raise MalformedParameterError(f"Invalid z parameter: {e}") from e

    if isinstance(z, ZSingle):
        return _format_number(z.level)
    if isinstance(z, ZInterval):
        return f"{_format_number(z.min_level)}/{_format_number(z.max_level)}"
    if isinstance(z, ZList):
        return ",".join(_format_number(level) for level in z.levels)
    if isinstance(z, ZRepeating):
        return f"R{_format_number(z.repeat)}/{_format_number(z.min_level)}/{_format_number(z.step)}"

    raise TypeError(f"Unhandled z parameter variant: {type(z).__name__}")


# ============================================================================
# DATETIME
# ============================================================================

def _format_datetime(value: datetime) -> str:
    """ISO 8601 with millisecond precision in UTC ('Z' suffix). Naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def datetime_parameter_to_string(param: Union[datetime, DateTimeInterval, Mapping[str, Any]]) -> str:
    """
    Convert an instant or a time interval into a CSAPI datetime string.

    Args:
        param: datetime instant, DateTimeInterval, or mapping with
               ``start`` and/or ``end``

    Returns:
        Encoded datetime string (open bounds rendered as '..')

    Raises:
        MalformedParameterError: If neither start nor end is given
    """
    if isinstance(param, datetime):
        return _format_datetime(param)

    if isinstance(param, Mapping):
        try:
            param = DateTimeInterval.model_validate(param)
        except ValidationError as e:
            raise MalformedParameterError(f"Invalid datetime parameter: {e}") from e

    if not isinstance(param, DateTimeInterval):
        raise MalformedParameterError(
            f"Invalid datetime parameter: expected datetime or interval, got {type(param).__name__}"
        )

    if param.start is not None and param.end is not None:
        return f"{_format_datetime(param.start)}/{_format_datetime(param.end)}"
    if param.start is not None:
        return f"{_format_datetime(param.start)}/.."
    if param.end is not None:
        return f"../{_format_datetime(param.end)}"

    raise MalformedParameterError("Invalid datetime parameter: interval needs a start or an end")


# ============================================================================
# BOUNDING BOX / CRS / PARAMETERS
# ============================================================================

def bbox_to_string(bbox: Sequence[Sequence[float]]) -> str:
    """
    Convert a 2D bounding box to "minX,minY,maxX,maxY".

    Args:
        bbox: [[minX, minY], [maxX, maxY]]

    Raises:
        MalformedParameterError: If bbox is not exactly two coordinate pairs
    """
    try:
        well_formed = len(bbox) == 2 and len(bbox[0]) == 2 and len(bbox[1]) == 2
    except TypeError:
        well_formed = False

    if not well_formed:
        raise MalformedParameterError("Invalid bbox format. Expected [[minX, minY], [maxX, maxY]]")

    (min_x, min_y), (max_x, max_y) = bbox
    return ",".join(_format_number(v) for v in (min_x, min_y, max_x, max_y))


def validate_crs(crs: str, supported: Sequence[str]) -> str:
    """
    Check that a CRS is in the supported list.

    Returns:
        The CRS unchanged

    Raises:
        UnsupportedCrsError: Names the CRS and lists the supported ones
    """
    if crs not in supported:
        raise UnsupportedCrsError(crs, supported=supported)
    return crs


def extract_parameters(parameter_block: Dict[str, CSAPIParameter]) -> List[CSAPIParameter]:
    """Return the parameter descriptors of a ``parameter_names`` block, in key order."""
    return list(parameter_block.values())
