"""Helpers for reading VarOmeter API responses.

Responses are loosely shaped: ids and statuses may sit at the top level or
under ``data``, under one of several field names. Lookups are expressed as an
ordered tuple of accessor functions; the first accessor returning a non-None
value wins.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterable

from varometer.exceptions import ExtractionError
from varometer.models import JobStatus, StatusReading

Accessor = Callable[[Mapping[str, Any]], Any]

ID_CANDIDATES: tuple[str, ...] = ("id", "projectId", "_id", "experimentId", "gwasExperimentId")
PROJECT_ID_CANDIDATES: tuple[str, ...] = ("id", "projectId", "_id")
EXPERIMENT_ID_CANDIDATES: tuple[str, ...] = ("id", "experimentId", "gwasExperimentId")
STATUS_FIELDS: tuple[str, ...] = ("status", "state")

COMPLETED_STATUSES = frozenset({"COMPLETED", "COMPLETE", "DONE", "SUCCESS"})
FAILED_STATUSES = frozenset({"FAILED", "ERROR"})
RUNNING_STATUSES = frozenset(
    {"RUNNING", "PENDING", "QUEUED", "STARTED", "IN_PROGRESS", "PROCESSING"}
)


def _top_level(name: str) -> Accessor:
    def get(response: Mapping[str, Any]) -> Any:
        return response.get(name)

    return get


def _nested_in_data(name: str) -> Accessor:
    def get(response: Mapping[str, Any]) -> Any:
        data = response.get("data")
        if isinstance(data, Mapping):
            return data.get(name)
        return None

    return get


def build_accessors(fields: Iterable[str]) -> tuple[Accessor, ...]:
    """Accessors for every field at top level, then every field under ``data``."""
    fields = tuple(fields)
    return tuple(_top_level(f) for f in fields) + tuple(_nested_in_data(f) for f in fields)


def _first_hit(response: Mapping[str, Any], accessors: tuple[Accessor, ...]) -> Any:
    for accessor in accessors:
        value = accessor(response)
        if value is not None:
            return value
    return None


def extract_id(response: Any, candidates: Iterable[str] = ID_CANDIDATES) -> str:
    """Extract an id from an API response.

    Tries each candidate field at the top level, in order, then each under
    ``data``.

    Args:
        response: Parsed API response
        candidates: Field names in priority order

    Returns:
        The first id found, as a string

    Raises:
        ExtractionError: If the response is not a mapping or has no candidate

    Example:
        >>> extract_id({"projectId": 7, "id": "abc"})
        'abc'
        >>> extract_id({"data": {"_id": "x1"}}, ("id", "_id"))
        'x1'
    """
    candidates = tuple(candidates)
    if not isinstance(response, Mapping):
        raise ExtractionError(
            candidates, reason="Response is not a mapping; cannot extract an id."
        )

    value = _first_hit(response, build_accessors(candidates))
    if value is None:
        raise ExtractionError(candidates)
    return str(value)


_STATUS_ACCESSORS = build_accessors(STATUS_FIELDS)


def extract_status(response: Any) -> Any:
    """Return the raw status of a results response, or None if absent.

    Looks at ``status``, ``state``, ``data.status`` and ``data.state`` in
    that order.
    """
    if not isinstance(response, Mapping):
        return None
    return _first_hit(response, _STATUS_ACCESSORS)


def classify_status(raw: Any) -> StatusReading:
    """Normalize a service status string into a StatusReading.

    Example:
        >>> classify_status("done").status
        <JobStatus.COMPLETED: 2>
    """
    text = str(raw).strip().upper()
    if text in COMPLETED_STATUSES:
        status = JobStatus.COMPLETED
    elif text in FAILED_STATUSES:
        status = JobStatus.FAILED
    elif text in RUNNING_STATUSES:
        status = JobStatus.RUNNING
    else:
        status = JobStatus.UNKNOWN
    return StatusReading(status=status, raw=text)


def has_payload(response: Any) -> bool:
    """True when a response carries any content (non-empty mapping, list or text)."""
    if response is None:
        return False
    if isinstance(response, (Mapping, list, tuple, str)):
        return len(response) > 0
    return True
