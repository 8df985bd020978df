# wrkr/state.py
"""
Observation snapshot loading.

A snapshot is either a bare JSON array of observation records or an object
``{"version", "target": {"mode", "value"}, "findings": [...]}``. Entries that
cannot be read as records become ``parse_error`` observations so they still
flow through policy and scoring.
"""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from wrkr.core.config import settings
from wrkr.core.constants import FindingType, SeverityLevel
from wrkr.core.errors import InvalidInputError
from wrkr.core.jsonvalue import as_list, as_map, first_string
from wrkr.schemas.base import WrkrModel
from wrkr.schemas.finding import Finding, sort_findings

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "v1"
STATE_DETECTOR = "state"


class Target(WrkrModel):
    mode: str = ""
    value: str = ""


class Snapshot(WrkrModel):
    version: str = SNAPSHOT_VERSION
    target: Optional[Target] = None
    findings: List[Finding] = []


def resolve_state_path(explicit: Optional[str] = None) -> str:
    if explicit and explicit.strip():
        return explicit
    return settings.STATE_PATH


def invalid_record(path: str, index: int, message: str) -> Finding:
    return Finding(
        finding_type=FindingType.PARSE_ERROR.value,
        severity=SeverityLevel.MEDIUM.value,
        tool_type=STATE_DETECTOR,
        location=path,
        detector=STATE_DETECTOR,
        parse_error={
            "kind": "invalid_record",
            "format": "json",
            "path": path,
            "detector": STATE_DETECTOR,
            "message": f"entry {index}: {message}",
        },
    )


def parse_records(entries: List[Any], path: str) -> List[Finding]:
    findings = []
    for index, entry in enumerate(entries):
        fields = as_map(entry)
        if fields is None:
            findings.append(invalid_record(path, index, "record is not a JSON object"))
            continue
        try:
            findings.append(Finding.model_validate(fields))
        except ValidationError as e:
            findings.append(invalid_record(path, index, f"{e.error_count()} invalid field(s)"))
    return sort_findings(findings)


def parse_snapshot(document: Any, path: str) -> Snapshot:
    entries = as_list(document)
    if entries is not None:
        return Snapshot(findings=parse_records(entries, path))

    fields = as_map(document)
    if fields is None:
        raise InvalidInputError(f"parse state {path}: expected a JSON array or object")
    raw_findings = fields.get("findings")
    entries = as_list(raw_findings) if raw_findings is not None else []
    if entries is None:
        raise InvalidInputError(f"parse state {path}: 'findings' must be an array")

    target = as_map(fields.get("target"))
    return Snapshot(
        version=first_string(fields, "version") or SNAPSHOT_VERSION,
        target=Target(
            mode=first_string(target, "mode") or "",
            value=first_string(target, "value") or "",
        ) if target is not None else None,
        findings=parse_records(entries, path),
    )


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Read an observation snapshot; unreadable or non-JSON files raise InvalidInputError."""
    location = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidInputError(f"read state {location}: {e}") from e
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"parse state {location}: {e}") from e

    snapshot = parse_snapshot(document, location)
    logger.info("Snapshot loaded", extra={"source": location, "findings": len(snapshot.findings)})
    return snapshot
