# patch_tracker/gate.py
from __future__ import annotations

from dataclasses import replace

from .models import ExtractionResult, GateDecision, TrackedGame


def decide(record: TrackedGame, result: ExtractionResult) -> GateDecision:
    """
    Apply an extraction result to a catalog record, or not.

    Applies when the result claims to be newer, or when the record still
    holds a placeholder version. Only truthy extracted fields overwrite;
    an empty value never wipes a good one.
    """
    if not (result.is_newer or record.has_placeholder_version):
        return GateDecision(record=record, changed=False)

    updated = replace(
        record,
        version=result.version or record.version,
        last_updated=result.date or record.last_updated,
        description=result.summary or record.description,
    )
    return GateDecision(record=updated, changed=updated != record)
