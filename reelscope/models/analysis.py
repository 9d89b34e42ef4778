"""Top-level result of the content pipeline (extraction + compliance)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from reelscope.models.compliance import ComplianceReport, MediaSpecs, RightsSignal
from reelscope.models.extraction import ExtractionTrace
from reelscope.models.record import CanonicalRecord


class ContentAnalysis(BaseModel):
    """Everything the pipeline learned about one piece of content.

    ``trace`` is ``None`` for local-file analysis, where no strategy chain
    runs.  ``media_specs`` and ``rights`` are ``None`` when no local media
    file was supplied.
    """

    model_config = ConfigDict(frozen=True)

    record: CanonicalRecord
    report: ComplianceReport
    trace: ExtractionTrace | None = None
    media_specs: MediaSpecs | None = None
    rights: RightsSignal | None = None
