"""End-to-end content analysis: extraction plus compliance evaluation.

``analyze_url`` runs the extraction orchestrator and, when the caller also
has the media file, probes it and runs the music-rights check before
evaluating compliance.  ``analyze_file`` evaluates an uploaded file on its
own, with a record assembled from the probe metadata.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import structlog

from reelscope.interfaces.media_probe_provider import IMediaProbeProvider
from reelscope.models.analysis import ContentAnalysis
from reelscope.models.compliance import MediaSpecs, RightsSignal
from reelscope.models.record import Author, CanonicalRecord, Platform, QualityTier, SourceKind
from reelscope.pipeline.orchestrator import ExtractionOrchestrator
from reelscope.services.compliance_evaluator import ComplianceEvaluator
from reelscope.services.rights_service import RightsService
from reelscope.utils.logging import get_logger
from reelscope.utils.normalizers import extract_hashtags


def record_from_specs(specs: MediaSpecs, platform: Platform) -> CanonicalRecord:
    """Build a ``basic``-tier record describing a local media file."""
    path = Path(specs.path)
    content_id = hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:16]
    title = specs.title or path.stem
    return CanonicalRecord(
        content_id=content_id,
        url=path.resolve().as_uri(),
        platform=platform,
        title=title,
        description=specs.comment or "",
        author=Author(username=specs.artist, display_name=specs.artist),
        hashtags=extract_hashtags(title, specs.comment),
        duration_seconds=int(round(specs.duration_seconds)),
        quality_tier=QualityTier.BASIC,
        is_authentic=False,
        provenance=SourceKind.LOCAL_FILE.value,
    )


class ContentPipeline:
    """Compose extraction, media probing, rights checking and compliance.

    ``media_probe`` and ``rights_service`` are optional; without them a
    supplied media file cannot be inspected and the affected checks fall
    back to manual review.
    """

    def __init__(
        self,
        orchestrator: ExtractionOrchestrator,
        evaluator: ComplianceEvaluator,
        media_probe: IMediaProbeProvider | None = None,
        rights_service: RightsService | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._evaluator = evaluator
        self._media_probe = media_probe
        self._rights_service = rights_service
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def analyze_url(
        self,
        url: str,
        media_path: Path | str | None = None,
        deadline: float | None = None,
    ) -> ContentAnalysis:
        """Extract *url* and evaluate it, optionally with its media file.

        Errors from extraction (unsupported platform, exhausted chain) and
        from probing a missing media file propagate to the caller.
        """
        result = await self._orchestrator.extract(url, deadline=deadline)
        specs, rights = await self._inspect_media(media_path)
        report = self._evaluator.evaluate(result.record, rights_signal=rights, media_specs=specs)
        self._logger.info(
            "content_analyzed",
            url=url,
            tier=result.record.quality_tier.value,
            score=report.overall_score,
            compliant=report.compliant,
        )
        return ContentAnalysis(
            record=result.record,
            trace=result.trace,
            report=report,
            media_specs=specs,
            rights=rights,
        )

    async def analyze_file(self, path: Path | str, platform: Platform) -> ContentAnalysis:
        """Evaluate a local media file against *platform*'s rules."""
        specs, rights = await self._inspect_media(path)
        if specs is None:
            specs = MediaSpecs(path=str(path), probe_method="none")
        record = record_from_specs(specs, platform)
        report = self._evaluator.evaluate(record, rights_signal=rights, media_specs=specs)
        self._logger.info(
            "file_analyzed",
            path=str(path),
            platform=platform.value,
            score=report.overall_score,
            compliant=report.compliant,
        )
        return ContentAnalysis(record=record, report=report, media_specs=specs, rights=rights)

    async def _inspect_media(
        self, media_path: Path | str | None
    ) -> tuple[MediaSpecs | None, RightsSignal | None]:
        if media_path is None or self._media_probe is None:
            return None, None
        path = Path(media_path)
        specs = await self._media_probe.probe(path)
        rights: RightsSignal | None = None
        if self._rights_service is not None:
            rights = await self._rights_service.analyze(path, has_audio=specs.has_audio)
        return specs, rights
