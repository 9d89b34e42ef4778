"""Platform-eligibility checklist and weighted compliance score.

:class:`ComplianceEvaluator` runs a fixed list of independent checks over a
canonical record, optionally enriched with local media specs and a rights
signal.  Each check is a small pure method returning a
:class:`~reelscope.models.compliance.ComplianceCheck` plus any violation
and recommendation text it wants to contribute.

Rules of the checklist:

* Every check carries weight 1.0; the score is
  ``round(passed weight / total weight * 100)``, rounding halves up.
* Violations are emitted only for a concrete numeric breach (duration,
  resolution, file size, protected-music confidence).
* An unknown input (duration ``0``, no media specs, rights unavailable)
  fails its check with a manual-review note and emits no violation.
* Recommendations are always emitted, including positive-path advice when
  every check passes.

The evaluator holds only configuration, so one instance is safely shared
across concurrent calls.  Reports are never cached.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from reelscope.models.compliance import (
    ComplianceCheck,
    ComplianceReport,
    MediaSpecs,
    PlatformRules,
    RightsSignal,
    RightsStatus,
)
from reelscope.models.record import CanonicalRecord, Platform
from reelscope.utils.logging import get_logger

_MB = 1024 * 1024

DEFAULT_PLATFORM_RULES: dict[Platform, PlatformRules] = {
    Platform.TIKTOK: PlatformRules(
        min_duration_seconds=3,
        max_duration_seconds=180,
        monetization_min_seconds=60,
        min_short_edge=540,
        min_long_edge=960,
        max_file_size_bytes=287 * _MB,
        native_resolutions=("720x1280", "1080x1920"),
    ),
    Platform.YOUTUBE: PlatformRules(
        min_duration_seconds=1,
        max_duration_seconds=43200,
        monetization_min_seconds=None,
        min_short_edge=360,
        min_long_edge=640,
        max_file_size_bytes=256 * 1024 * _MB,
    ),
}

CHECK_NAMES: tuple[str, ...] = (
    "duration_bounds",
    "monetization_duration",
    "resolution",
    "file_size",
    "music_rights",
    "originality",
    "duet_stitch",
    "advertising",
    "community_guidelines",
    "account_eligibility",
)

_REPOST_MARKERS = re.compile(
    r"\b(download(?:ed)?|re-?upload(?:ed)?|repost(?:ed)?|copy|not mine|credit(?:s)? to|no copyright)\b",
    re.IGNORECASE,
)

_GENERAL_RECOMMENDATIONS: tuple[str, ...] = (
    "Use relevant trending hashtags to increase reach",
    "Add captions or on-screen text to make the content accessible",
    "Check audio clarity and lighting before publishing",
)

_MANUAL_PLACEHOLDERS: dict[str, str] = {
    "advertising": "Paid promotion and branded content must be disclosed; review manually",
    "community_guidelines": "Community guidelines compliance cannot be verified automatically",
    "account_eligibility": "Account age, region and follower thresholds must be confirmed manually",
}


@dataclass
class _Outcome:
    check: ComplianceCheck
    violations: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def _fmt_seconds(value: float) -> str:
    return f"{value:g}s"


def _manual(name: str, details: str, *recommendations: str) -> _Outcome:
    return _Outcome(
        check=ComplianceCheck(name=name, passed=False, details=details, needs_manual_review=True),
        recommendations=list(recommendations),
    )


def _passed(name: str, details: str) -> _Outcome:
    return _Outcome(check=ComplianceCheck(name=name, passed=True, details=details))


def _breach(name: str, violation: str, recommendation: str) -> _Outcome:
    return _Outcome(
        check=ComplianceCheck(name=name, passed=False, details=violation),
        violations=[violation],
        recommendations=[recommendation],
    )


def score_checks(checks: list[ComplianceCheck] | tuple[ComplianceCheck, ...]) -> int:
    """Weighted pass percentage, rounded half up."""
    total = sum(c.weight for c in checks)
    if total <= 0:
        return 0
    passed = sum(c.weight for c in checks if c.passed)
    return int(math.floor(passed / total * 100 + 0.5))


class ComplianceEvaluator:
    """Evaluate records against per-platform :class:`PlatformRules`.

    Parameters
    ----------
    rules:
        Per-platform thresholds; platforms missing from the mapping fall
        back to :data:`DEFAULT_PLATFORM_RULES`.
    """

    def __init__(self, rules: dict[Platform, PlatformRules] | None = None) -> None:
        self._rules = dict(DEFAULT_PLATFORM_RULES)
        if rules:
            self._rules.update(rules)
        self._logger = get_logger(__name__)

    def rules_for(self, platform: Platform) -> PlatformRules:
        return self._rules.get(platform, PlatformRules())

    def evaluate(
        self,
        record: CanonicalRecord,
        rights_signal: RightsSignal | None = None,
        media_specs: MediaSpecs | None = None,
    ) -> ComplianceReport:
        """Run every check and assemble the report.  Pure and deterministic."""
        rules = self.rules_for(record.platform)
        duration = self._duration(record, media_specs)

        outcomes = [
            self._check_duration_bounds(duration, rules),
            self._check_monetization(duration, rules),
            self._check_resolution(media_specs, rules),
            self._check_file_size(media_specs, rules),
            self._check_music_rights(rights_signal, rules),
            self._check_originality(record),
            self._check_duet_stitch(media_specs, rules),
        ]
        outcomes.extend(
            _Outcome(
                check=ComplianceCheck(
                    name=name, passed=True, details=details, needs_manual_review=True
                )
            )
            for name, details in _MANUAL_PLACEHOLDERS.items()
        )

        checks = [o.check for o in outcomes]
        violations = [v for o in outcomes for v in o.violations]
        recommendations: list[str] = []
        for outcome in outcomes:
            recommendations.extend(outcome.recommendations)
        if all(c.passed for c in checks):
            recommendations.insert(
                0,
                f"Content meets every automated {record.platform.value} check; "
                "keep the current format",
            )
        recommendations.extend(_GENERAL_RECOMMENDATIONS)

        report = ComplianceReport(
            platform=record.platform.value,
            checks=tuple(checks),
            violations=tuple(violations),
            recommendations=tuple(dict.fromkeys(recommendations)),
            overall_score=score_checks(checks),
        )
        self._logger.debug(
            "compliance_evaluated",
            platform=report.platform,
            score=report.overall_score,
            violations=len(report.violations),
        )
        return report

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    @staticmethod
    def _duration(record: CanonicalRecord, specs: MediaSpecs | None) -> float:
        if specs is not None and specs.duration_seconds > 0:
            return specs.duration_seconds
        return float(record.duration_seconds)

    def _check_duration_bounds(self, duration: float, rules: PlatformRules) -> _Outcome:
        name = "duration_bounds"
        if duration <= 0:
            return _manual(
                name,
                "Duration unknown; verify the length manually",
                "Make sure the media file is valid so its duration can be read",
            )
        if rules.min_duration_seconds is not None and duration < rules.min_duration_seconds:
            return _breach(
                name,
                f"Duration {_fmt_seconds(duration)} is below the "
                f"{_fmt_seconds(rules.min_duration_seconds)} minimum",
                f"Make the video at least {_fmt_seconds(rules.min_duration_seconds)} long",
            )
        if rules.max_duration_seconds is not None and duration > rules.max_duration_seconds:
            return _breach(
                name,
                f"Duration {_fmt_seconds(duration)} exceeds the "
                f"{_fmt_seconds(rules.max_duration_seconds)} maximum",
                f"Trim the video to at most {_fmt_seconds(rules.max_duration_seconds)}",
            )
        return _passed(name, f"Duration {_fmt_seconds(duration)} is within platform limits")

    def _check_monetization(self, duration: float, rules: PlatformRules) -> _Outcome:
        name = "monetization_duration"
        minimum = rules.monetization_min_seconds
        if minimum is None:
            return _passed(name, "No minimum duration for monetization")
        if duration <= 0:
            return _manual(name, "Duration unknown; monetization eligibility needs manual review")
        if duration < minimum:
            return _breach(
                name,
                f"Duration {_fmt_seconds(duration)} is ineligible for monetization "
                f"(minimum {_fmt_seconds(minimum)})",
                f"Extend the video to at least {_fmt_seconds(minimum)} to qualify for monetization",
            )
        return _passed(name, f"Eligible for monetization (at least {_fmt_seconds(minimum)})")

    def _check_resolution(self, specs: MediaSpecs | None, rules: PlatformRules) -> _Outcome:
        name = "resolution"
        if rules.min_short_edge is None and rules.min_long_edge is None:
            return _passed(name, "No minimum resolution")
        if specs is None or not specs.has_resolution:
            return _manual(
                name,
                "Resolution unknown; provide the media file to verify it",
                "Upload the source file so resolution can be checked",
            )

        short_edge = min(specs.width, specs.height)
        long_edge = max(specs.width, specs.height)
        min_short = rules.min_short_edge or 0
        min_long = rules.min_long_edge or 0
        if short_edge < min_short or long_edge < min_long:
            return _breach(
                name,
                f"Resolution {specs.resolution} is below the minimum {min_short}x{min_long}",
                "Export at a higher resolution (1080x1920 preferred)",
            )
        return _passed(name, f"Resolution {specs.resolution} meets the minimum")

    def _check_file_size(self, specs: MediaSpecs | None, rules: PlatformRules) -> _Outcome:
        name = "file_size"
        limit = rules.max_file_size_bytes
        if limit is None:
            return _passed(name, "No file size limit")
        if specs is None or specs.size_bytes <= 0:
            return _manual(name, "File size unknown; provide the media file to verify it")
        if specs.size_bytes > limit:
            return _breach(
                name,
                f"File size {specs.size_bytes / _MB:.1f} MB exceeds the {limit / _MB:.0f} MB limit",
                "Compress the video to reduce the file size",
            )
        return _passed(name, f"File size {specs.size_bytes / _MB:.1f} MB is within the limit")

    def _check_music_rights(self, signal: RightsSignal | None, rules: PlatformRules) -> _Outcome:
        name = "music_rights"
        if signal is None:
            return _manual(
                name,
                "No audio fingerprint available; verify music licensing manually",
                "Provide the media file and configure ACRCloud to check music rights",
            )
        if signal.status is RightsStatus.UNAVAILABLE:
            reason = "; ".join(signal.errors) or "provider unavailable"
            return _manual(
                name,
                f"Music rights could not be determined ({reason}); review manually",
                "Confirm you hold a licence for any music in the video",
            )
        if signal.status is RightsStatus.NO_AUDIO:
            return _passed(name, "No audio track")
        if signal.status is RightsStatus.NO_MATCH:
            return _passed(name, "No copyrighted music detected")

        track = signal.track_info
        described = f"{track.title} by {track.artist}" if track else "a catalogue track"
        if signal.is_protected and signal.confidence >= rules.rights_confidence_threshold:
            return _breach(
                name,
                f"Copyrighted music detected: {described} ({signal.confidence}% confidence)",
                "Replace the track with licensed or royalty-free music",
            )
        return _manual(
            name,
            f"Possible match {described} at {signal.confidence}% confidence; review manually",
            "Confirm you hold a licence for any music in the video",
        )

    @staticmethod
    def _check_originality(record: CanonicalRecord) -> _Outcome:
        name = "originality"
        title = record.title.strip()
        if not title:
            return _manual(
                name,
                "No title to assess originality; review manually",
                "Add a descriptive, original title",
            )
        if _REPOST_MARKERS.search(f"{title} {record.description}"):
            return _manual(
                name,
                "Metadata suggests re-uploaded content; review manually",
                "Only publish content you created or have rights to",
            )
        return _passed(name, "Metadata shows no re-upload markers")

    @staticmethod
    def _check_duet_stitch(specs: MediaSpecs | None, rules: PlatformRules) -> _Outcome:
        name = "duet_stitch"
        if not rules.native_resolutions:
            return _passed(name, "No duet/stitch format requirements")
        if specs is None or not specs.has_resolution:
            return _manual(name, "Resolution unknown; duet/stitch compatibility needs manual review")
        if specs.resolution in rules.native_resolutions:
            return _passed(name, f"Native resolution {specs.resolution} supports duet and stitch")
        return _manual(
            name,
            f"Resolution {specs.resolution} is not a native format; duet/stitch may be degraded",
            f"Use a native resolution ({', '.join(rules.native_resolutions)}) for duet and stitch",
        )
