"""Command-line content analysis.

Usage::

    python -m reelscope.cli.analyze https://www.youtube.com/watch?v=dQw4w9WgXcQ
    python -m reelscope.cli.analyze https://www.tiktok.com/@user/video/123 --json
    python -m reelscope.cli.analyze <url> --file clip.mp4 --deadline 20
    python -m reelscope.cli.analyze --file clip.mp4 --platform tiktok

Prints the canonical record, the extraction trace and the compliance report
as text (default) or JSON.  ``--json`` implies ``--quiet``: logs go to
stderr at WARNING level so stdout carries only the report.

Exit codes: 0 success, 1 extraction failed, 2 usage or input error.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from reelscope.config.loader import load_config
from reelscope.models.analysis import ContentAnalysis
from reelscope.models.record import Platform
from reelscope.utils.errors import (
    AllStrategiesExhaustedError,
    ConfigurationError,
    MediaProbeError,
    ReelScopeError,
    UnsupportedPlatformError,
)
from reelscope.utils.logging import configure_logging

EXIT_OK = 0
EXIT_EXTRACTION_FAILED = 1
EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_text_output(analysis: ContentAnalysis) -> str:
    """Render an analysis as a human-readable report."""
    record = analysis.record
    report = analysis.report
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append(f"  reelscope: {record.platform.value} content analysis")
    lines.append(sep)
    lines.append("")

    lines.append("RECORD")
    lines.append("-" * 40)
    lines.append(f"  Title:      {record.title or '(none)'}")
    lines.append(f"  Author:     {record.author.display_name} (@{record.author.username})")
    lines.append(
        f"  Views: {record.views:,}  |  Likes: {record.likes:,}  |  "
        f"Comments: {record.comments:,}  |  Shares: {record.shares:,}"
    )
    if record.duration_seconds:
        lines.append(f"  Duration:   {record.duration_seconds}s")
    if record.hashtags:
        lines.append(f"  Hashtags:   {' '.join(record.hashtags)}")
    lines.append(
        f"  Quality:    {record.quality_tier.value}  |  "
        f"Authentic: {'yes' if record.is_authentic else 'no'}  |  "
        f"Source: {record.provenance}"
    )
    for note in record.notes:
        lines.append(f"  Note: {note}")
    lines.append("")

    if analysis.trace is not None:
        lines.append("EXTRACTION TRACE")
        lines.append("-" * 40)
        lines.append(f"  {' -> '.join(analysis.trace.labels())}")
        lines.append("")

    if analysis.media_specs is not None:
        specs = analysis.media_specs
        lines.append("MEDIA")
        lines.append("-" * 40)
        lines.append(
            f"  {specs.resolution}  |  {specs.duration_seconds:g}s  |  "
            f"{specs.size_bytes / (1024 * 1024):.1f} MB  |  probe: {specs.probe_method}"
        )
        lines.append("")

    if analysis.rights is not None:
        rights = analysis.rights
        lines.append("MUSIC RIGHTS")
        lines.append("-" * 40)
        lines.append(f"  Status: {rights.status.value}  |  Confidence: {rights.confidence}%")
        if rights.track_info:
            lines.append(f"  Track:  {rights.track_info.title} by {rights.track_info.artist}")
        lines.append("")

    lines.append(f"COMPLIANCE: {report.overall_score}/100  ({'compliant' if report.compliant else 'violations found'})")
    lines.append("-" * 40)
    for check in report.checks:
        mark = "PASS" if check.passed else "FAIL"
        review = " [manual review]" if check.needs_manual_review else ""
        lines.append(f"  {mark}  {check.name}: {check.details}{review}")
    if report.violations:
        lines.append("")
        lines.append("  Violations:")
        lines.extend(f"    - {v}" for v in report.violations)
    lines.append("")
    lines.append("  Recommendations:")
    lines.extend(f"    - {r}" for r in report.recommendations)
    lines.append(sep)
    return "\n".join(lines)


def format_json_output(analysis: ContentAnalysis) -> str:
    output = analysis.model_dump(mode="json")
    output["report"]["compliant"] = analysis.report.compliant
    if analysis.trace is not None:
        output["trace"]["labels"] = analysis.trace.labels()
    return json.dumps(output, indent=2, ensure_ascii=False, default=str)


def format_exhausted(exc: AllStrategiesExhaustedError) -> str:
    lines = [f"Error: {exc.message}"]
    if exc.trace is not None:
        lines.append(f"  Attempts: {' -> '.join(exc.trace.labels())}")
    lines.extend(f"  - {reason}" for reason in exc.failure_reasons)
    if exc.remediation:
        lines.append("  To fix:")
        lines.extend(f"  * {hint}" for hint in exc.remediation)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, config: dict) -> int:
    # Deferred import: building the pipeline reads settings.
    from reelscope.main import build_content_pipeline

    pipeline, http_client = build_content_pipeline(config=config)
    try:
        if args.url:
            analysis = await pipeline.analyze_url(
                args.url, media_path=args.file, deadline=args.deadline
            )
        else:
            analysis = await pipeline.analyze_file(args.file, Platform(args.platform))
    except UnsupportedPlatformError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_USAGE
    except MediaProbeError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_USAGE
    except AllStrategiesExhaustedError as exc:
        print(format_exhausted(exc), file=sys.stderr)
        return EXIT_EXTRACTION_FAILED
    except ReelScopeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_EXTRACTION_FAILED
    finally:
        await http_client.aclose()

    print(format_json_output(analysis) if args.json_output else format_text_output(analysis))
    return EXIT_OK


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m reelscope.cli.analyze",
        description=(
            "Extract metadata for a YouTube or TikTok URL and score it against "
            "the platform's eligibility rules."
        ),
    )
    parser.add_argument("url", nargs="?", default=None, help="Content URL to analyze.")
    parser.add_argument(
        "--file", "-f",
        type=Path,
        default=None,
        help="Local media file to probe and rights-check.",
    )
    parser.add_argument(
        "--platform",
        choices=[p.value for p in Platform],
        default=Platform.TIKTOK.value,
        help="Platform rules to apply when analyzing a file without a URL.",
    )
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Budget in seconds for the whole extraction chain.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Send only warnings to stderr (implied by --json).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.url and args.file is None:
        parser.error("a URL or --file is required")
    if args.deadline is not None and args.deadline <= 0:
        parser.error("--deadline must be positive")

    try:
        config = load_config()
    except ConfigurationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_USAGE

    quiet = args.quiet or args.json_output
    configure_logging(
        log_level="WARNING" if quiet else config["logging"]["level"],
        json_output=config["app"]["env"] == "production",
        stream=sys.stderr,
    )

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
