"""
Cross-reference validation for base librettos and timing overlays.

Problems are collected as ValidationIssue values and returned in full; the
checks never stop at the first problem. Callers that need a clean document
can pass the list to raise_for_issues().
"""

from dataclasses import dataclass, field
from enum import Enum

from libretto._logging import get_logger
from libretto.exceptions import ValidationFailedError
from libretto.models import BaseLibretto, TimingOverlay

logger = get_logger(__name__)


class IssueKind(str, Enum):
    """Kinds of validation issue."""

    MISSING_FIELD = "missing_field"
    DUPLICATE_SEGMENT_ID = "duplicate_segment_id"
    UNKNOWN_SEGMENT_ID = "unknown_segment_id"
    SEGMENTS_UNORDERED = "segments_unordered"
    NEGATIVE_TIME = "negative_time"
    UNACCOUNTED_NUMBER = "unaccounted_number"
    UNKNOWN_OMITTED_NUMBER = "unknown_omitted_number"
    CONFLICTING_COVERAGE = "conflicting_coverage"


_MESSAGES = {
    IssueKind.MISSING_FIELD: "missing required field: {subject}",
    IssueKind.DUPLICATE_SEGMENT_ID: "duplicate segment ID: {subject}",
    IssueKind.UNKNOWN_SEGMENT_ID: "timing overlay references unknown segment ID: {subject}",
    IssueKind.SEGMENTS_UNORDERED: "segments not ordered by start time in track '{subject}'",
    IssueKind.NEGATIVE_TIME: "negative segment time in track '{subject}'",
    IssueKind.UNACCOUNTED_NUMBER: (
        "number '{subject}' is neither covered by any track nor declared as omitted"
    ),
    IssueKind.UNKNOWN_OMITTED_NUMBER: (
        "omitted number '{subject}' does not exist in the base libretto"
    ),
    IssueKind.CONFLICTING_COVERAGE: (
        "number '{subject}' is both covered by a track and declared as omitted"
    ),
}


@dataclass
class ValidationIssue:
    """
    A single validation problem.

    Attributes:
        kind: Issue category
        subject: The id, field or track the issue is about
        detail: Extra context, e.g. the offending value
    """

    kind: IssueKind
    subject: str
    detail: str | None = None

    def __str__(self) -> str:
        message = _MESSAGES[self.kind].format(subject=self.subject)
        if self.detail:
            return f"{message} ({self.detail})"
        return message


@dataclass
class CoverageReport:
    """Partition of base number ids by how an overlay accounts for them."""

    covered: list[str] = field(default_factory=list)
    omitted: list[str] = field(default_factory=list)
    unaccounted: list[str] = field(default_factory=list)
    conflicting: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.covered) + len(self.omitted) + len(self.unaccounted)


def validate_base(base: BaseLibretto) -> list[ValidationIssue]:
    """
    Check a base libretto's required fields and segment id uniqueness.

    Every repeated segment id is reported, once per repetition.
    """
    issues: list[ValidationIssue] = []
    for name in ("title", "composer", "language"):
        if not getattr(base.opera, name).strip():
            issues.append(ValidationIssue(IssueKind.MISSING_FIELD, f"opera.{name}"))

    seen: set[str] = set()
    for number in base.numbers:
        if not number.id:
            issues.append(
                ValidationIssue(
                    IssueKind.MISSING_FIELD, "number.id", detail=f"label: {number.label}"
                )
            )
        for segment in number.segments:
            if segment.id in seen:
                issues.append(ValidationIssue(IssueKind.DUPLICATE_SEGMENT_ID, segment.id))
            seen.add(segment.id)

    _log_issues(issues)
    return issues


def validate_overlay_standalone(overlay: TimingOverlay) -> list[ValidationIssue]:
    """Check every track for negative and decreasing start times."""
    issues = _time_issues(overlay)
    _log_issues(issues)
    return issues


def _time_issues(overlay: TimingOverlay) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for track in overlay.track_timings:
        previous: float | None = None
        for segment_time in track.segment_times:
            if segment_time.start < 0:
                issues.append(
                    ValidationIssue(
                        IssueKind.NEGATIVE_TIME,
                        track.track_title,
                        detail=f"{segment_time.segment_id} at {segment_time.start}s",
                    )
                )
            if previous is not None and segment_time.start < previous:
                issues.append(
                    ValidationIssue(
                        IssueKind.SEGMENTS_UNORDERED,
                        track.track_title,
                        detail=f"{segment_time.segment_id} at {segment_time.start}s "
                        f"after {previous}s",
                    )
                )
            previous = segment_time.start
    return issues


def coverage_report(overlay: TimingOverlay, base: BaseLibretto) -> CoverageReport:
    """
    Classify every base number as covered, omitted or unaccounted.

    A number both covered and declared omitted counts as covered and is also
    listed in conflicting.
    """
    covered_ids = set(overlay.covered_number_ids())
    omitted_ids = set(overlay.omitted_number_ids())

    report = CoverageReport()
    for number in base.numbers:
        if number.id in covered_ids:
            report.covered.append(number.id)
            if number.id in omitted_ids:
                report.conflicting.append(number.id)
        elif number.id in omitted_ids:
            report.omitted.append(number.id)
        else:
            report.unaccounted.append(number.id)
    return report


def validate_overlay(overlay: TimingOverlay, base: BaseLibretto) -> list[ValidationIssue]:
    """
    Check an overlay on its own and against its base libretto.

    Args:
        overlay: Timing overlay
        base: Base libretto the overlay refers to

    Returns:
        All issues found, standalone checks first
    """
    issues = _time_issues(overlay)

    base_segment_ids = set(base.segment_ids())
    for segment_id in overlay.segment_ids():
        if segment_id not in base_segment_ids:
            issues.append(ValidationIssue(IssueKind.UNKNOWN_SEGMENT_ID, segment_id))

    base_number_ids = {n.id for n in base.numbers}
    for number_id in overlay.omitted_number_ids():
        if number_id not in base_number_ids:
            issues.append(ValidationIssue(IssueKind.UNKNOWN_OMITTED_NUMBER, number_id))

    report = coverage_report(overlay, base)
    for number_id in report.conflicting:
        issues.append(ValidationIssue(IssueKind.CONFLICTING_COVERAGE, number_id))
    for number_id in report.unaccounted:
        issues.append(ValidationIssue(IssueKind.UNACCOUNTED_NUMBER, number_id))

    logger.info(
        f"Number coverage: total={report.total}, covered={len(report.covered)}, "
        f"omitted={len(report.omitted)}, unaccounted={len(report.unaccounted)}"
    )
    _log_issues(issues)
    return issues


def raise_for_issues(
    issues: list[ValidationIssue], document: str | None = None
) -> None:
    """
    Raise ValidationFailedError if there are any issues.

    Raises:
        ValidationFailedError: If issues is non-empty
    """
    if issues:
        raise ValidationFailedError(issues, document=document)


def _log_issues(issues: list[ValidationIssue]) -> None:
    for issue in issues:
        logger.warning(str(issue))
