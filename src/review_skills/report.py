"""Markdown rendering for PR descriptions and code review reports."""

from . import (
    PR_DESCRIPTION_SECTIONS,
    REVIEW_SECTIONS,
    CodeReviewReport,
    Finding,
    MissingInputError,
    PRDescription,
    Severity,
)
from .checks import HEADING_PATTERN, LIST_ITEM_PATTERN, SEVERITY_LABEL_PATTERN

NONE_TEXT = "None."
NONE_IDENTIFIED = "None identified"


def format_finding(finding: Finding) -> str:
    """Format a finding as "[SEVERITY] title (location): justification"."""
    text = f"[{finding.severity.value}] {finding.title.strip()}"
    if finding.location:
        text += f" ({finding.location})"
    if finding.justification.strip():
        text += f": {finding.justification.strip()}"
    return text


def format_items(items: str | list[str], numbered: bool = False) -> str:
    """Format free text or a list of items as a Markdown block."""
    if isinstance(items, str):
        return items.strip() or NONE_TEXT

    items = [item.strip() for item in items if item.strip()]
    if not items:
        return NONE_TEXT
    if numbered:
        return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))
    return "\n".join(f"- {item}" for item in items)


def demote_headings(text: str) -> str:
    """Turn level-2 headings in section text into level-3 ones, outside code fences."""
    lines = []
    in_fence = False
    for line in text.splitlines():
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
        elif not in_fence and HEADING_PATTERN.match(line):
            line = "#" + line
        lines.append(line)
    return "\n".join(lines)


def check_free_text_labels(name: str, items: list[str]) -> None:
    """
    Reject items that open with a bracketed label outside the severity set.

    Raises:
        ValueError: Naming the section, the label and the allowed severities
    """
    allowed = {s.value for s in Severity}
    for item in items:
        for line in item.strip().splitlines():
            line = line.strip()
            listed = LIST_ITEM_PATTERN.match(line)
            if listed:
                line = listed.group(1)
            match = SEVERITY_LABEL_PATTERN.match(line)
            if match and match.group(1).strip() not in allowed:
                raise ValueError(
                    f"{name}: unknown severity {match.group(1).strip()!r} "
                    f"(allowed: {', '.join(s.value for s in Severity)})"
                )


def _is_blank(value: str | list[str]) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return not any(item.strip() for item in value)


def _join_sections(names: list[str], bodies: list[str]) -> str:
    blocks = [f"## {name}\n\n{demote_headings(body)}" for name, body in zip(names, bodies)]
    return "\n\n".join(blocks) + "\n"


def render_pr_description(description: PRDescription) -> str:
    """
    Render a PR description with the five fixed sections in order.

    Context, What changed and How to test are required. Empty
    Risks/Rollout or Notes render as "None.".

    Raises:
        MissingInputError: If a required section is empty
    """
    required = {
        "Context": description.context,
        "What changed": description.what_changed,
        "How to test": description.how_to_test,
    }
    missing = [name for name, value in required.items() if _is_blank(value)]
    if missing:
        raise MissingInputError(missing)

    bodies = [
        format_items(description.context),
        format_items(description.what_changed),
        format_items(description.how_to_test),
        format_items(description.risks_rollout),
        format_items(description.notes),
    ]
    return _join_sections(PR_DESCRIPTION_SECTIONS, bodies)


def format_alternatives(report: CodeReviewReport) -> str:
    """Alternatives block, or "None identified" with its justification."""
    alternatives = [a.strip() for a in report.alternatives if a.strip()]
    if alternatives:
        return "**Alternatives:**\n\n" + format_items(alternatives)

    justification = report.alternatives_justification.strip()
    if not justification:
        raise MissingInputError(["Alternatives justification"])
    return f"**Alternatives:**\n\n{NONE_IDENTIFIED} - {justification}"


def render_review_report(report: CodeReviewReport) -> str:
    """
    Render a code review report with the seven fixed sections in order.

    The verdict is rendered inside Summary. Empty Top findings render
    as "None."; no alternatives render as "None identified" plus
    justification under Suggestions.

    Raises:
        MissingInputError: If the summary or the alternatives justification is missing
        ValueError: If a free-text item opens with an unknown severity label
    """
    if not report.summary.strip():
        raise MissingInputError(["Summary"])

    for name, items in [
        ("Risks", report.risks),
        ("Suggestions", report.suggestions + report.alternatives),
        ("Tests", report.tests),
        ("Questions", report.questions),
    ]:
        check_free_text_labels(name, items)

    summary = f"{report.summary.strip()}\n\n**Verdict:** {report.verdict.value}"

    suggestions = format_items(report.suggestions)
    suggestions += "\n\n" + format_alternatives(report)

    bodies = [
        summary,
        format_items([format_finding(f) for f in report.top_findings], numbered=True),
        format_items([format_finding(f) for f in report.must_fix]),
        format_items(report.risks),
        suggestions,
        format_items(report.tests),
        format_items(report.questions),
    ]
    return _join_sections(REVIEW_SECTIONS, bodies)


def format_review_summary(report: CodeReviewReport) -> str:
    """
    Brief summary for terminal output.

    Args:
        report: CodeReviewReport to summarize

    Returns:
        Brief summary string
    """
    # Top findings usually repeat Must-fix entries; count each finding once.
    findings = list(report.must_fix)
    findings += [f for f in report.top_findings if f not in findings]
    counts = {sev: 0 for sev in ("BLOCKER", "MAJOR", "MINOR")}
    for finding in findings:
        counts[finding.severity.value] += 1

    lines = [
        f"Verdict: {report.verdict.value}",
        f"Top findings: {len(report.top_findings)}",
        f"Findings: {counts['BLOCKER']} blocker, {counts['MAJOR']} major, {counts['MINOR']} minor",
    ]
    if report.questions:
        lines.append(f"Open questions: {len(report.questions)}")
    return "\n".join(lines)
