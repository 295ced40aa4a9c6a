"""Structural checks for PR descriptions and code review reports."""

import re
from dataclasses import dataclass, field

from . import MAX_TOP_FINDINGS, PR_DESCRIPTION_SECTIONS, REVIEW_SECTIONS, ReviewVerdict, Severity

HEADING_PATTERN = re.compile(r"^##\s+(.+?)\s*#*\s*$")
LIST_ITEM_PATTERN = re.compile(r"^(?:[-*+]|\d+[.)])\s+(.*)$")
SEVERITY_LABEL_PATTERN = re.compile(r"^\[([A-Z][A-Z _-]*)\](?!\()")
VERDICT_PATTERN = re.compile(r"^\*\*Verdict:\*\*\s*(.*?)\s*$")
ALTERNATIVES_MARKER = "**Alternatives:**"


@dataclass
class CheckResult:
    """Result of checking a document's structure."""

    passed: bool
    problems: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        """Get summary of problems."""
        if self.passed:
            return "All structure checks passed"
        return "\n".join(f"- {p}" for p in self.problems)


def split_sections(text: str) -> list[tuple[str, list[str]]]:
    """
    Split Markdown into (heading, body lines) for each level-2 heading.

    Headings inside fenced code blocks are ignored, and so is any text
    before the first heading.
    """
    sections: list[tuple[str, list[str]]] = []
    in_fence = False

    for line in text.splitlines():
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
        if not in_fence:
            match = HEADING_PATTERN.match(line)
            if match:
                sections.append((match.group(1), []))
                continue
        if sections:
            sections[-1][1].append(line)

    return sections


def _content_lines(lines: list[str]) -> list[str]:
    return [line.strip() for line in lines if line.strip()]


def _list_items(lines: list[str]) -> list[str]:
    """Top-level list items; indented continuation lines are not counted."""
    items = []
    for line in lines:
        if line[:1].isspace():
            continue
        match = LIST_ITEM_PATTERN.match(line)
        if match:
            items.append(match.group(1))
    return items


def check_section_order(found: list[str], expected: list[str]) -> list[str]:
    """Problems with the headings found compared to the expected sections."""
    if found == expected:
        return []

    problems = []
    for name in expected:
        count = found.count(name)
        if count == 0:
            problems.append(f"Missing section: {name}")
        elif count > 1:
            problems.append(f"Duplicate section: {name}")
    for name in found:
        if name not in expected:
            problems.append(f"Unexpected section: {name}")

    known = list(dict.fromkeys(name for name in found if name in expected))
    if known != [name for name in expected if name in known]:
        problems.append(f"Sections out of order: expected {', '.join(expected)}")
    return problems


def check_pr_description(text: str) -> CheckResult:
    """
    Check a PR description has exactly the five sections in order, none empty.

    Args:
        text: Markdown document

    Returns:
        CheckResult
    """
    sections = split_sections(text)
    problems = check_section_order([name for name, _ in sections], PR_DESCRIPTION_SECTIONS)

    for name, lines in sections:
        if name in PR_DESCRIPTION_SECTIONS and not _content_lines(lines):
            problems.append(f"Empty section: {name} (write None. if there is nothing to say)")

    return CheckResult(passed=not problems, problems=problems)


def _check_severity_labels(name: str, lines: list[str], required: bool) -> list[str]:
    problems = []
    allowed = {s.value for s in Severity}
    for item in _list_items(lines):
        match = SEVERITY_LABEL_PATTERN.match(item)
        if not match:
            if required:
                problems.append(f"{name}: finding without a severity label: {item}")
            continue
        label = match.group(1).strip()
        if label not in allowed:
            problems.append(
                f"{name}: unknown severity {label!r} (allowed: {', '.join(s.value for s in Severity)})"
            )
    return problems


def _check_top_findings(lines: list[str]) -> list[str]:
    content = _content_lines(lines)
    if not content:
        return ["Top findings is empty (write None. when there are no findings)"]
    if content == ["None."]:
        return []

    items = _list_items(lines)
    if not items:
        return ["Top findings must be a list of findings or None."]
    if len(items) > MAX_TOP_FINDINGS:
        return [f"Top findings lists {len(items)} items (at most {MAX_TOP_FINDINGS})"]
    return []


def _check_verdict(sections: list[tuple[str, list[str]]]) -> list[str]:
    verdicts = []
    for name, lines in sections:
        for line in lines:
            match = VERDICT_PATTERN.match(line.strip())
            if match:
                verdicts.append((name, match.group(1)))

    if not verdicts:
        return ["Missing **Verdict:** line in Summary"]

    problems = []
    if len(verdicts) > 1:
        problems.append(f"Found {len(verdicts)} verdict lines (expected 1)")

    allowed = {v.value for v in ReviewVerdict}
    for name, label in verdicts:
        if name != "Summary":
            problems.append(f"Verdict belongs in Summary, found in {name}")
        if label not in allowed:
            problems.append(
                f"Unknown verdict {label!r} (allowed: {', '.join(v.value for v in ReviewVerdict)})"
            )
    return problems


def _check_alternatives(lines: list[str]) -> list[str]:
    content = _content_lines(lines)
    if ALTERNATIVES_MARKER not in content:
        return [f"Suggestions: missing {ALTERNATIVES_MARKER} block"]

    after = content[content.index(ALTERNATIVES_MARKER) + 1 :]
    if not after:
        return ["Suggestions: alternatives left blank (write None identified with a justification)"]

    first = after[0]
    item = LIST_ITEM_PATTERN.match(first)
    if item:
        first = item.group(1)
    if first.startswith("None identified"):
        justification = first[len("None identified") :].strip(" -:.")
        if not justification:
            return ["Suggestions: None identified needs a justification"]
    return []


def check_review_report(text: str) -> CheckResult:
    """
    Check a code review report's structure.

    Verifies the seven sections and their order, the Top findings cap,
    the literal None. for no findings, severity and verdict labels, and the
    alternatives block.

    Args:
        text: Markdown document

    Returns:
        CheckResult
    """
    sections = split_sections(text)
    problems = check_section_order([name for name, _ in sections], REVIEW_SECTIONS)

    for name, lines in sections:
        if name not in REVIEW_SECTIONS:
            continue
        if not _content_lines(lines):
            if name != "Top findings":
                problems.append(f"Empty section: {name} (write None. if there is nothing to say)")
        if name == "Top findings":
            problems += _check_top_findings(lines)
            problems += _check_severity_labels(name, lines, required=True)
        elif name == "Must-fix":
            problems += _check_severity_labels(name, lines, required=True)
        elif name == "Suggestions":
            problems += _check_severity_labels(name, lines, required=False)
            problems += _check_alternatives(lines)
        else:
            problems += _check_severity_labels(name, lines, required=False)

    problems += _check_verdict(sections)

    return CheckResult(passed=not problems, problems=problems)
