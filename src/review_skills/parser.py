"""Loading structured results into PR descriptions and review reports."""

import re
from pathlib import Path

import yaml

from . import (
    CodeReviewReport,
    Finding,
    MissingInputError,
    PRDescription,
    ReviewVerdict,
    Severity,
)


def parse_severity(text: str) -> Severity:
    """Parse severity string to enum."""
    value = str(text).strip().upper()
    for severity in Severity:
        if severity.value == value:
            return severity
    raise ValueError(
        f"Unknown severity: {text!r}. Allowed: {', '.join(s.value for s in Severity)}"
    )


def parse_verdict(text: str) -> ReviewVerdict:
    """Parse verdict string to enum; "request-changes" style spellings are accepted."""
    value = re.sub(r"[\s_-]+", " ", str(text).strip()).lower()
    for verdict in ReviewVerdict:
        if verdict.value.lower() == value:
            return verdict
    raise ValueError(
        f"Unknown verdict: {text!r}. Allowed: {', '.join(v.value for v in ReviewVerdict)}"
    )


def normalize_key(key: str) -> str:
    """Map section names like "Risks/Rollout" or "Must-fix" to field names."""
    return re.sub(r"[\s/-]+", "_", str(key).strip()).lower()


def _normalize(data: dict) -> dict:
    return {normalize_key(k): v for k, v in data.items()}


def _text_or_list(value) -> str | list[str]:
    if value is None:
        return ""
    if isinstance(value, list):
        return [str(item) for item in value]
    return str(value)


def _string_list(value, name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    return [str(item) for item in value]


# "[MAJOR] Title (src/app.py:42): justification"
FINDING_PATTERN = re.compile(
    r"\[(\w+)\]\s+(.+?)(?:\s+\(([^()]+)\))?(?::\s+(.*))?$",
    re.DOTALL,
)


def parse_finding(data: dict | str) -> Finding:
    """
    Parse a finding from a dict or a "[SEVERITY] title (location): justification" string.

    Raises:
        ValueError: On an unknown severity, a missing title, or input that is neither text nor a mapping
    """
    if isinstance(data, str):
        match = FINDING_PATTERN.match(data.strip())
        if not match:
            raise ValueError(f"Finding must start with [SEVERITY]: {data!r}")
        return Finding(
            severity=parse_severity(match.group(1)),
            title=match.group(2).strip(),
            location=match.group(3),
            justification=(match.group(4) or "").strip(),
        )

    if not isinstance(data, dict):
        raise ValueError(f"Finding must be a mapping or a \"[SEVERITY] title\" string: {data!r}")

    data = _normalize(data)
    title = str(data.get("title") or "").strip()
    if not title:
        raise ValueError("Finding needs a title")
    if "severity" not in data:
        raise ValueError(f"Finding {title!r} needs a severity")

    return Finding(
        severity=parse_severity(data["severity"]),
        title=title,
        justification=str(data.get("justification") or data.get("why") or "").strip(),
        location=data.get("location") or None,
    )


def parse_findings(value, name: str) -> list[Finding]:
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip() or value.strip().rstrip(".").lower() == "none":
            return []
        value = [value]
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list of findings")
    return [parse_finding(item) for item in value]


def parse_pr_description(data: dict) -> PRDescription:
    """
    Build a PRDescription from a dict keyed by field or section name.

    Raises:
        MissingInputError: If a section key is absent
    """
    data = _normalize(data)
    fields = ["context", "what_changed", "how_to_test", "risks_rollout", "notes"]
    missing = [name for name in fields if name not in data]
    if missing:
        raise MissingInputError(missing)

    return PRDescription(**{name: _text_or_list(data[name]) for name in fields})


def parse_review_report(data: dict) -> CodeReviewReport:
    """
    Build a CodeReviewReport from a dict keyed by field or section name.

    Raises:
        MissingInputError: If summary or verdict is absent
        ValueError: On unknown labels or more than the allowed top findings
    """
    data = _normalize(data)
    missing = [name for name in ("summary", "verdict") if not data.get(name)]
    if missing:
        raise MissingInputError(missing)

    return CodeReviewReport(
        summary=str(data["summary"]),
        verdict=parse_verdict(data["verdict"]),
        top_findings=parse_findings(data.get("top_findings"), "top_findings"),
        must_fix=parse_findings(data.get("must_fix"), "must_fix"),
        risks=_string_list(data.get("risks"), "risks"),
        suggestions=_string_list(data.get("suggestions"), "suggestions"),
        alternatives=_string_list(data.get("alternatives"), "alternatives"),
        alternatives_justification=str(data.get("alternatives_justification") or ""),
        tests=_string_list(data.get("tests"), "tests"),
        questions=_string_list(data.get("questions"), "questions"),
    )


def load_result(path: str | Path) -> dict:
    """
    Load a structured result from a JSON or YAML file.

    Raises:
        ValueError: If the file isn't valid JSON or YAML, or doesn't hold a mapping
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: {e}") from None
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of section names to content")
    return data
