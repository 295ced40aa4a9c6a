"""Review skills - PR description and code review playbooks with rendering and checks."""

from dataclasses import dataclass, field
from enum import Enum

__version__ = "0.1.0"


class Severity(Enum):
    """Severity of a review finding."""

    BLOCKER = "BLOCKER"
    MAJOR = "MAJOR"
    MINOR = "MINOR"


class ReviewVerdict(Enum):
    """Overall verdict of a code review."""

    APPROVE = "Approve"
    REQUEST_CHANGES = "Request changes"
    COMMENT = "Comment"


class ReviewScope(Enum):
    """How the diff under review is selected."""

    BRANCH = "branch"
    WORKING_TREE = "working-tree"
    COMMIT = "commit"
    CUSTOM = "custom"


# Review focus, highest priority first
FOCUS_AREAS = [
    "correctness",
    "risk",
    "security",
    "performance",
    "maintainability",
    "observability",
    "tests",
]

PR_DESCRIPTION_SECTIONS = [
    "Context",
    "What changed",
    "How to test",
    "Risks/Rollout",
    "Notes",
]

REVIEW_SECTIONS = [
    "Summary",
    "Top findings",
    "Must-fix",
    "Risks",
    "Suggestions",
    "Tests",
    "Questions",
]

MAX_TOP_FINDINGS = 3


class MissingInputError(ValueError):
    """Required input for a document is absent."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing input: {', '.join(self.missing)}")


@dataclass
class Finding:
    """A single issue reported by a review."""

    severity: Severity
    title: str
    justification: str = ""
    location: str | None = None  # e.g., "src/app.py" or "src/app.py:42"


@dataclass
class PRDescription:
    """Filled-in pull request description."""

    context: str
    what_changed: str | list[str]
    how_to_test: str | list[str]
    risks_rollout: str
    notes: str


@dataclass
class CodeReviewReport:
    """Filled-in code review report."""

    summary: str
    verdict: ReviewVerdict
    top_findings: list[Finding] = field(default_factory=list)
    must_fix: list[Finding] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    alternatives: list[str] = field(default_factory=list)
    alternatives_justification: str = ""
    tests: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)

    def __post_init__(self):
        if len(self.top_findings) > MAX_TOP_FINDINGS:
            raise ValueError(
                f"Top findings is capped at {MAX_TOP_FINDINGS}, got {len(self.top_findings)}"
            )


@dataclass
class DiffContext:
    """Inputs gathered from version control for one procedure run."""

    ref: str  # What is described/reviewed, e.g. "feature-x", "working-tree", "abc1234"
    scope: ReviewScope
    diff: str = ""
    base: str | None = None
    merge_base: str | None = None
    stat: str = ""
    log: str = ""
    status: str = ""
    changed_files: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.diff.strip()


@dataclass
class PullRequestInfo:
    """Pull request metadata as reported by the hosting CLI."""

    number: int
    title: str = ""
    body: str = ""
    url: str = ""
    base_ref: str = ""
    head_ref: str = ""
    state: str = ""


__all__ = [
    "Severity",
    "ReviewVerdict",
    "ReviewScope",
    "FOCUS_AREAS",
    "PR_DESCRIPTION_SECTIONS",
    "REVIEW_SECTIONS",
    "MAX_TOP_FINDINGS",
    "MissingInputError",
    "Finding",
    "PRDescription",
    "CodeReviewReport",
    "DiffContext",
    "PullRequestInfo",
]
