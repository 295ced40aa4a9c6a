"""Instruction briefs for the PR description and code review procedures."""

from .code_review import build_code_review_prompt
from .pr_description import build_pr_description_prompt

__all__ = [
    "build_code_review_prompt",
    "build_pr_description_prompt",
]
