"""
Configuration for review-skills.

Loads an optional .review-skills.yml from the repository root:

    base: main
    remote: origin
    context_lines: 10
    draft_path: .git/PR_DESCRIPTION.md
    skill_dir: .claude/skills
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

CONFIG_FILENAME = ".review-skills.yml"


@dataclass
class SkillsConfig:
    """Defaults for gathering context and writing drafts."""

    base: str = "main"
    remote: str = "origin"
    context_lines: int = 10
    draft_path: str = ".git/PR_DESCRIPTION.md"
    skill_dir: str = ".claude/skills"

    @classmethod
    def from_dict(cls, data: dict) -> SkillsConfig:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "context_lines" in values:
            values["context_lines"] = int(values["context_lines"])
        return cls(**values)


def load_config(repo: str | Path | None = None) -> SkillsConfig:
    """
    Load configuration from <repo>/.review-skills.yml.

    Returns defaults when the file doesn't exist.

    Raises:
        ValueError: If the file is not a YAML mapping
    """
    path = Path(repo or ".") / CONFIG_FILENAME
    if not path.exists():
        return SkillsConfig()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return SkillsConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")

    return SkillsConfig.from_dict(data)
