"""Embedded skill documents and install helpers."""

from pathlib import Path

PR_DESCRIPTION_SKILL = """---
name: pr-description
description: Draft or update a pull request description from the branch diff
argument-hint: "[base-branch] [pr-number]"
allowed-tools: Bash(git *), Bash(gh pr view *), Bash(gh pr edit *), Bash(review-skills *), Read, Write
---

You are writing the description for a pull request. The description tells a
reviewer why the change exists, what it does, and how to convince themselves
it works. Write it from the diff and the commit log, not from memory.

## 1. Gather inputs

Run these from the repository root (base defaults to `main`):

```bash
git status --short
git merge-base <base> HEAD
git diff --stat <merge-base>...HEAD
git diff <merge-base>...HEAD
git log --oneline <merge-base>..HEAD
```

If `git merge-base` fails:
1. Run `git fetch origin` and try again.
2. Try again against the upstream-tracking branch: `git merge-base <base>@{upstream} HEAD`
   (or `origin/<base>` when no upstream is configured).

If a pull request already exists, read its current metadata:

```bash
gh pr view [<number>] --json number,title,body,url,baseRefName,headRefName,state
```

Or gather everything at once: `review-skills describe --base <base> [--pr <number>]`.

If the diff is empty, or you cannot tell which base the PR targets, stop and
ask the user. Do not guess.

## 2. Understand the change

- Read the whole diff, not just the stat.
- Group changes by intent (feature, fix, refactor, tests, docs), not by file.
- Keep anything already in an existing PR body that is still true
  (linked issues, screenshots, reviewer notes).

## 3. Write the description

Use exactly these five sections, in this order:

```markdown
## Context
Why this change is needed. Link the issue or ticket if there is one.

## What changed
- One bullet per logical change, in plain words.

## How to test
- Commands to run and the behavior to expect.

## Risks/Rollout
What could break, who is affected, migrations, flags, rollback plan.

## Notes
Anything else a reviewer should know. "None." if nothing.
```

Rules:
- State only what the diff shows. No invented benchmarks, tickets or test runs.
- Prefer short sentences. One idea per bullet.
- If a section has nothing to say, write `None.` rather than dropping it.

## 4. Deliver

- Show the draft to the user.
- To keep it for later: write it to a file (default `.git/PR_DESCRIPTION.md`).
- Only update the remote PR when the user explicitly asks:

```bash
gh pr edit <number> --body-file .git/PR_DESCRIPTION.md
```

Check the structure before delivering: `review-skills check-description <file>`.
"""

CODE_REVIEW_SKILL = """---
name: code-review
description: Review a diff and report findings with severities and a verdict
argument-hint: "[branch|--working-tree|--commit <sha>|instructions] [design-doc]"
allowed-tools: Bash(git *), Bash(review-skills *), Read
---

You are reviewing code changes. Your job is to find real problems, rank them,
and say clearly whether the change should merge.

## 1. Scope the diff

Pick exactly one scope:

1. **Branch comparison**: `git merge-base <base> <branch>`, then
   `git diff <merge-base>...<branch>` and `git log --oneline <merge-base>..<branch>`.
   If the merge base lookup fails, `git fetch origin` and retry, then retry
   against `<base>@{upstream}` (or `origin/<base>`).
2. **Working-tree changes**: `git status --short` and `git diff HEAD`.
   Read untracked files listed by status too.
3. **Single commit**: `git show <sha>`.
4. **Custom instructions**: follow the user's instructions for what to review.

Or gather it at once: `review-skills review -b <branch> --base <base>`,
`review-skills review --working-tree`, `review-skills review --commit <sha>`,
`review-skills review --instructions "<text>"`.

If a design doc is provided, read it first and review against it.
If you cannot tell what to review, ask the user.

## 2. Review focus

Work through these in priority order:

1. Correctness: does the code do what it claims, including edge cases?
2. Risk: blast radius, migrations, compatibility, rollout.
3. Security: injection, authz/authn, secrets, unsafe input handling.
4. Performance: complexity, N+1 queries, unbounded work, hot paths.
5. Maintainability: clarity, duplication, fit with existing patterns.
6. Observability: logs, metrics, error reporting on failure paths.
7. Tests: do tests cover the change and its failure modes?

If you run verification commands (tests, linters, builds) and they fail,
report the failure and pause lower-priority review until it is understood.

## 3. Severities

Every finding carries exactly one severity:

- **BLOCKER**: must be fixed before merge (bug, data loss, security hole).
- **MAJOR**: should be fixed before merge, or tracked with a clear reason.
- **MINOR**: worth fixing, safe to merge without.

## 4. Output format

Use exactly these seven sections, in this order:

```markdown
## Summary
One paragraph on what the change does and its overall quality.

**Verdict:** Approve | Request changes | Comment

## Top findings
1. [SEVERITY] Title (file:line): why it matters.
(at most 3; write `None.` if there are none)

## Must-fix
- [BLOCKER|MAJOR] Title (file:line): what to change.

## Risks
- What could go wrong after merge.

## Suggestions
- Optional improvements.

**Alternatives:**
- Other approaches worth considering, or `None identified - <why>`.

## Tests
- Missing or weak tests, and what they should check.

## Questions
- Things you need the author to clarify.
```

## 5. Hard rules

- Never fabricate findings. Every finding points at code in the diff.
- If there are no findings, `Top findings` says `None.`. Do not pad it.
- `Top findings` lists at most 3 items.
- If you see no alternative approach, write `None identified` with a one-line
  justification. Never leave it blank.
- Severities are only BLOCKER, MAJOR or MINOR.
- The verdict is only Approve, Request changes or Comment.
  Any BLOCKER means Request changes.
- Empty sections say `None.`; never drop a section.

Check the structure before delivering: `review-skills check-review <file>`.
"""

SKILLS: dict[str, tuple[str, str]] = {
    "pr-description": (
        "Draft or update a pull request description from the branch diff",
        PR_DESCRIPTION_SKILL,
    ),
    "code-review": (
        "Review a diff and report findings with severities and a verdict",
        CODE_REVIEW_SKILL,
    ),
}


def get_skill(name: str) -> str:
    """Get the content of a bundled skill document."""
    if name not in SKILLS:
        raise ValueError(f"Unknown skill: {name}. Available: {list(SKILLS.keys())}")
    return SKILLS[name][1]


def install_skill(name: str, skill_dir: str | Path) -> Path:
    """
    Write a skill document to <skill_dir>/<name>/SKILL.md.

    Returns:
        Path of the written file
    """
    content = get_skill(name)
    target_dir = Path(skill_dir) / name
    target_dir.mkdir(parents=True, exist_ok=True)
    target_file = target_dir / "SKILL.md"
    target_file.write_text(content, encoding="utf-8")
    return target_file
