"""Code review brief."""

from .. import FOCUS_AREAS, MAX_TOP_FINDINGS, REVIEW_SECTIONS, DiffContext, ReviewScope

CODE_REVIEW_PROMPT = """You are a senior code reviewer. Review the following code changes.

{scope_section}

{design_section}

## Code Changes

```diff
{diff_content}
```

## Review Focus

Work through these in priority order:

{focus_list}

If verification commands (tests, linters, builds) fail, report the failure and
pause lower-priority review until it is understood.

## Severities

- **BLOCKER**: must be fixed before merge
- **MAJOR**: should be fixed before merge, or tracked with a clear reason
- **MINOR**: worth fixing, safe to merge without

## Output Format

Use exactly these sections, in this order:

{section_list}

Under Summary, add one line: `**Verdict:** Approve | Request changes | Comment`

Write each finding as:

- [BLOCKER|MAJOR|MINOR] <title> (<file:line>): <why it matters>

Under Suggestions, add an `**Alternatives:**` block listing other approaches
worth considering.

## Hard Rules

- Never fabricate findings. Every finding points at code in the diff.
- Top findings lists at most {max_top} items. If there are none, write exactly `None.`
- If there is no alternative approach, write `None identified - <justification>`.
- Severities are only BLOCKER, MAJOR, MINOR.
- The verdict is only Approve, Request changes, Comment. Any BLOCKER means Request changes.
- Empty sections say `None.`; never drop a section.
"""

SCOPE_DESCRIPTIONS = {
    ReviewScope.BRANCH: "Branch `{ref}` compared to `{base}` (merge base `{merge_base}`).",
    ReviewScope.WORKING_TREE: "Uncommitted changes in the working tree (staged and unstaged).",
    ReviewScope.COMMIT: "The single commit `{ref}`.",
    ReviewScope.CUSTOM: "Defined by the operator's instructions below.",
}


def build_code_review_prompt(
    context: DiffContext,
    design_doc: str | None = None,
    instructions: str | None = None,
) -> str:
    """
    Build the code review brief with diff, optional design doc and instructions.

    Args:
        context: Gathered diff context
        design_doc: Optional design document text
        instructions: Optional operator instructions (custom scope)

    Returns:
        Complete brief for the reader
    """
    scope_lines = [
        "## Scope",
        "",
        SCOPE_DESCRIPTIONS[context.scope].format(
            ref=context.ref,
            base=context.base or "main",
            merge_base=context.merge_base or "unknown",
        ),
    ]
    if context.changed_files:
        scope_lines += ["", "Changed files:", ""]
        scope_lines += [f"- {path}" for path in context.changed_files]
    if context.log.strip():
        scope_lines += ["", "Commits:", "", "```", context.log.strip(), "```"]
    if instructions:
        scope_lines += ["", "### Instructions", "", instructions.strip()]

    if design_doc:
        design_section = f"""## Design Document

Review the changes against this design. Flag anything that contradicts it.

```markdown
{design_doc}
```
"""
    else:
        design_section = "## Design Document\n\nNo design document provided."

    if context.is_empty:
        diff_content = "(no diff gathered; if the instructions don't say what to review, ask the user)"
    else:
        diff_content = context.diff

    focus_list = "\n".join(f"{i}. {area.capitalize()}" for i, area in enumerate(FOCUS_AREAS, 1))
    section_list = "\n".join(f"## {name}" for name in REVIEW_SECTIONS)

    return CODE_REVIEW_PROMPT.format(
        scope_section="\n".join(scope_lines),
        design_section=design_section,
        diff_content=diff_content,
        focus_list=focus_list,
        section_list=section_list,
        max_top=MAX_TOP_FINDINGS,
    )
