"""PR description brief."""

from .. import PR_DESCRIPTION_SECTIONS, DiffContext, PullRequestInfo

PR_DESCRIPTION_PROMPT = """You are writing the description for a pull request.

## Change Under Description

**Head:** {ref}
**Base:** {base}
**Merge base:** {merge_base}

### Commits

```
{log}
```

### Diffstat

```
{stat}
```

### Diff

```diff
{diff}
```

{existing_section}

## Instructions

Write the description from the diff and the commits above. Group changes by
intent, not by file. State only what the diff shows.

Use exactly these sections, in this order:

{section_list}

- Context: why the change is needed; link the issue if one is referenced.
- What changed: one bullet per logical change.
- How to test: commands to run and the behavior to expect.
- Risks/Rollout: what could break, migrations, flags, rollback.
- Notes: anything else a reviewer should know, or `None.`

If a section has nothing to say, write `None.` rather than dropping it.
Output only the Markdown description.
"""

MISSING_INPUT_PROMPT = """You are writing the description for a pull request, but no changes were found
between {base} and {ref}.

Do not write a description. Ask the user:
- which branch the pull request targets, and
- whether the changes have been committed.
"""


def build_pr_description_prompt(
    context: DiffContext,
    pr: PullRequestInfo | None = None,
) -> str:
    """
    Build the brief for drafting a PR description.

    Args:
        context: Gathered branch context
        pr: Existing pull request metadata, if a PR is open

    Returns:
        Complete brief for the reader
    """
    if context.is_empty:
        return MISSING_INPUT_PROMPT.format(ref=context.ref, base=context.base or "main")

    if pr is not None:
        body = pr.body or "(empty)"
        existing_section = f"""## Existing Pull Request

**#{pr.number}:** {pr.title}
**URL:** {pr.url}
**State:** {pr.state}

Current body:

```markdown
{body}
```

Keep anything in the current body that is still true (linked issues, screenshots, reviewer notes).
"""
    else:
        existing_section = ""

    section_list = "\n".join(f"## {name}" for name in PR_DESCRIPTION_SECTIONS)

    return PR_DESCRIPTION_PROMPT.format(
        ref=context.ref,
        base=context.base or "main",
        merge_base=context.merge_base or "unknown",
        log=context.log.strip() or "(no commits)",
        stat=context.stat.strip(),
        diff=context.diff,
        existing_section=existing_section,
        section_list=section_list,
    )
