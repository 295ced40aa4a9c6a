"""Gather version-control inputs for the PR description and code review procedures."""

from . import DiffContext, ReviewScope
from .git_utils import (
    GitError,
    extract_changed_files,
    get_commit_diff,
    get_diff,
    get_log,
    get_merge_base,
    get_status,
    ref_exists,
    untracked_files,
)


def gather_branch_context(
    base: str = "main",
    head: str = "HEAD",
    remote: str = "origin",
    cwd: str | None = None,
    context_lines: int = 10,
) -> DiffContext:
    """
    Collect diff, diffstat, log and status for head compared to base.

    The comparison starts at the merge base, so commits that landed on base
    after head branched off are not part of the diff.

    Raises:
        GitError: If the merge base can't be found or a git command fails
    """
    merge_base = get_merge_base(base, head, remote=remote, cwd=cwd)

    diff = get_diff(head, merge_base, cwd=cwd, context_lines=context_lines)
    return DiffContext(
        ref=head,
        scope=ReviewScope.BRANCH,
        base=base,
        merge_base=merge_base,
        diff=diff,
        stat=get_diff(head, merge_base, cwd=cwd, stat=True),
        log=get_log(f"{merge_base}..{head}", cwd=cwd),
        status=get_status(cwd=cwd),
        changed_files=extract_changed_files(diff),
    )


def gather_working_tree_context(cwd: str | None = None, context_lines: int = 10) -> DiffContext:
    """Collect staged and unstaged changes against HEAD, plus untracked files."""
    diff = get_diff(cwd=cwd, context_lines=context_lines)
    status = get_status(cwd=cwd)

    changed = extract_changed_files(diff)
    changed += [path for path in untracked_files(status) if path not in changed]

    return DiffContext(
        ref="working-tree",
        scope=ReviewScope.WORKING_TREE,
        base="HEAD",
        diff=diff,
        stat=get_diff(cwd=cwd, stat=True),
        status=status,
        changed_files=changed,
    )


def gather_commit_context(sha: str, cwd: str | None = None, context_lines: int = 10) -> DiffContext:
    """Collect the change introduced by a single commit."""
    if not ref_exists(sha, cwd=cwd):
        raise GitError(["git", "show", sha], f"unknown commit {sha}")

    diff = get_commit_diff(sha, cwd=cwd, context_lines=context_lines)
    return DiffContext(
        ref=sha,
        scope=ReviewScope.COMMIT,
        diff=diff,
        log=get_log(f"{sha}^!", cwd=cwd),
        changed_files=extract_changed_files(diff),
    )


def gather_custom_context(cwd: str | None = None, context_lines: int = 10) -> DiffContext:
    """
    Context for review driven by operator instructions.

    No comparison is implied by the instructions, so only working-tree
    changes (if any) are attached.
    """
    context = gather_working_tree_context(cwd=cwd, context_lines=context_lines)
    context.ref = "custom"
    context.scope = ReviewScope.CUSTOM
    return context


def gather_review_context(
    scope: ReviewScope,
    branch: str | None = None,
    base: str = "main",
    commit: str | None = None,
    remote: str = "origin",
    cwd: str | None = None,
    context_lines: int = 10,
) -> DiffContext:
    """
    Collect the diff under review for one of the four scopes.

    Raises:
        ValueError: If the scope's required argument is missing
        GitError: If a git command fails
    """
    if scope == ReviewScope.BRANCH:
        if not branch:
            raise ValueError("Branch scope needs a branch to review")
        return gather_branch_context(base, branch, remote=remote, cwd=cwd, context_lines=context_lines)
    elif scope == ReviewScope.WORKING_TREE:
        return gather_working_tree_context(cwd=cwd, context_lines=context_lines)
    elif scope == ReviewScope.COMMIT:
        if not commit:
            raise ValueError("Commit scope needs a commit sha")
        return gather_commit_context(commit, cwd=cwd, context_lines=context_lines)
    else:
        return gather_custom_context(cwd=cwd, context_lines=context_lines)
