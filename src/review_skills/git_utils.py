"""Git utilities for gathering diffs, logs and merge bases."""

import logging
import subprocess

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """A git command failed."""

    def __init__(self, cmd: list[str], stderr: str):
        self.cmd = cmd
        self.stderr = stderr.strip()
        super().__init__(f"{' '.join(cmd)} failed: {self.stderr}")


def run_git(args: list[str], cwd: str | None = None) -> str:
    """
    Run a git command and return its stdout.

    Args:
        args: Arguments after "git"
        cwd: Working directory to run git in (default: current directory)

    Returns:
        Command output as string

    Raises:
        GitError: If git exits non-zero or is not installed
    """
    cmd = ["git", *args]
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd or ".")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)
    except FileNotFoundError:
        raise GitError(cmd, "git executable not found") from None

    if result.returncode != 0:
        raise GitError(cmd, result.stderr)

    return result.stdout


def get_status(cwd: str | None = None) -> str:
    """Short status of the working tree."""
    return run_git(["status", "--short"], cwd=cwd)


def ref_exists(ref: str, cwd: str | None = None) -> bool:
    """Check whether a ref resolves to a commit."""
    try:
        run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], cwd=cwd)
    except GitError:
        return False
    return True


def get_upstream(base: str, remote: str = "origin", cwd: str | None = None) -> str:
    """
    Resolve the remote-tracking branch for base.

    Uses the configured upstream of base when there is one,
    otherwise falls back to <remote>/<base>.
    """
    try:
        upstream = run_git(["rev-parse", "--abbrev-ref", f"{base}@{{upstream}}"], cwd=cwd).strip()
        if upstream:
            return upstream
    except GitError:
        pass
    return f"{remote}/{base}"


def get_merge_base(
    base: str,
    head: str = "HEAD",
    remote: str = "origin",
    cwd: str | None = None,
) -> str:
    """
    Find the common ancestor of base and head.

    Fallback order when the lookup fails:
    1. fetch from remote and retry
    2. retry against the upstream-tracking branch of base

    Args:
        base: Base branch
        head: Branch or commit being compared (default: HEAD)
        remote: Remote to fetch from (default: origin)
        cwd: Working directory

    Returns:
        Merge-base commit sha

    Raises:
        GitError: If no merge base can be found
    """
    try:
        return run_git(["merge-base", base, head], cwd=cwd).strip()
    except GitError as e:
        logger.debug("merge-base %s %s failed: %s", base, head, e.stderr)

    try:
        run_git(["fetch", remote], cwd=cwd)
    except GitError as e:
        logger.debug("fetch %s failed: %s", remote, e.stderr)
    else:
        try:
            return run_git(["merge-base", base, head], cwd=cwd).strip()
        except GitError:
            pass

    upstream = get_upstream(base, remote, cwd=cwd)
    logger.debug("Retrying merge-base against %s", upstream)
    return run_git(["merge-base", upstream, head], cwd=cwd).strip()


def get_diff(
    ref: str | None = None,
    base: str | None = None,
    cwd: str | None = None,
    context_lines: int = 10,
    stat: bool = False,
) -> str:
    """
    Get git diff.

    Args:
        ref: Commit or branch to diff. If None, uses working-tree changes against HEAD.
        base: Commit to diff ref against. Used as "base...ref" (default: main)
        cwd: Working directory to run git in (default: current directory)
        context_lines: Number of context lines around changes (default: 10)
        stat: Return the diffstat instead of the patch

    Returns:
        Git diff output as string

    Raises:
        GitError: If git command fails
    """
    args = ["diff", "--stat"] if stat else ["diff", f"-U{context_lines}"]

    if ref is None:
        args.append("HEAD")
    else:
        args.append(f"{base or 'main'}...{ref}")

    return run_git(args, cwd=cwd)


def get_commit_diff(sha: str, cwd: str | None = None, context_lines: int = 10) -> str:
    """Get the patch (with message) introduced by a single commit."""
    return run_git(["show", f"-U{context_lines}", "--format=medium", sha], cwd=cwd)


def get_log(revision_range: str, cwd: str | None = None) -> str:
    """One line per commit in revision_range, oldest first."""
    return run_git(["log", "--oneline", "--reverse", revision_range], cwd=cwd)


def read_file_content(path: str) -> str | None:
    """
    Read file content, returning None if file doesn't exist.

    Args:
        path: Path to file

    Returns:
        File content or None
    """
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return None


def extract_changed_files(diff_content: str) -> list[str]:
    """
    Extract file paths from a git diff.

    Args:
        diff_content: Git diff output

    Returns:
        List of file paths that were changed, deleted files included
    """
    files = []
    for line in diff_content.split("\n"):
        if line.startswith("diff --git a/"):
            # "diff --git a/path b/path"
            _, _, rest = line.partition(" b/")
            if rest and rest not in files:
                files.append(rest)
    return files


def untracked_files(status: str) -> list[str]:
    """File paths marked untracked ("??") in short status output."""
    return [line[3:] for line in status.splitlines() if line.startswith("?? ")]
