"""Pull request metadata through the GitHub CLI (gh)."""

import json
import logging
import shutil
import subprocess

from . import PullRequestInfo

logger = logging.getLogger(__name__)

GH_COMMAND = "gh"

PR_VIEW_FIELDS = "number,title,body,url,baseRefName,headRefName,state"


class HostingError(RuntimeError):
    """The hosting CLI is unavailable or a command failed."""


def check_gh_available() -> bool:
    """Check if the gh CLI is on PATH."""
    return shutil.which(GH_COMMAND) is not None


def run_gh(args: list[str], cwd: str | None = None) -> str:
    """
    Run a gh command and return its stdout.

    Raises:
        HostingError: If gh is missing or exits non-zero
    """
    if not check_gh_available():
        raise HostingError(f"{GH_COMMAND} CLI not found; install it or skip PR lookups")

    cmd = [GH_COMMAND, *args]
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd or ".")
    result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)

    if result.returncode != 0:
        raise HostingError(f"{' '.join(cmd)} failed: {result.stderr.strip()}")

    return result.stdout


def parse_pr_view(output: str) -> PullRequestInfo:
    """Parse `gh pr view --json` output into PullRequestInfo."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise HostingError(f"Unexpected gh output: {e}") from None

    if not isinstance(data, dict) or "number" not in data:
        raise HostingError("Unexpected gh output: no PR number")

    return PullRequestInfo(
        number=int(data["number"]),
        title=data.get("title") or "",
        body=data.get("body") or "",
        url=data.get("url") or "",
        base_ref=data.get("baseRefName") or "",
        head_ref=data.get("headRefName") or "",
        state=data.get("state") or "",
    )


def fetch_pr(number: int | None = None, cwd: str | None = None) -> PullRequestInfo:
    """
    Get metadata for a pull request.

    Args:
        number: PR number. If None, gh resolves the PR of the current branch.
        cwd: Repository directory

    Returns:
        PullRequestInfo
    """
    args = ["pr", "view"]
    if number is not None:
        args.append(str(number))
    args += ["--json", PR_VIEW_FIELDS]
    return parse_pr_view(run_gh(args, cwd=cwd))


def update_pr_body(number: int, body_file: str, cwd: str | None = None) -> None:
    """Replace the body of a pull request with the contents of body_file."""
    run_gh(["pr", "edit", str(number), "--body-file", body_file], cwd=cwd)
