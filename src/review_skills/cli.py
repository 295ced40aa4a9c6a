"""Command-line interface for the PR description and code review skills."""

import logging
import sys
from pathlib import Path

import click

from . import MissingInputError, ReviewScope
from .checks import check_pr_description, check_review_report
from .config import load_config
from .context import gather_branch_context, gather_review_context
from .git_utils import GitError, read_file_content
from .hosting import HostingError, fetch_pr, update_pr_body
from .parser import load_result, parse_pr_description, parse_review_report
from .prompts import build_code_review_prompt, build_pr_description_prompt
from .report import format_review_summary, render_pr_description, render_review_report
from .skill import SKILLS, get_skill, install_skill as write_skill


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log git and gh commands to stderr")
def cli(verbose):
    """Review skills - PR description and code review playbooks."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)


def write_output(text: str, output: str | None, label: str) -> None:
    """Write text to output if given, otherwise to stdout."""
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        click.echo(f"Saved {label} to {path}", err=True)
    else:
        click.echo(text)


@cli.command()
def skills():
    """List bundled skills."""
    click.echo("Available skills:\n")
    for name, (description, _) in SKILLS.items():
        click.echo(f"  {name}: {description}")


@cli.command("show-skill")
@click.argument("name", type=click.Choice(list(SKILLS)))
def show_skill(name):
    """Print a skill document."""
    click.echo(get_skill(name))


@cli.command("install-skill")
@click.option(
    "--skill",
    "-k",
    type=click.Choice(["all", *SKILLS]),
    default="all",
    help="Skill to install (default: all)",
)
@click.option(
    "--skill-dir",
    type=click.Path(),
    default=None,
    help="Parent directory for skill folders (default: .claude/skills)",
)
def install_skill(skill, skill_dir):
    """Install skill files as <skill-dir>/<name>/SKILL.md."""
    target = skill_dir or Path.cwd() / load_config().skill_dir
    names = list(SKILLS) if skill == "all" else [skill]

    for name in names:
        path = write_skill(name, target)
        click.echo(f"Installed {name} to {path}")


@cli.command()
@click.option(
    "--branch",
    "-b",
    default="HEAD",
    help="Branch to describe (default: HEAD)",
)
@click.option(
    "--base",
    default=None,
    help="Base branch the PR targets (default: main, or base from .review-skills.yml)",
)
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Repository directory (default: current directory)",
)
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Existing PR number to read the current title and body from",
)
@click.option(
    "--current-pr",
    is_flag=True,
    default=False,
    help="Read the PR of the current branch through gh",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Save the brief to a file instead of printing it",
)
def describe(branch, base, repo, pr_number, current_pr, output):
    """Gather branch changes and print the PR description brief."""
    config = load_config(repo)
    base = base or config.base

    try:
        context = gather_branch_context(
            base, branch, remote=config.remote, cwd=repo, context_lines=config.context_lines
        )
    except GitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if context.is_empty:
        click.echo(f"No changes to describe between {base} and {branch}.", err=True)
        sys.exit(0)

    pr = None
    if pr_number is not None or current_pr:
        try:
            pr = fetch_pr(pr_number, cwd=repo)
            click.echo(f"Loaded PR #{pr.number}: {pr.title}", err=True)
        except HostingError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    write_output(build_pr_description_prompt(context, pr), output, "brief")


@cli.command()
@click.option(
    "--branch",
    "-b",
    default=None,
    help="Branch to review against --base",
)
@click.option(
    "--base",
    default=None,
    help="Base branch to diff against (default: main, or base from .review-skills.yml)",
)
@click.option(
    "--working-tree",
    "-w",
    is_flag=True,
    default=False,
    help="Review uncommitted changes",
)
@click.option(
    "--commit",
    "-c",
    default=None,
    help="Review a single commit",
)
@click.option(
    "--instructions",
    "-i",
    default=None,
    help="Custom review instructions",
)
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Repository directory (default: current directory)",
)
@click.option(
    "--design-doc",
    "-s",
    default=None,
    help="Path to a design document to review against",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Save the brief to a file instead of printing it",
)
def review(branch, base, working_tree, commit, instructions, repo, design_doc, output):
    """
    Gather the diff under review and print the code review brief.

    Pick one scope: --branch, --working-tree, --commit, or --instructions
    alone. With none given, uncommitted changes are reviewed.
    """
    scopes = [flag for flag in (branch, working_tree, commit) if flag]
    if len(scopes) > 1:
        click.echo("Error: use only one of --branch, --working-tree, --commit", err=True)
        sys.exit(1)

    if branch:
        scope = ReviewScope.BRANCH
    elif commit:
        scope = ReviewScope.COMMIT
    elif instructions and not working_tree:
        scope = ReviewScope.CUSTOM
    else:
        scope = ReviewScope.WORKING_TREE

    config = load_config(repo)

    try:
        context = gather_review_context(
            scope,
            branch=branch,
            base=base or config.base,
            commit=commit,
            remote=config.remote,
            cwd=repo,
            context_lines=config.context_lines,
        )
    except GitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if context.is_empty and scope != ReviewScope.CUSTOM:
        click.echo("No changes to review.", err=True)
        sys.exit(0)

    design_content = None
    if design_doc:
        design_content = read_file_content(design_doc)
        if design_content is None:
            click.echo(f"Warning: Design doc not found: {design_doc}", err=True)

    click.echo(f"Reviewing {context.ref} ({len(context.changed_files)} files)", err=True)
    write_output(build_code_review_prompt(context, design_content, instructions), output, "brief")


def _load_or_exit(result_file: str) -> dict:
    try:
        return load_result(result_file)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _report_missing(e: MissingInputError) -> None:
    click.echo(f"Error: {e}", err=True)
    click.echo("Ask the user for the missing input and run again.", err=True)
    sys.exit(1)


@cli.command("render-description")
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write the description to a file (e.g. .git/PR_DESCRIPTION.md)",
)
def render_description(result_file, output):
    """Render a PR description from a JSON/YAML result."""
    data = _load_or_exit(result_file)
    try:
        text = render_pr_description(parse_pr_description(data))
    except MissingInputError as e:
        _report_missing(e)

    write_output(text, output, "description")


@cli.command("render-review")
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Choice(["full", "summary"]),
    default="full",
    help="Output format (default: full)",
)
@click.option(
    "--output-file",
    "-f",
    type=click.Path(),
    default=None,
    help="Write the report to a file",
)
def render_review(result_file, output, output_file):
    """Render a code review report from a JSON/YAML result."""
    data = _load_or_exit(result_file)
    try:
        report = parse_review_report(data)
        text = render_review_report(report)
    except MissingInputError as e:
        _report_missing(e)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output == "summary":
        text = format_review_summary(report)

    write_output(text, output_file, "report")


@cli.command("check-description")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def check_description(file):
    """
    Check a PR description's structure.

    Exit 0 when the five sections are present in order, 1 otherwise.
    """
    result = check_pr_description(Path(file).read_text(encoding="utf-8"))
    if result.passed:
        click.echo(result.summary)
        sys.exit(0)
    click.echo("Structure checks failed:\n")
    click.echo(result.summary)
    sys.exit(1)


@cli.command("check-review")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def check_review(file):
    """
    Check a code review report's structure.

    Exit 0 when sections, caps and labels are valid, 1 otherwise.
    """
    result = check_review_report(Path(file).read_text(encoding="utf-8"))
    if result.passed:
        click.echo(result.summary)
        sys.exit(0)
    click.echo("Structure checks failed:\n")
    click.echo(result.summary)
    sys.exit(1)


@cli.command("update-pr")
@click.argument("number", type=int)
@click.argument("body_file", type=click.Path(exists=True, dir_okay=False), required=False)
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Repository directory (default: current directory)",
)
@click.option("--yes", "-y", is_flag=True, default=False, help="Don't ask for confirmation")
def update_pr(number, body_file, repo, yes):
    """
    Replace a PR body with a drafted description.

    BODY_FILE defaults to draft_path from .review-skills.yml
    (.git/PR_DESCRIPTION.md).
    """
    if body_file is None:
        body_file = str(Path(repo or ".") / load_config(repo).draft_path)
        if not Path(body_file).exists():
            click.echo(f"Error: No draft at {body_file}", err=True)
            sys.exit(1)

    result = check_pr_description(Path(body_file).read_text(encoding="utf-8"))
    if not result.passed:
        click.echo("Warning: draft fails structure checks:", err=True)
        click.echo(result.summary, err=True)

    if not yes and not click.confirm(f"Replace the body of PR #{number} with {body_file}?"):
        click.echo("Aborted.", err=True)
        sys.exit(1)

    try:
        update_pr_body(number, body_file, cwd=repo)
    except HostingError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Updated PR #{number}")


if __name__ == "__main__":
    cli()
