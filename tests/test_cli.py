"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from review_skills import DiffContext, PullRequestInfo, ReviewScope
from review_skills.cli import cli
from review_skills.git_utils import GitError
from review_skills.hosting import HostingError


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def mock_diff():
    """Sample diff content."""
    return """diff --git a/src/foo.py b/src/foo.py
index 1234567..abcdefg 100644
--- a/src/foo.py
+++ b/src/foo.py
@@ -1,3 +1,4 @@
 def hello():
-    print("hello")
+    print("hello world")
+    return True
"""


@pytest.fixture
def branch_context(mock_diff):
    """Gathered context for a feature branch."""
    return DiffContext(
        ref="feature",
        scope=ReviewScope.BRANCH,
        base="main",
        merge_base="abc1234",
        diff=mock_diff,
        log="def5678 Change greeting",
        changed_files=["src/foo.py"],
    )


@pytest.fixture
def review_result():
    """Structured review result."""
    return {
        "summary": "Prints a longer greeting.",
        "verdict": "Approve",
        "top_findings": [],
        "alternatives_justification": "the change is a one-liner",
    }


@pytest.fixture
def description_result():
    """Structured PR description result."""
    return {
        "Context": "The greeting was too short.",
        "What changed": ["Print hello world"],
        "How to test": ["Run `python -m foo`"],
        "Risks/Rollout": "None.",
        "Notes": "",
    }


class TestVersionCommand:
    """Tests for --version flag."""

    def test_version(self, runner):
        """Test that --version works."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output.lower()


class TestSkillCommands:
    """Tests for skills, show-skill and install-skill."""

    def test_skills_lists_both(self, runner):
        result = runner.invoke(cli, ["skills"])
        assert result.exit_code == 0
        assert "pr-description" in result.output
        assert "code-review" in result.output

    def test_show_skill(self, runner):
        result = runner.invoke(cli, ["show-skill", "code-review"])
        assert result.exit_code == 0
        assert "name: code-review" in result.output

    def test_show_unknown_skill(self, runner):
        result = runner.invoke(cli, ["show-skill", "deploy"])
        assert result.exit_code == 2

    def test_install_all(self, runner, tmp_path):
        """Test install-skill creates both skill files."""
        result = runner.invoke(cli, ["install-skill", "--skill-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / "pr-description" / "SKILL.md").exists()
        assert (tmp_path / "code-review" / "SKILL.md").exists()

    def test_install_one(self, runner, tmp_path):
        result = runner.invoke(cli, ["install-skill", "-k", "code-review", "--skill-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert not (tmp_path / "pr-description").exists()


class TestDescribeCommand:
    """Tests for the describe command."""

    def test_prints_brief(self, runner, branch_context):
        with patch("review_skills.cli.gather_branch_context") as mock_gather:
            mock_gather.return_value = branch_context
            result = runner.invoke(cli, ["describe", "-b", "feature", "--base", "main"])

        assert result.exit_code == 0
        assert 'print("hello world")' in result.output
        assert "## Risks/Rollout" in result.output
        assert mock_gather.call_args.args[:2] == ("main", "feature")

    def test_git_error(self, runner):
        with patch("review_skills.cli.gather_branch_context") as mock_gather:
            mock_gather.side_effect = GitError(["git", "merge-base"], "no merge base")
            result = runner.invoke(cli, ["describe"])

        assert result.exit_code == 1
        assert "no merge base" in result.output

    def test_empty_diff(self, runner):
        empty = DiffContext(ref="HEAD", scope=ReviewScope.BRANCH, base="main")
        with patch("review_skills.cli.gather_branch_context", return_value=empty), \
             patch("review_skills.cli.fetch_pr") as mock_fetch:
            result = runner.invoke(cli, ["describe", "--current-pr"])

        assert result.exit_code == 0
        assert "No changes to describe between main and HEAD." in result.output
        assert "## Instructions" not in result.output
        mock_fetch.assert_not_called()

    def test_with_existing_pr(self, runner, branch_context):
        pr = PullRequestInfo(number=42, title="Fix greeting", body="Closes #7")
        with patch("review_skills.cli.gather_branch_context", return_value=branch_context), \
             patch("review_skills.cli.fetch_pr", return_value=pr) as mock_fetch:
            result = runner.invoke(cli, ["describe", "--pr", "42"])

        assert result.exit_code == 0
        assert "Closes #7" in result.output
        assert mock_fetch.call_args.args[0] == 42

    def test_pr_lookup_failure(self, runner, branch_context):
        with patch("review_skills.cli.gather_branch_context", return_value=branch_context), \
             patch("review_skills.cli.fetch_pr", side_effect=HostingError("gh CLI not found")):
            result = runner.invoke(cli, ["describe", "--current-pr"])

        assert result.exit_code == 1
        assert "gh CLI not found" in result.output

    def test_output_file(self, runner, branch_context, tmp_path):
        out = tmp_path / "brief.md"
        with patch("review_skills.cli.gather_branch_context", return_value=branch_context):
            result = runner.invoke(cli, ["describe", "-o", str(out)])

        assert result.exit_code == 0
        assert 'print("hello world")' in out.read_text()


class TestReviewCommand:
    """Tests for the review command."""

    def test_review_no_changes(self, runner):
        """Test review with no changes."""
        empty = DiffContext(ref="working-tree", scope=ReviewScope.WORKING_TREE)
        with patch("review_skills.cli.gather_review_context", return_value=empty):
            result = runner.invoke(cli, ["review"])

        assert result.exit_code == 0
        assert "No changes to review" in result.output

    def test_branch_scope(self, runner, branch_context):
        with patch("review_skills.cli.gather_review_context", return_value=branch_context) as mock_gather:
            result = runner.invoke(cli, ["review", "-b", "feature", "--base", "develop"])

        assert result.exit_code == 0
        assert mock_gather.call_args.args[0] == ReviewScope.BRANCH
        assert mock_gather.call_args.kwargs["branch"] == "feature"
        assert mock_gather.call_args.kwargs["base"] == "develop"
        assert "## Top findings" in result.output

    def test_commit_scope(self, runner, branch_context):
        with patch("review_skills.cli.gather_review_context", return_value=branch_context) as mock_gather:
            runner.invoke(cli, ["review", "--commit", "abc1234"])

        assert mock_gather.call_args.args[0] == ReviewScope.COMMIT
        assert mock_gather.call_args.kwargs["commit"] == "abc1234"

    def test_default_is_working_tree(self, runner, branch_context):
        with patch("review_skills.cli.gather_review_context", return_value=branch_context) as mock_gather:
            runner.invoke(cli, ["review"])

        assert mock_gather.call_args.args[0] == ReviewScope.WORKING_TREE

    def test_custom_instructions_without_diff(self, runner):
        empty = DiffContext(ref="custom", scope=ReviewScope.CUSTOM)
        with patch("review_skills.cli.gather_review_context", return_value=empty) as mock_gather:
            result = runner.invoke(cli, ["review", "-i", "Check retry logic"])

        assert result.exit_code == 0
        assert mock_gather.call_args.args[0] == ReviewScope.CUSTOM
        assert "Check retry logic" in result.output

    def test_conflicting_scopes(self, runner):
        result = runner.invoke(cli, ["review", "-b", "feature", "--commit", "abc1234"])
        assert result.exit_code == 1
        assert "only one of" in result.output

    def test_design_doc(self, runner, branch_context, tmp_path):
        doc = tmp_path / "design.md"
        doc.write_text("Retries MUST be bounded.")
        with patch("review_skills.cli.gather_review_context", return_value=branch_context):
            result = runner.invoke(cli, ["review", "-b", "feature", "--design-doc", str(doc)])

        assert "Retries MUST be bounded." in result.output

    def test_missing_design_doc_warns(self, runner, branch_context, tmp_path):
        with patch("review_skills.cli.gather_review_context", return_value=branch_context):
            result = runner.invoke(cli, ["review", "-b", "feature", "--design-doc", str(tmp_path / "nope.md")])

        assert result.exit_code == 0
        assert "Design doc not found" in result.output

    def test_git_error(self, runner):
        with patch("review_skills.cli.gather_review_context") as mock_gather:
            mock_gather.side_effect = GitError(["git", "show", "zzz"], "unknown commit zzz")
            result = runner.invoke(cli, ["review", "--commit", "zzz"])

        assert result.exit_code == 1
        assert "unknown commit zzz" in result.output


class TestRenderCommands:
    """Tests for render-description and render-review."""

    def test_render_description(self, runner, tmp_path, description_result):
        path = tmp_path / "result.json"
        path.write_text(json.dumps(description_result))
        result = runner.invoke(cli, ["render-description", str(path)])

        assert result.exit_code == 0
        assert "## Context\n\nThe greeting was too short." in result.output
        assert "## Notes\n\nNone." in result.output

    def test_render_description_to_file(self, runner, tmp_path, description_result):
        path = tmp_path / "result.json"
        path.write_text(json.dumps(description_result))
        out = tmp_path / ".git" / "PR_DESCRIPTION.md"
        result = runner.invoke(cli, ["render-description", str(path), "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_text().startswith("## Context")

    def test_render_description_missing_input(self, runner, tmp_path):
        path = tmp_path / "result.yml"
        path.write_text("Context: Why\n")
        result = runner.invoke(cli, ["render-description", str(path)])

        assert result.exit_code == 1
        assert "Missing input" in result.output
        assert "Ask the user" in result.output

    def test_render_review(self, runner, tmp_path, review_result):
        path = tmp_path / "review.json"
        path.write_text(json.dumps(review_result))
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 0
        assert "## Top findings\n\nNone." in result.output
        assert "**Verdict:** Approve" in result.output

    def test_render_review_summary(self, runner, tmp_path, review_result):
        path = tmp_path / "review.json"
        path.write_text(json.dumps(review_result))
        result = runner.invoke(cli, ["render-review", str(path), "-o", "summary"])

        assert result.exit_code == 0
        assert "Verdict: Approve" in result.output
        assert "## Summary" not in result.output

    def test_render_review_bad_severity(self, runner, tmp_path, review_result):
        review_result["top_findings"] = ["[CRITICAL] Everything"]
        path = tmp_path / "review.json"
        path.write_text(json.dumps(review_result))
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 1
        assert "Unknown severity" in result.output

    def test_render_review_not_a_mapping(self, runner, tmp_path):
        path = tmp_path / "review.json"
        path.write_text("[]")
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 1
        assert "mapping" in result.output

    def test_render_review_malformed_yaml(self, runner, tmp_path):
        path = tmp_path / "review.yml"
        path.write_text("summary: [unclosed\n")
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 1
        assert f"Error: {path}:" in result.output
        assert "Traceback" not in result.output

    def test_render_review_finding_not_a_mapping(self, runner, tmp_path, review_result):
        review_result["top_findings"] = [42]
        path = tmp_path / "review.json"
        path.write_text(json.dumps(review_result))
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 1
        assert "Finding must be a mapping" in result.output

    def test_render_review_unknown_label_in_risks(self, runner, tmp_path, review_result):
        review_result["risks"] = ["[CRITICAL] outage during deploy"]
        path = tmp_path / "review.json"
        path.write_text(json.dumps(review_result))
        result = runner.invoke(cli, ["render-review", str(path)])

        assert result.exit_code == 1
        assert "Risks: unknown severity 'CRITICAL'" in result.output
        assert "BLOCKER, MAJOR, MINOR" in result.output


class TestCheckCommands:
    """Tests for check-description and check-review."""

    def test_check_rendered_review_passes(self, runner, tmp_path, review_result):
        src = tmp_path / "review.json"
        src.write_text(json.dumps(review_result))
        out = tmp_path / "review.md"
        runner.invoke(cli, ["render-review", str(src), "-f", str(out)])

        result = runner.invoke(cli, ["check-review", str(out)])
        assert result.exit_code == 0
        assert "All structure checks passed" in result.output

    def test_check_review_fails(self, runner, tmp_path):
        path = tmp_path / "review.md"
        path.write_text("## Summary\n\nLooks fine.\n")
        result = runner.invoke(cli, ["check-review", str(path)])

        assert result.exit_code == 1
        assert "Missing section: Top findings" in result.output

    def test_check_description(self, runner, tmp_path, description_result):
        src = tmp_path / "result.json"
        src.write_text(json.dumps(description_result))
        out = tmp_path / "desc.md"
        runner.invoke(cli, ["render-description", str(src), "-o", str(out)])

        result = runner.invoke(cli, ["check-description", str(out)])
        assert result.exit_code == 0

    def test_check_description_fails(self, runner, tmp_path):
        path = tmp_path / "desc.md"
        path.write_text("## Summary\n\nStuff\n")
        result = runner.invoke(cli, ["check-description", str(path)])

        assert result.exit_code == 1
        assert "Missing section: Context" in result.output


class TestUpdatePRCommand:
    """Tests for the update-pr command."""

    @pytest.fixture
    def body_file(self, tmp_path):
        path = tmp_path / "PR_DESCRIPTION.md"
        path.write_text(
            "## Context\n\nx\n\n## What changed\n\nx\n\n## How to test\n\nx\n\n"
            "## Risks/Rollout\n\nx\n\n## Notes\n\nx\n"
        )
        return path

    def test_requires_confirmation(self, runner, body_file):
        with patch("review_skills.cli.update_pr_body") as mock_update:
            result = runner.invoke(cli, ["update-pr", "42", str(body_file)], input="n\n")

        assert result.exit_code == 1
        mock_update.assert_not_called()

    def test_confirmed(self, runner, body_file):
        with patch("review_skills.cli.update_pr_body") as mock_update:
            result = runner.invoke(cli, ["update-pr", "42", str(body_file)], input="y\n")

        assert result.exit_code == 0
        assert "Updated PR #42" in result.output
        mock_update.assert_called_once_with(42, str(body_file), cwd=None)

    def test_yes_flag(self, runner, body_file):
        with patch("review_skills.cli.update_pr_body") as mock_update:
            result = runner.invoke(cli, ["update-pr", "42", str(body_file), "--yes"])

        assert result.exit_code == 0
        mock_update.assert_called_once()

    def test_hosting_error(self, runner, body_file):
        with patch("review_skills.cli.update_pr_body", side_effect=HostingError("gh CLI not found")):
            result = runner.invoke(cli, ["update-pr", "42", str(body_file), "-y"])

        assert result.exit_code == 1
        assert "gh CLI not found" in result.output

    def test_default_draft_missing(self, runner, tmp_path):
        result = runner.invoke(cli, ["update-pr", "42", "-r", str(tmp_path), "-y"])
        assert result.exit_code == 1
        assert "No draft at" in result.output

    def test_warns_on_bad_structure(self, runner, tmp_path):
        path = tmp_path / "draft.md"
        path.write_text("just text\n")
        with patch("review_skills.cli.update_pr_body"):
            result = runner.invoke(cli, ["update-pr", "42", str(path), "-y"])

        assert result.exit_code == 0
        assert "fails structure checks" in result.output
