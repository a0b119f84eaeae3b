import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from click.testing import CliRunner

import author_review.cli as cli
from author_review.config.loader import ConfigError, ReviewSettings
from author_review.vcs.git_client import GitError
from author_review.viewer.editor import ViewerError

from fakes import FakeHistory, FakeViewer

ALICE = "Alice <alice@example.com>"


class CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.history = FakeHistory()
        self.history.refs.add("base")
        self.viewer = FakeViewer()
        self.settings = ReviewSettings(classifier="heuristic")
        self.repo_root = Path("/repo")

    def invoke(self, args, input=None):
        git_cls = Mock()
        git_cls.find_repo_root.return_value = self.repo_root
        git_cls.return_value = self.history
        with patch.object(cli, "GitClient", git_cls), \
                patch.object(cli, "load_config", return_value=self.settings), \
                patch.object(cli, "build_viewer", return_value=self.viewer):
            return CliRunner().invoke(cli.main, args, input=input)

    def add_alice_commit(self):
        self.history.add_commit("c1", ALICE, files=[("x.txt", "A")])
        self.history.blobs[("c1", "x.txt")] = b"hello\n"
        self.history.trees["HEAD"] = {"x.txt"}
        self.history.blobs[("HEAD", "x.txt")] = b"hello\n"


class TestUsage(CLITestCase):
    def test_missing_both_arguments(self) -> None:
        result = self.invoke([])
        self.assertEqual(result.exit_code, cli.EXIT_USAGE)
        self.assertIn("Usage:", result.output)
        self.assertIn("<author-name-or-email>", result.output)

    def test_missing_author(self) -> None:
        result = self.invoke(["base"])
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.viewer.seen_paths, [])

    def test_version(self) -> None:
        result = CliRunner().invoke(cli.main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("author-review", result.output)


class TestRun(CLITestCase):
    def test_no_commits_found_is_success(self) -> None:
        self.history.add_commit("c1", "Bob <bob@example.com>")
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("No commits found by 'Alice' after base", result.output)

    def test_blank_answer_selects_diff_mode(self) -> None:
        self.add_alice_commit()
        result = self.invoke(["base", "Alice"], input="\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Choose an option:", result.output)
        self.assertEqual(len(self.viewer.diffs), 1)
        self.assertEqual(self.viewer.opened, [])
        self.assertIn("Commits reviewed: 1", result.output)

    def test_snapshot_mode_from_prompt(self) -> None:
        self.add_alice_commit()
        result = self.invoke(["base", "Alice"], input="2\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual([data for _, data in self.viewer.opened], [b"hello\n"])
        self.assertEqual(self.viewer.diffs, [])

    def test_mode_option_skips_prompt(self) -> None:
        self.add_alice_commit()
        result = self.invoke(["base", "Alice", "--mode", "2"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn("Choose an option:", result.output)
        self.assertEqual(len(self.viewer.opened), 1)

    def test_configured_default_mode(self) -> None:
        self.settings = ReviewSettings(classifier="heuristic", default_mode=2)
        self.add_alice_commit()
        result = self.invoke(["base", "Alice"], input="\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(self.viewer.opened), 1)

    def test_scratch_files_removed_after_run(self) -> None:
        self.add_alice_commit()
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(self.viewer.seen_paths)
        for path in self.viewer.seen_paths:
            self.assertFalse(path.exists())
            self.assertFalse(path.parent.parent.exists())


class TestFailures(CLITestCase):
    def test_config_error(self) -> None:
        git_cls = Mock()
        with patch.object(cli, "GitClient", git_cls), \
                patch.object(cli, "load_config", side_effect=ConfigError("bad json")):
            result = CliRunner().invoke(cli.main, ["base", "Alice"])
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertIn("Configuration error: bad json", result.output)

    def test_no_repository(self) -> None:
        self.repo_root = None
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)

    def test_invalid_start_ref(self) -> None:
        result = self.invoke(["no-such-ref", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)
        self.assertIn("no-such-ref", result.output)

    def test_enumeration_git_error(self) -> None:
        self.history.list_commits = Mock(side_effect=GitError("bad revision"))
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)

    def test_viewer_missing(self) -> None:
        self.add_alice_commit()
        self.viewer = Mock()
        self.viewer.ensure_available.side_effect = ViewerError("Viewer command not found: code")
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_VIEWER_MISSING)
        self.assertIn("Viewer command not found", result.output)

    def test_viewer_missing_without_commits_exits_zero(self) -> None:
        self.viewer = Mock()
        self.viewer.ensure_available.side_effect = ViewerError("Viewer command not found: code")
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("No commits found by 'Alice' after base", result.output)
        self.viewer.ensure_available.assert_not_called()

    def test_unexpected_error(self) -> None:
        self.history.list_commits = Mock(side_effect=RuntimeError("kaboom"))
        result = self.invoke(["base", "Alice", "--mode", "1"])
        self.assertEqual(result.exit_code, cli.EXIT_GENERIC_ERROR)
        self.assertIn("Unexpected error: kaboom", result.output)

    def test_snapshot_tree_error(self) -> None:
        self.add_alice_commit()
        self.history.tree_paths = Mock(side_effect=GitError("bad tree"))
        result = self.invoke(["base", "Alice", "--mode", "2"])
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)


class TestBuildViewer(unittest.TestCase):
    def test_override_command(self) -> None:
        viewer = cli.build_viewer(ReviewSettings(viewer="code"), "meld")
        self.assertEqual(viewer.command, "meld")
        self.assertEqual(viewer.diff_args, ["--diff"])

    def test_settings_command(self) -> None:
        self.assertEqual(cli.build_viewer(ReviewSettings(viewer="vim")).command, "vim")


if __name__ == "__main__":
    unittest.main()
