"""Tests for the git plumbing wrappers against real repositories."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from gitrepos import git, init_repo, make_source_repo, staged_blob, staged_paths, write_files

from git_fetch_dirs import git as plumbing
from git_fetch_dirs.exceptions import GitCommandError


class PlumbingTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.source = root / "src"
        self.commit = make_source_repo(self.source)
        self.remote = self.source.as_uri()
        self.target = init_repo(root / "target")


class RemoteTagTests(PlumbingTestCase):
    def test_resolves_tag_to_commit(self) -> None:
        self.assertEqual(plumbing.resolve_remote_tag(self.target, self.remote, "v1.0.1"), self.commit)

    def test_missing_tag_is_none(self) -> None:
        self.assertIsNone(plumbing.resolve_remote_tag(self.target, self.remote, "v9.9.9"))

    def test_tag_name_must_match_exactly(self) -> None:
        git(self.source, "tag", "release/v1.0.1")

        self.assertIsNone(plumbing.resolve_remote_tag(self.target, self.remote, "release"))
        self.assertEqual(
            plumbing.resolve_remote_tag(self.target, self.remote, "release/v1.0.1"),
            self.commit,
        )

    def test_unreachable_remote_raises(self) -> None:
        missing = (Path(self._tmp.name) / "nowhere").as_uri()

        with self.assertRaises(GitCommandError) as ctx:
            plumbing.resolve_remote_tag(self.target, missing, "v1.0.1")

        self.assertNotEqual(ctx.exception.returncode, 0)
        self.assertEqual(ctx.exception.command[:2], ["git", "ls-remote"])


class TransferTests(PlumbingTestCase):
    def test_object_kind_raises_when_absent(self) -> None:
        with self.assertRaises(GitCommandError):
            plumbing.object_kind(self.target, self.commit)

    def test_transfer_makes_commit_local(self) -> None:
        transfer_id = plumbing.transfer_commit(self.target, self.remote, self.commit)

        self.assertIsNotNone(transfer_id)
        self.assertRegex(transfer_id, r"^[0-9a-f]{40,64}$")
        self.assertEqual(plumbing.object_kind(self.target, self.commit), "commit")

    def test_peel_commit_follows_annotated_tags(self) -> None:
        git(self.source, "tag", "-a", "v2", "-m", "release v2")
        tag_object = git(self.source, "rev-parse", "v2").strip()
        self.assertIsNone(plumbing.peel_commit(self.target, tag_object))

        plumbing.transfer_commit(self.target, self.remote, tag_object)

        self.assertEqual(plumbing.object_kind(self.target, tag_object), "tag")
        self.assertEqual(plumbing.peel_commit(self.target, tag_object), self.commit)
        self.assertEqual(plumbing.peel_commit(self.target, self.commit), self.commit)

    def test_transfer_is_shallow(self) -> None:
        write_files(self.source, {"a/later.txt": "later\n"})
        git(self.source, "add", "-A")
        git(self.source, "commit", "-q", "-m", "later")
        head = git(self.source, "rev-parse", "HEAD").strip()

        plumbing.transfer_commit(self.target, self.remote, head)

        self.assertEqual(plumbing.object_kind(self.target, head), "commit")
        with self.assertRaises(GitCommandError):
            plumbing.object_kind(self.target, self.commit)


class TreeTests(PlumbingTestCase):
    def setUp(self) -> None:
        super().setUp()
        plumbing.transfer_commit(self.target, self.remote, self.commit)

    def test_locate_subtrees_in_one_call(self) -> None:
        found = plumbing.locate_subtrees(self.target, self.commit, ["a", "b/c", "missing", "README.md"])

        self.assertEqual(set(found), {"a", "b/c"})
        self.assertEqual(found["a"], git(self.source, "rev-parse", "v1.0.1:a").strip())
        self.assertEqual(found["b/c"], git(self.source, "rev-parse", "v1.0.1:b/c").strip())

    def test_list_directories(self) -> None:
        self.assertEqual(plumbing.list_directories(self.target, self.commit), ["a", "b"])

    def test_list_tree_is_recursive(self) -> None:
        tree = git(self.source, "rev-parse", "v1.0.1:b").strip()

        paths = [entry.path for entry in plumbing.list_tree(self.target, tree)]

        self.assertEqual(paths, ["c/one.txt", "c/two.txt", "d/three.txt"])

    def test_merge_overwrites_colliding_entries_only(self) -> None:
        write_files(self.target, {"vendor/a/a.txt": "local\n", "keep.txt": "keep\n"})
        git(self.target, "add", "vendor/a/a.txt", "keep.txt")
        keep_blob = staged_blob(self.target, "keep.txt")
        tree = git(self.source, "rev-parse", "v1.0.1:a").strip()

        staged = plumbing.merge_tree_into_index(self.target, tree, "vendor/a/")

        self.assertEqual(staged, 1)
        self.assertEqual(
            staged_blob(self.target, "vendor/a/a.txt"),
            git(self.source, "rev-parse", "v1.0.1:a/a.txt").strip(),
        )
        self.assertEqual(staged_blob(self.target, "keep.txt"), keep_blob)
        # working tree is not touched by the merge
        self.assertEqual((self.target / "vendor/a/a.txt").read_text(), "local\n")

    def test_merge_accepts_prefix_without_trailing_slash(self) -> None:
        tree = git(self.source, "rev-parse", "v1.0.1:a").strip()

        plumbing.merge_tree_into_index(self.target, tree, "lib")

        self.assertEqual(plumbing.list_staged_paths(self.target), ["lib/a.txt"])

    def test_materialize_and_unstage(self) -> None:
        tree = git(self.source, "rev-parse", "v1.0.1:b/c").strip()
        plumbing.merge_tree_into_index(self.target, tree, "vendor/c/")

        plumbing.materialize(self.target, ["vendor/c/one.txt"])
        plumbing.unstage(self.target, ["vendor/c/"])

        self.assertEqual((self.target / "vendor/c/one.txt").read_text(), "one\n")
        self.assertFalse((self.target / "vendor/c/two.txt").exists())
        self.assertEqual(staged_paths(self.target), [])

    def test_empty_inputs_are_noops(self) -> None:
        plumbing.materialize(self.target, [])
        plumbing.unstage(self.target, [])

        self.assertEqual(plumbing.locate_subtrees(self.target, self.commit, []), {})
        self.assertEqual(plumbing.list_staged_paths(self.target), [])


class RunGitTests(unittest.TestCase):
    def test_failure_carries_command_and_status(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(GitCommandError) as ctx:
                plumbing.run_git(["rev-parse", "--show-toplevel"], cwd=Path(tmp))

        self.assertEqual(ctx.exception.command, ["git", "rev-parse", "--show-toplevel"])
        self.assertNotEqual(ctx.exception.returncode, 0)
        self.assertIn("rev-parse", str(ctx.exception))

    def test_raise_on_error_false_returns_process(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            proc = plumbing.run_git(["rev-parse", "--show-toplevel"], cwd=Path(tmp), raise_on_error=False)

        self.assertNotEqual(proc.returncode, 0)


if __name__ == "__main__":
    unittest.main()
