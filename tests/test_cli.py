from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path

from _testutil import ensure_repo_on_path, sample_project, write_module


def _run(argv):
    from buildpolicy.cli import main

    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        rc = main(argv)
    return rc, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._old = os.environ.pop("BUILDPOLICY_POLICY_FILE", None)

    def tearDown(self) -> None:
        if self._old is not None:
            os.environ["BUILDPOLICY_POLICY_FILE"] = self._old

    def test_resolve_enforces_policy(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td) / "project"
            sample_project(tmp)
            rc, out, _ = _run(["--project-dir", str(tmp), "resolve"])

        self.assertEqual(rc, 0)
        data = json.loads(out)
        self.assertEqual(data["policy"], {"target_version": 36, "lint_fatal": False})
        self.assertEqual(data["policy_source"], "<default>")
        self.assertEqual(data["evaluation_dependency"], ":app")

        mods = {m["module"]: m for m in data["modules"]}
        self.assertEqual(mods[":app"]["action"], "skipped")
        self.assertFalse(mods[":app"]["deferred"])
        self.assertEqual(mods[":app"]["config"]["compile_sdk"], 34)
        for name in (":printing", ":pdfx", ":feature:login", ":codegen"):
            self.assertEqual(mods[name]["action"], "applied")
            self.assertTrue(mods[name]["deferred"])
            self.assertEqual(mods[name]["config"], {
                "compile_sdk": 36,
                "lint": {"check_release_builds": False, "abort_on_error": False},
            })
        self.assertTrue(mods[":feature:login"]["build_dir"].endswith("login"))

    def test_resolve_with_policy_file(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            sample_project(tmp)
            (tmp / "config").mkdir()
            (tmp / "config" / "build_policy.yml").write_text(
                "target_version: 35\nlint_fatal: true\nbuild_dir: out\n", encoding="utf-8"
            )
            rc, out, _ = _run(["--project-dir", str(tmp), "resolve"])

        self.assertEqual(rc, 0)
        mods = {m["module"]: m for m in json.loads(out)["modules"]}
        self.assertEqual(mods[":pdfx"]["config"]["compile_sdk"], 35)
        self.assertTrue(mods[":pdfx"]["config"]["lint"]["abort_on_error"])

    def test_invalid_module_exits_non_zero(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            write_module(tmp, "printing", "kind: widget\n")
            rc, out, err = _run(["--project-dir", str(tmp), "resolve"])

        self.assertEqual(rc, 1)
        self.assertEqual(out, "")
        self.assertIn("module=:printing", err)

    def test_unknown_primary_module_exits_non_zero(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            sample_project(tmp)
            policy = tmp / "policy.yml"
            policy.write_text("target_version: 36\nlint_fatal: false\nprimary_module: ':aap'\n", encoding="utf-8")
            rc, out, err = _run(["--project-dir", str(tmp), "--policy", str(policy), "resolve"])

        self.assertEqual(rc, 1)
        self.assertEqual(out, "")
        self.assertIn("module=:aap", err)

    def test_default_primary_module_is_optional(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            write_module(tmp, "pdfx", "kind: plugin\ncompile_sdk: 28\n")
            rc, out, _ = _run(["--project-dir", str(tmp), "resolve"])

        self.assertEqual(rc, 0)
        data = json.loads(out)
        self.assertEqual(data["evaluation_dependency"], "")
        self.assertEqual(data["modules"][0]["config"]["compile_sdk"], 36)

    def test_layout_and_clean(self) -> None:
        ensure_repo_on_path()

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td) / "x" / "y" / "project"
            sample_project(tmp)
            rc, out, _ = _run(["--project-dir", str(tmp), "layout"])
            self.assertEqual(rc, 0)
            data = json.loads(out)
            root = Path(data["root_build_dir"])
            self.assertEqual(root, (Path(td) / "x" / "build").resolve())
            self.assertEqual(Path(data["modules"][":printing"]), root / "printing")

            (root / "printing").mkdir(parents=True)
            rc, out, _ = _run(["--project-dir", str(tmp), "clean"])
            self.assertEqual(rc, 0)
            self.assertTrue(json.loads(out)["removed"])
            self.assertFalse(root.exists())


if __name__ == "__main__":
    unittest.main()
