from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from _testutil import ensure_repo_on_path, sample_project, write_module


class TestRepoModuleRegistry(unittest.TestCase):
    def test_discovers_transitive_modules(self) -> None:
        ensure_repo_on_path()

        from buildpolicy.graph.adapters.registry_repo import RepoModuleRegistry

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            sample_project(tmp)
            reg = RepoModuleRegistry(tmp)

            self.assertEqual(reg.module_names(), [":app", ":codegen", ":feature:login", ":pdfx", ":printing"])
            mods = reg.list_modules()
            self.assertEqual([m.kind for m in mods], ["application", "plugin", "library", "library", "library"])
            self.assertTrue(all(not m.is_evaluated for m in mods))
            # Listing is a snapshot of the same graph.
            self.assertIs(reg.list_modules()[0], mods[0])

    def test_declared_configuration_applies_on_evaluation(self) -> None:
        ensure_repo_on_path()

        from buildpolicy.graph.adapters.registry_repo import RepoModuleRegistry

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            sample_project(tmp)
            graph = RepoModuleRegistry(tmp).build_graph()

            printing = graph.module(":printing")
            self.assertIsNone(printing.config.compile_sdk)
            graph.evaluate(":printing")
            self.assertEqual(printing.config.as_dict(), {
                "compile_sdk": 21,
                "lint": {"check_release_builds": True, "abort_on_error": True},
            })

    def test_missing_modules_dir_is_empty(self) -> None:
        ensure_repo_on_path()

        from buildpolicy.graph.adapters.registry_repo import RepoModuleRegistry

        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(RepoModuleRegistry(Path(td)).list_modules(), [])

    def test_module_file_at_modules_root_rejected(self) -> None:
        ensure_repo_on_path()

        from buildpolicy.graph.adapters.registry_repo import RepoModuleRegistry
        from buildpolicy.graph.errors import ValidationError

        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            sample_project(tmp)
            (tmp / "modules" / "module.yml").write_text("kind: library\n", encoding="utf-8")
            with self.assertRaises(ValidationError) as ctx:
                RepoModuleRegistry(tmp).module_names()
        self.assertIn("no module name", str(ctx.exception))

    def test_invalid_module_definitions_rejected(self) -> None:
        ensure_repo_on_path()

        from buildpolicy.graph.adapters.registry_repo import RepoModuleRegistry
        from buildpolicy.graph.errors import NotFoundError, ValidationError

        cases = {
            "missing_kind": "compile_sdk: 30\n",
            "bad_kind": "kind: android-library\n",
            "unknown_key": "kind: library\nminSdk: 21\n",
            "bad_sdk": "kind: library\ncompile_sdk: thirty\n",
            "not_mapping": "- kind: library\n",
        }
        for label, text in cases.items():
            with self.subTest(label=label), tempfile.TemporaryDirectory() as td:
                tmp = Path(td)
                write_module(tmp, "lib", text)
                with self.assertRaises(ValidationError):
                    RepoModuleRegistry(tmp).build_graph()

        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(NotFoundError):
                RepoModuleRegistry(Path(td)).load_module_yaml(":nope")


if __name__ == "__main__":
    unittest.main()
