"""Tests for declaration file pairing in exports."""

import pytest

from entrylint.diagnostics import DiagnosticCode
from entrylint.diagnostics import Severity

TYPES_CODES = (DiagnosticCode.EXPORTS_TYPES_INVALID_FORMAT, DiagnosticCode.TYPES_NOT_EXPORTED)


def _types_diagnostics(diagnostics):
    return [d for d in diagnostics if d.code in TYPES_CODES]


class TestTypesExported:
    """Test TypesExportedChecker through a full lint pass."""

    @pytest.mark.asyncio
    async def test_skipped_without_declarations(self, lint_files):
        """Packages that ship no types are not asked to pair them."""
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {".": {"import": "./a.mjs", "require": "./a.cjs"}}},
                "a.mjs": "export default 1",
                "a.cjs": "module.exports = 1",
            }
        )
        assert _types_diagnostics(diagnostics) == []

    @pytest.mark.asyncio
    async def test_cjs_declaration_for_esm_code(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {".": {"types": "./a.d.ts", "import": "./a.mjs"}}},
                "index.d.ts": "export {}",
                "a.d.ts": "export default 1",
                "a.mjs": "export default 1",
            }
        )
        found = _types_diagnostics(diagnostics)
        assert len(found) == 1
        assert found[0].code == DiagnosticCode.EXPORTS_TYPES_INVALID_FORMAT
        assert found[0].severity == Severity.WARNING
        assert found[0].path == ("exports", ".", "types")
        assert found[0].args == {
            "condition": "import",
            "actual_format": "CJS",
            "expect_format": "ESM",
            "actual_extension": ".ts",
            "expect_extension": ".mts",
            "expect_path": ["exports", ".", "import", "types"],
        }

    @pytest.mark.asyncio
    async def test_dual_publish_checks_each_format(self, lint_files):
        """One declaration shared by both formats is wrong for one of them."""
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "types": "./a.d.ts",
                    "exports": {
                        ".": {
                            "import": {"types": "./a.d.ts", "default": "./a.js"},
                            "require": {"types": "./a.d.ts", "default": "./a.cjs"},
                        }
                    },
                },
                "a.d.ts": "export default 1",
                "a.js": "export default 1",
                "a.cjs": "module.exports = 1",
            }
        )
        found = _types_diagnostics(diagnostics)
        assert len(found) == 1
        assert found[0].path == ("exports", ".", "require", "types")
        assert found[0].args["actual_format"] == "ESM"
        assert found[0].args["expect_format"] == "CJS"
        assert found[0].args["expect_extension"] == ".cts"
        assert found[0].args["expect_path"] == ["exports", ".", "require", "types"]

    @pytest.mark.asyncio
    async def test_matching_declarations(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "types": "./a.d.ts",
                    "exports": {
                        ".": {
                            "import": {"types": "./a.d.mts", "default": "./a.mjs"},
                            "require": {"types": "./a.d.ts", "default": "./a.js"},
                        }
                    },
                },
                "a.d.ts": "export default 1",
                "a.d.mts": "export default 1",
                "a.mjs": "export default 1",
                "a.js": "module.exports = 1",
            }
        )
        assert _types_diagnostics(diagnostics) == []

    @pytest.mark.asyncio
    async def test_missing_adjacent_declarations(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "types": "./index.d.ts",
                    "exports": {".": {"import": "./a.mjs", "require": "./a.cjs"}},
                },
                "index.d.ts": "export {}",
                "a.mjs": "export default 1",
                "a.cjs": "module.exports = 1",
            }
        )
        found = {d.path: d for d in _types_diagnostics(diagnostics)}
        assert set(found) == {("exports", ".", "import"), ("exports", ".", "require")}
        assert all(d.code == DiagnosticCode.TYPES_NOT_EXPORTED for d in found.values())

        # The root declaration is CJS, so it cannot be reused for the ESM entry
        assert found[("exports", ".", "import")].args == {
            "types_file_path": "./index.d.ts",
            "actual_extension": ".ts",
            "expect_extension": ".mts",
        }
        assert found[("exports", ".", "require")].args == {"types_file_path": "./index.d.ts"}

    @pytest.mark.asyncio
    async def test_adjacent_declaration_is_found(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": "./index.js"},
                "index.d.ts": "export {}",
                "index.js": "module.exports = 1",
            }
        )
        assert _types_diagnostics(diagnostics) == []

    @pytest.mark.asyncio
    async def test_only_root_entry_is_checked(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "types": "./index.d.ts",
                    "exports": {".": "./index.js", "./sub": {"import": "./sub.mjs"}},
                },
                "index.d.ts": "export {}",
                "index.js": "module.exports = 1",
                "sub.mjs": "export default 1",
            }
        )
        assert _types_diagnostics(diagnostics) == []

    @pytest.mark.asyncio
    async def test_top_level_conditions_are_the_root_entry(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {"types": "./a.d.ts", "import": "./a.mjs"}},
                "index.d.ts": "export {}",
                "a.d.ts": "export default 1",
                "a.mjs": "export default 1",
            }
        )
        found = _types_diagnostics(diagnostics)
        assert [d.code for d in found] == [DiagnosticCode.EXPORTS_TYPES_INVALID_FORMAT]
        assert found[0].path == ("exports", "types")
        assert found[0].args["expect_path"] == ["exports", "import", "types"]
