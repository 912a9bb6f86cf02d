"""Tests for the exports and imports condition tree checks."""

import json

import pytest

from entrylint.core import lint_package
from entrylint.diagnostics import DiagnosticCode
from entrylint.diagnostics import Severity
from entrylint.models import LintOptions
from entrylint.vfs import LocalVfs


def _find(diagnostics, code):
    return [d for d in diagnostics if d.code == code]


class TestConditionOrder:
    """Test key ordering rules inside condition maps."""

    @pytest.mark.asyncio
    async def test_import_before_require_is_fine(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {"import": "./a.mjs", "require": "./b.cjs"}},
                "a.mjs": "export default 1",
                "b.cjs": "module.exports = 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.EXPORTS_MODULE_SHOULD_PRECEDE_REQUIRE) == []

    @pytest.mark.asyncio
    async def test_module_after_require(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {"require": "./b.cjs", "module": "./a.mjs"}},
                "a.mjs": "export default 1",
                "b.cjs": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_MODULE_SHOULD_PRECEDE_REQUIRE)
        assert len(found) == 1
        assert found[0].path == ("exports", "module")
        assert found[0].severity == Severity.ERROR

    @pytest.mark.asyncio
    async def test_default_not_last(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {"default": "./a.mjs", "import": "./a.mjs"}},
                "a.mjs": "export default 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_DEFAULT_SHOULD_BE_LAST)
        assert [d.path for d in found] == [("exports", "default")]

    @pytest.mark.asyncio
    async def test_default_last_is_fine(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {"import": "./a.mjs", "default": "./a.mjs"}},
                "a.mjs": "export default 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.EXPORTS_DEFAULT_SHOULD_BE_LAST) == []

    @pytest.mark.asyncio
    async def test_types_not_first(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {".": {"import": "./a.mjs", "types": "./a.d.ts"}}},
                "a.mjs": "export default 1",
                "a.d.ts": "export default 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_TYPES_SHOULD_BE_FIRST)
        assert [d.path for d in found] == [("exports", ".", "types")]

    @pytest.mark.asyncio
    async def test_types_after_nested_types_is_a_fallback(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "exports": {
                        ".": {
                            "import": {"types": "./a.d.mts", "default": "./a.mjs"},
                            "types": "./a.d.ts",
                        }
                    },
                },
                "a.mjs": "export default 1",
                "a.d.mts": "export default 1",
                "a.d.ts": "export default 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.EXPORTS_TYPES_SHOULD_BE_FIRST) == []

    @pytest.mark.asyncio
    async def test_types_after_raw_typescript_source(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "exports": {".": {"development": "./src/a.ts", "types": "./a.d.ts", "default": "./a.js"}},
                },
                "a.js": "module.exports = 1",
                "a.d.ts": "export default 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.EXPORTS_TYPES_SHOULD_BE_FIRST) == []
        assert _find(diagnostics, DiagnosticCode.FILE_DOES_NOT_EXIST) == []


class TestLeafValues:
    """Test target value checks."""

    @pytest.mark.asyncio
    async def test_trailing_slash_without_matches(self, lint_files):
        """The subpath folder mapping is rewritten to a glob, which then finds nothing."""
        diagnostics = await lint_files({"package.json": {"name": "pkg", "exports": {"./sub/": "./sub/"}}})

        mapping = _find(diagnostics, DiagnosticCode.EXPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING)
        assert len(mapping) == 1
        assert mapping[0].severity == Severity.ERROR
        assert mapping[0].args == {"expect_path": ["exports", "./sub/*"], "expect_value": "./sub/*"}

        no_match = _find(diagnostics, DiagnosticCode.EXPORTS_GLOB_NO_MATCHED_FILES)
        assert [d.path for d in no_match] == [("exports", "./sub/")]
        assert no_match[0].severity == Severity.WARNING

    @pytest.mark.asyncio
    async def test_trailing_slash_beside_glob_is_a_suggestion(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "exports": {"./sub/": "./sub/", "./sub/*": "./sub/*"},
                },
                "sub/a.js": "export default 1",
            }
        )
        mapping = _find(diagnostics, DiagnosticCode.EXPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING)
        assert [d.severity for d in mapping] == [Severity.SUGGESTION]
        assert _find(diagnostics, DiagnosticCode.EXPORTS_GLOB_NO_MATCHED_FILES) == []

    @pytest.mark.asyncio
    async def test_value_without_dot_slash(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "type": "module", "exports": {".": "index.js"}},
                "index.js": "export default 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_VALUE_INVALID)
        assert len(found) == 1
        assert found[0].args == {"suggest_value": "./index.js"}

    @pytest.mark.asyncio
    async def test_missing_file(self, lint_files):
        diagnostics = await lint_files({"package.json": {"name": "pkg", "exports": {".": "./missing.js"}}})
        found = _find(diagnostics, DiagnosticCode.FILE_DOES_NOT_EXIST)
        assert [d.path for d in found] == [("exports", ".")]

    @pytest.mark.asyncio
    async def test_unpublished_file(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": "./lib.js"},
                "lib.js": "module.exports = 1",
            },
            published_files=["/pkg/package.json"],
        )
        found = _find(diagnostics, DiagnosticCode.FILE_NOT_PUBLISHED)
        assert [d.path for d in found] == [("exports",)]

    @pytest.mark.asyncio
    async def test_fallback_array(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "exports": {".": ["./a.js", "./missing.js"]}},
                "a.js": "module.exports = 1",
            }
        )
        fallback = _find(diagnostics, DiagnosticCode.EXPORTS_FALLBACK_ARRAY_USE)
        assert [d.path for d in fallback] == [("exports", ".")]
        missing = _find(diagnostics, DiagnosticCode.FILE_DOES_NOT_EXIST)
        assert [d.path for d in missing] == [("exports", ".", "1")]

    @pytest.mark.asyncio
    async def test_invalid_jsx_extension(self, lint_files):
        diagnostics = await lint_files({"package.json": {"name": "pkg", "exports": {".": "./a.mjsx"}}})
        found = _find(diagnostics, DiagnosticCode.FILE_INVALID_JSX_EXTENSION)
        assert len(found) == 1
        assert found[0].args["actual_extension"] == ".mjsx"
        assert _find(diagnostics, DiagnosticCode.FILE_DOES_NOT_EXIST) == []

    @pytest.mark.asyncio
    async def test_invalid_value_type(self, lint_files):
        diagnostics = await lint_files({"package.json": {"name": "pkg", "exports": {".": 5}}})
        found = _find(diagnostics, DiagnosticCode.FIELD_INVALID_VALUE_TYPE)
        assert [d.path for d in found] == [("exports", ".")]
        assert found[0].args["actual_type"] == "number"


class TestFileFormats:
    """Test format checks of exported files."""

    @pytest.mark.asyncio
    async def test_format_mismatch(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "type": "module", "exports": {".": {"require": "./index.js"}}},
                "index.js": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT)
        assert len(found) == 1
        assert found[0].path == ("exports", ".", "require")
        assert found[0].severity == Severity.WARNING
        assert found[0].args == {
            "actual_format": "CJS",
            "expect_format": "ESM",
            "actual_extension": ".js",
            "expect_extension": ".cjs",
            "actual_file_path": "./index.js",
        }

    @pytest.mark.asyncio
    async def test_no_format_check_after_node_condition(self, lint_files):
        """Only bundlers read conditions after `node`, and they accept any format."""
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "exports": {".": {"node": "./node.js", "default": "./index.js"}},
                },
                "node.js": "export default 1",
                "index.js": "module.exports = 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT) == []

    @pytest.mark.asyncio
    async def test_no_format_check_under_browser(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "exports": {".": {"browser": "./browser.js", "default": "./index.js"}},
                },
                "browser.js": "module.exports = 1",
                "index.js": "export default 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT) == []

    @pytest.mark.asyncio
    async def test_module_condition_must_be_esm(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "exports": {".": {"module": "./m.js", "default": "./index.js"}},
                },
                "m.js": "module.exports = 1",
                "index.js": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_MODULE_SHOULD_BE_ESM)
        assert [d.path for d in found] == [("exports", ".", "module")]
        assert found[0].severity == Severity.ERROR

    @pytest.mark.asyncio
    async def test_flow_files_are_skipped(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "type": "module", "exports": "./index.js"},
                "index.js": "// @flow\nmodule.exports = 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT) == []

    @pytest.mark.asyncio
    async def test_glob_sibling_with_expected_extension(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "type": "module", "exports": {"./*": "./dist/*"}},
                "dist/a.js": "module.exports = 1",
                "dist/a.cjs": "module.exports = 1",
                "dist/b.js": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT)
        assert len(found) == 1
        assert found[0].args["actual_file_path"] == "./dist/b.js"

    @pytest.mark.asyncio
    async def test_glob_null_exclusion(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "exports": {"./*": "./dist/*.js", "./internal/*": None},
                },
                "dist/a.js": "export default 1",
                "dist/internal/x.js": "module.exports = 1",
            }
        )
        assert _find(diagnostics, DiagnosticCode.FILE_INVALID_FORMAT) == []


class TestBrowserConflict:
    """Test exports values that the `browser` field also remaps."""

    @pytest.mark.asyncio
    async def test_conflict_under_browser_condition(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "browser": {"./a.js": "./a-browser.js"},
                    "exports": {".": {"browser": "./a.js", "default": "./a.js"}},
                },
                "a.js": "module.exports = 1",
                "a-browser.js": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.EXPORTS_VALUE_CONFLICTS_WITH_BROWSER)
        assert [d.path for d in found] == [("exports", ".", "browser")]
        assert found[0].args == {"browser_path": ["browser", "./a.js"], "browserish_condition": "browser"}
        assert len(_find(diagnostics, DiagnosticCode.USE_EXPORTS_OR_IMPORTS_BROWSER)) == 1


class TestImports:
    """Test the imports field."""

    @pytest.mark.asyncio
    async def test_key_without_hash(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {"name": "pkg", "imports": {"foo": "./a.js"}},
                "a.js": "module.exports = 1",
            }
        )
        found = _find(diagnostics, DiagnosticCode.IMPORTS_KEY_INVALID)
        assert len(found) == 1
        assert found[0].path == ("imports", "foo")
        assert found[0].args == {"suggest_key": "#foo"}

    @pytest.mark.asyncio
    async def test_external_package_targets_are_skipped(self, lint_files):
        diagnostics = await lint_files({"package.json": {"name": "pkg", "type": "module", "imports": {"#dep": "lodash"}}})
        assert diagnostics == []

    @pytest.mark.asyncio
    async def test_imports_codes_are_scoped(self, lint_files):
        diagnostics = await lint_files(
            {
                "package.json": {
                    "name": "pkg",
                    "type": "module",
                    "imports": {"#a": {"default": "./a.js", "node": "./a.js"}},
                },
                "a.js": "export default 1",
            }
        )
        assert len(_find(diagnostics, DiagnosticCode.IMPORTS_DEFAULT_SHOULD_BE_LAST)) == 1
        assert _find(diagnostics, DiagnosticCode.EXPORTS_DEFAULT_SHOULD_BE_LAST) == []

    @pytest.mark.asyncio
    async def test_imports_must_be_an_object(self, lint_files):
        diagnostics = await lint_files({"package.json": {"name": "pkg", "type": "module", "imports": ["./a.js"]}})
        found = _find(diagnostics, DiagnosticCode.FIELD_INVALID_VALUE_TYPE)
        assert [d.path for d in found] == [("imports",)]
        assert found[0].args == {"actual_type": "array", "expect_types": ["object"]}


class TestIdempotence:
    """Linting the same package twice gives the same result."""

    @pytest.mark.asyncio
    async def test_same_diagnostics(self, lint_files):
        files = {
            "package.json": {
                "name": "pkg",
                "type": "module",
                "exports": {
                    ".": {"require": "./index.js", "module": "./index.js", "default": "./index.js"},
                    "./sub/": "./sub/",
                    "./*": "./dist/*.js",
                },
            },
            "index.js": "module.exports = 1",
            "dist/a.js": "module.exports = 1",
        }
        first = await lint_files(files)
        second = await lint_files(files)
        assert first == second
        assert len(first) > 0


class TestNonUtf8Files:
    """Files that are not valid UTF-8 are still checked."""

    @pytest.mark.asyncio
    async def test_binary_asset_not_published(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"name": "pkg", "exports": {"./logo": "./logo.png"}}))
        (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")
        options = LintOptions(published_files=[str(tmp_path / "package.json")])

        result = await lint_package(str(tmp_path), LocalVfs(), options)

        found = _find(result.diagnostics, DiagnosticCode.FILE_NOT_PUBLISHED)
        assert [d.path for d in found] == [("exports", "./logo")]

    @pytest.mark.asyncio
    async def test_latin1_byte_in_entry_file(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"name": "pkg", "type": "module", "exports": "./index.js"}))
        (tmp_path / "index.js").write_bytes(b"// caf\xe9\nmodule.exports = {}")

        result = await lint_package(str(tmp_path), LocalVfs())

        found = _find(result.diagnostics, DiagnosticCode.FILE_INVALID_FORMAT)
        assert [d.path for d in found] == [("exports",)]
        assert found[0].args["actual_format"] == "CJS"
