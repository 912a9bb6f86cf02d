"""Shared constants for package linting."""

import re

# Only plain JavaScript files are format-checked. TypeScript and others are not supported.
LINTABLE_FILE_EXTENSIONS: tuple[str, ...] = (".js", ".mjs", ".cjs")

# Extensions that no runtime or bundler understands
INVALID_JSX_EXTENSIONS: tuple[str, ...] = (".mjsx", ".cjsx")

# Conditions under which bundlers also apply the legacy `browser` field remapping
KNOWN_BROWSERISH_CONDITIONS: tuple[str, ...] = (
    "browser",
    "electron",
    "react-native",
    "worker",
    "worklet",
)

# Environments checked when replaying a type-checker's bundler-mode resolution
TYPES_RESOLUTION_ENVIRONMENTS: tuple[str | None, ...] = (None, "node", "browser", "worker")

# Paths that usually should not be published. Directories end with "/".
COMMON_INTERNAL_PATHS: tuple[str, ...] = (
    # directories
    "test/",
    "tests/",
    "__tests__/",
    ".github/",
    ".circleci/",
    ".husky/",
    ".vscode/",
    # files
    ".prettierrc",
    "prettier.config.js",
    ".eslintrc",
    ".eslintrc.js",
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.cjs",
    ".editorconfig",
    ".babelrc",
    "babel.config.js",
    "tsconfig.json",
    ".travis.yml",
    ".gitlab-ci.yml",
    "jest.config.js",
    "vitest.config.js",
    "vitest.config.ts",
    "rollup.config.js",
)

LICENSE_FILES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^LICENSE", re.IGNORECASE),
    re.compile(r"^LICENCE", re.IGNORECASE),
    re.compile(r"^COPYING", re.IGNORECASE),
)

# Fields whose file must exist. `types` and `typings` are dropped when `typesVersions` is set.
KNOWN_FILE_FIELDS: tuple[str, ...] = (
    "types",
    "typings",
    "jsnext:main",
    "jsnext",
    "unpkg",
    "jsdelivr",
)

# Extensions tried by legacy CommonJS resolution when a path is not found as-is
LEGACY_TRY_EXTENSIONS: tuple[str, ...] = (".js", "/index.js")

# Directories never crawled when every file in the package is implicitly exported
UNCRAWLED_DIRECTORY_NAMES: tuple[str, ...] = ("node_modules", ".git")

MANIFEST_FILE_NAME = "package.json"
