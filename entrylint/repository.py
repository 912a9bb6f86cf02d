"""Recognizers for `repository` field values.

References:
- https://git-scm.com/docs/git-clone#_git_urls
- https://docs.npmjs.com/cli/v10/configuring-npm/package-json#repository
"""

import re

GIT_URL_RE = re.compile(
    r"^(?:(git\+https?|git\+ssh|https?|ssh|git)://)?"
    r"(?:[\w._-]+@)?"
    r"([\w.-]+)"
    r"(?::([\w-]+))?"
    r"(/[\w._/-]+)/?$"
)

SHORTHAND_REPOSITORY_URL_RE = re.compile(r"^(?:(?:github|bitbucket|gitlab):[^/]+/.+|gist:.+|[^/]+/[^/]+)$")


def _has_protocol_or_user(url: str) -> bool:
    return "://" in url or "@" in url


def is_git_url(url: str) -> bool:
    """Whether the URL is a git URL with at least a protocol or a username."""
    return GIT_URL_RE.match(url) is not None and _has_protocol_or_user(url)


def is_shorthand_repository_url(url: str) -> bool:
    """Whether the string is an npm repository shorthand, e.g. "github:user/repo" or "user/repo"."""
    return SHORTHAND_REPOSITORY_URL_RE.match(url) is not None


def is_shorthand_github_or_gitlab_url(url: str) -> bool:
    """Whether a GitHub/GitLab URL lacks the `git+` prefix or `.git` suffix that npm normalizes to."""
    match = GIT_URL_RE.match(url)
    if match is None or not _has_protocol_or_user(url):
        return False
    host, path = match.group(2), match.group(4)
    if re.search(r"(github|gitlab)", host):
        return not url.startswith("git+") or not path.endswith(".git")
    return False


def is_deprecated_github_git_url(url: str) -> bool:
    """GitHub no longer serves the unauthenticated `git://` protocol."""
    match = GIT_URL_RE.match(url)
    if match is None:
        return False
    protocol, host = match.group(1), match.group(2)
    return protocol == "git" and "github" in host


def to_full_git_url(url: str) -> str:
    """Normalize a git URL to the `git+<protocol>://<host>/<path>.git` form.

    Example:
        git@github.com:user/repo -> git+ssh://git@github.com/user/repo.git
    """
    if "://" not in url:
        url = "git+ssh://" + url.replace(":", "/", 1)
    url = url.removesuffix("/")
    if not url.startswith("git+"):
        url = "git+" + url
    if not url.endswith(".git"):
        url += ".git"
    return url
