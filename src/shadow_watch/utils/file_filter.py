"""
Shared file filtering utilities.

Provides the exclusion-pattern check used for user-configured globs, and the
fixed rules deciding which files are worth analyzing at all.
"""

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Sequence

from wcmatch import glob

from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)

# Directories that should always be skipped during analysis
SKIP_DIRECTORIES = frozenset(
    {
        "node_modules",
        "__pycache__",
        ".git",
        ".venv",
        "venv",
        "dist",
        "build",
        ".pytest_cache",
        ".mypy_cache",
        "ShadowFiles",
        "target",
        "pkg",
        ".next",
        "out",
        ".shadow",
        ".shadowwatch-cache",
        "UnitTests",
        "coverage",
        ".nyc_output",
        ".cache",
    }
)

# Generated, test and tooling-config files that should not be analyzed
SKIP_FILE_PATTERNS = [
    re.compile(r"\.test\.(ts|tsx|js|jsx)$"),
    re.compile(r"\.spec\.(ts|tsx|js|jsx)$"),
    re.compile(r"\.d\.ts$"),
    re.compile(r"\.min\.(js|css)$"),
    re.compile(r"\.map$"),
    re.compile(r"\.lock$"),
    re.compile(r"package-lock\.json$"),
    re.compile(r"pnpm-lock\.yaml$"),
    re.compile(r"\.eslintrc"),
    re.compile(r"\.prettierrc"),
    re.compile(r"tsconfig.*\.json$"),
    re.compile(r"jest\.config"),
    re.compile(r"webpack\.config"),
    re.compile(r"vite\.config"),
    re.compile(r"rollup\.config"),
]

LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".java": "java",
    ".go": "go",
    ".rs": "rust",
    ".cpp": "cpp",
    ".c": "c",
    ".h": "c",
    ".hpp": "cpp",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "csharp",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
}

CODE_EXTENSIONS = frozenset(LANGUAGES)

# Shell globbing: `*` stays within a segment, `**` spans segments, `{a,b}` expands
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTMATCH | glob.CASE | glob.FORCEUNIX


def normalize_path(file_path: str) -> str:
    """Use forward slashes and drop leading ``/`` and ``./``."""
    normalized = file_path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def _matches(file_path: str, pattern: str) -> bool:
    if not pattern:
        return False
    if file_path == pattern:
        return True
    try:
        return glob.globmatch(file_path, pattern, flags=GLOB_FLAGS)
    except ValueError as e:
        logger.debug(f"Ignoring invalid exclude pattern {pattern!r}: {e}")
        return False


def should_exclude_file(file_path: str, patterns: Sequence[str]) -> bool:
    """
    Check whether a path matches any exclusion glob.

    Patterns are shell globs matched against the whole path: ``*``, ``?``
    and character classes stay within one path segment, ``**`` spans any
    number of segments and ``{a,b}`` expands to alternatives. ``*.ts`` does
    not match ``src/index.ts``. Matching is case-sensitive. A negated pattern
    on its own never excludes anything.

    Args:
        file_path: Relative path, with either separator
        patterns: Glob patterns

    Returns:
        True if any pattern matches
    """
    if not file_path or not patterns:
        return False

    normalized = normalize_path(file_path)
    if not normalized:
        return False

    return any(_matches(normalized, pattern) for pattern in patterns)


def should_skip_directory(dir_name: str) -> bool:
    """Check if a directory should be skipped during traversal."""
    return dir_name in SKIP_DIRECTORIES


def should_analyze_file(file_path: str) -> bool:
    """
    Check if a file should be analyzed based on its path.

    Files inside skipped directories, files matching the skip patterns and
    files without a recognized code extension are rejected.
    """
    normalized = normalize_path(file_path)
    path = PurePosixPath(normalized)

    if any(part in SKIP_DIRECTORIES for part in path.parts):
        return False

    if any(p.search(path.name) or p.search(normalized) for p in SKIP_FILE_PATTERNS):
        return False

    return path.suffix.lower() in CODE_EXTENSIONS


def is_code_file(file_path: str) -> bool:
    return PurePosixPath(normalize_path(file_path)).suffix.lower() in CODE_EXTENSIONS


def get_language_from_extension(ext: str) -> str:
    return LANGUAGES.get(ext.lower(), "unknown")


def filter_analyzable_files(files: Iterable[str]) -> List[str]:
    return [f for f in files if should_analyze_file(f)]
