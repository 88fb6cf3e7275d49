"""
File discovery for the command line: expands directories and glob patterns into
text files, honoring `.gitignore` files and default exclusions.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

DEFAULT_INCLUDES: list[str] = ["*.md", "*.txt"]

DEFAULT_EXCLUDES: list[str] = [
    ".git/",
    ".hg/",
    ".svn/",
    ".venv/",
    "venv/",
    "__pycache__/",
    ".tox/",
    ".mypy_cache/",
    ".pytest_cache/",
    "*.egg-info/",
    "build/",
    "dist/",
    "node_modules/",
]

_GLOB_CHARS = frozenset("*?[")


def is_glob(path: str) -> bool:
    return any(c in path for c in _GLOB_CHARS)


def _compile(lines: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.GitIgnoreSpec.from_lines(lines)


@dataclass
class FileResolverConfig:
    """
    Include and exclude patterns use gitignore syntax. `exclude=None` means
    `DEFAULT_EXCLUDES`; a list replaces them.
    """

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDES))
    extend_include: list[str] = field(default_factory=list)
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = True

    @property
    def effective_include(self) -> list[str]:
        return self.include + self.extend_include

    @property
    def effective_exclude(self) -> list[str]:
        base = self.exclude if self.exclude is not None else list(DEFAULT_EXCLUDES)
        return base + self.extend_exclude


class FileResolver:
    """Resolves files, directories and globs into a sorted, deduplicated file list."""

    def __init__(self, config: FileResolverConfig | None = None) -> None:
        self._config: FileResolverConfig = config or FileResolverConfig()
        self._include_spec: pathspec.PathSpec = _compile(self._config.effective_include)
        self._exclude_spec: pathspec.PathSpec = _compile(self._config.effective_exclude)
        self._gitignore_cache: dict[Path, pathspec.PathSpec | None] = {}

    def resolve(self, paths: Sequence[str | Path]) -> list[Path]:
        """
        Explicit files are always included; directories are walked and globs
        expanded with all filters applied. A missing path raises `FileNotFoundError`.
        """
        seen: set[Path] = set()
        result: list[Path] = []

        for raw_path in paths:
            p = Path(raw_path)
            if p.is_file():
                found: Iterable[Path] = [p]
            elif p.is_dir():
                found = self._walk_directory(p)
            elif is_glob(str(raw_path)):
                found = self._expand_glob(str(raw_path))
            else:
                raise FileNotFoundError(f"Path not found: {raw_path}")

            for path in found:
                resolved = path.resolve()
                if resolved not in seen:
                    seen.add(resolved)
                    result.append(resolved)

        result.sort()
        return result

    def _walk_directory(self, root: Path) -> Iterable[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            ignores = self._gitignore_chain(current, root)

            # Prune excluded directories so os.walk does not descend into them.
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not self._exclude_spec.match_file(d + "/")
                and not any(spec.match_file(d + "/") for spec in ignores)
            )

            for filename in sorted(filenames):
                if not self._include_spec.match_file(filename):
                    continue
                if self._exclude_spec.match_file(filename):
                    continue
                if any(spec.match_file(filename) for spec in ignores):
                    continue
                yield current / filename

    def _expand_glob(self, pattern: str) -> Iterable[Path]:
        parts = Path(pattern).parts
        root = Path(".")
        glob_part = pattern
        for i, part in enumerate(parts):
            if is_glob(part):
                root = Path(*parts[:i]) if i > 0 else Path(".")
                glob_part = str(Path(*parts[i:]))
                break

        for path in sorted(root.glob(glob_part)):
            if path.is_file() and self._include_spec.match_file(path.name):
                yield path

    def _gitignore_chain(self, directory: Path, root: Path) -> list[pathspec.PathSpec]:
        """Gitignore specs from `root` down to `directory`, inclusive."""
        if not self._config.respect_gitignore:
            return []
        specs: list[pathspec.PathSpec] = []
        current = root
        for part in (Path("."), *[Path(p) for p in directory.relative_to(root).parts]):
            current = current / part
            spec = self._load_gitignore(current)
            if spec is not None:
                specs.append(spec)
        return specs

    def _load_gitignore(self, directory: Path) -> pathspec.PathSpec | None:
        if directory not in self._gitignore_cache:
            gitignore = directory / ".gitignore"
            spec = None
            if gitignore.is_file():
                lines = [
                    line
                    for line in gitignore.read_text().splitlines()
                    if line.strip() and not line.strip().startswith("#")
                ]
                if lines:
                    spec = _compile(lines)
            self._gitignore_cache[directory] = spec
        return self._gitignore_cache[directory]
