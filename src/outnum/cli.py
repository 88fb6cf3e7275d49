#!/usr/bin/env python3
"""
outnum: Keep dotted outline numbers (1, 1.1, 1.2.1) in plain text in order

Common usage:
  outnum notes.txt
  outnum --inplace docs/
  outnum --check .
  outnum --inplace --demote 12:20 notes.txt
  outnum --depth 2.3.1

Headings are found with a regular expression preset (--preset) or a custom
pattern (--pattern) with a `whole` group for the full number and an optional
`last` group for its final component.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from outnum.config import find_config_file, heading_pattern, load_config, merge_cli_with_config
from outnum.document import Document, DocumentSettings
from outnum.errors import OutnumError
from outnum.matching import DEFAULT_PRESET, DEFAULT_SEPARATOR, PRESETS
from outnum.numbering import depth, is_canonical, renumber
from outnum.promotion import demote, promote
from outnum.save_hook import save_document

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the outnum tool."""

    files: list[str]
    output: str
    inplace: bool
    nobackup: bool
    check: bool
    depth: str | None
    promote: tuple[int, int] | None
    demote: tuple[int, int] | None
    preset: str
    pattern: str | None
    separator: str | None
    enabled: bool
    renumber_on_save: bool
    # File discovery options
    extend_include: list[str]
    exclude: list[str] | None
    extend_exclude: list[str]
    respect_gitignore: bool
    list_files: bool
    verbose: bool
    version: bool


def _line_range(value: str) -> tuple[int, int]:
    """Parse `A:B` (or a single line `A`) as a 1-based inclusive line range."""
    first, sep, last = value.partition(":")
    try:
        start = int(first)
        end = int(last) if sep else start
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r} (expected A:B)") from None
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r}")
    return start, end


# Options a config file may supply, with their built-in defaults.
_CONFIGURABLE_DEFAULTS: dict[str, object] = {
    "preset": DEFAULT_PRESET,
    "pattern": None,
    "separator": None,
    "enabled": True,
    "renumber_on_save": False,
    "extend_include": [],
    "exclude": None,
    "extend_exclude": [],
    "respect_gitignore": True,
}


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns the options and the set of configurable options the user passed
    explicitly, which take precedence over the config file.
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="outnum",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input files or directories (use '-' for stdin, '.' for current directory)",
    )
    parser.add_argument(
        "-o", "--output", type=str, default="-", help="Output file (use '-' for stdout)"
    )
    parser.add_argument(
        "-i", "--inplace", action="store_true", help="Edit files in place (ignores --output)"
    )
    parser.add_argument(
        "--nobackup",
        action="store_true",
        help="Do not keep a .orig backup of the original file when using --inplace",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--check",
        action="store_true",
        help="Only report files whose numbering is not canonical (exit code 1 if any)",
    )
    action.add_argument(
        "--promote",
        type=_line_range,
        metavar="A:B",
        help="Move headings on lines A through B up one level, then renumber",
    )
    action.add_argument(
        "--demote",
        type=_line_range,
        metavar="A:B",
        help="Move headings on lines A through B down one level, then renumber",
    )
    action.add_argument(
        "--depth",
        type=str,
        metavar="NUMBER",
        help="Print the nesting depth of a heading number such as 2.3.1 and exit",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help=f"Heading syntax preset (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--pattern",
        default=None,
        help="Custom heading regex with a (?P<whole>...) group and optional (?P<last>...) group",
    )
    parser.add_argument(
        "--separator",
        default=None,
        help="Separator between number components for --pattern (default: '.')",
    )
    parser.add_argument(
        "--extend-include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Additional file patterns to include (e.g., '*.org'). Can be repeated",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace all default exclusion patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Add to default exclusion patterns (e.g., 'drafts/'). Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_false",
        dest="respect_gitignore",
        default=None,
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths without changing anything",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each rewrite to stderr")
    parser.add_argument(
        "--version", action="store_true", help="Show version information and exit"
    )
    opts = parser.parse_args(args)

    # Configurable options default to None so we can tell which were given.
    explicit_flags: set[str] = set()
    values: dict[str, object] = {}
    for name, default in _CONFIGURABLE_DEFAULTS.items():
        value = getattr(opts, name, None)
        if value is None:
            values[name] = list(default) if isinstance(default, list) else default
        else:
            explicit_flags.add(name)
            values[name] = value

    options = Options(
        files=opts.files,
        output=opts.output,
        inplace=opts.inplace,
        nobackup=opts.nobackup,
        check=opts.check,
        depth=opts.depth,
        promote=opts.promote,
        demote=opts.demote,
        list_files=opts.list_files,
        verbose=opts.verbose,
        version=opts.version,
        **values,  # pyright: ignore[reportArgumentType]
    )
    return options, explicit_flags


def _needs_file_resolution(files: list[str]) -> bool:
    """Check if any input paths are directories or globs."""
    from outnum.file_resolver import is_glob

    return any(f != "-" and (Path(f).is_dir() or is_glob(f)) for f in files)


def _resolve_files(options: Options) -> list[str]:
    """
    Expand directories and globs with the file resolver; plain file arguments
    pass through unchanged.
    """
    if not _needs_file_resolution(options.files) and not options.list_files:
        return options.files

    from outnum.file_resolver import FileResolver, FileResolverConfig

    resolvable = [f for f in options.files if f != "-"]
    stdin_present = len(resolvable) < len(options.files)

    config = FileResolverConfig(
        extend_include=options.extend_include,
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
        respect_gitignore=options.respect_gitignore,
    )
    result = [str(p) for p in FileResolver(config).resolve(resolvable)]
    if stdin_present:
        result.insert(0, "-")
    return result


def _read_document(path: str, settings: DocumentSettings) -> Document:
    if path == "-":
        return Document(sys.stdin.read(), settings)
    # Keep line endings as they are so only heading numbers change.
    with open(path, encoding="utf-8", newline="") as f:
        text = f.read()
    return Document(text, settings)


def _edit(document: Document, options: Options) -> None:
    """Apply the requested edit to one document."""
    line_range = options.promote or options.demote
    if line_range is None:
        renumber(document)
        return
    span = document.line_span(*line_range)
    if options.promote:
        promote(document, span.start, span.end)
    else:
        demote(document, span.start, span.end)


def process_files(files: list[str], options: Options, settings: DocumentSettings) -> int:
    """
    Renumber, promote/demote or check each file. Returns the exit code.
    """
    if options.inplace and "-" in files:
        raise ValueError("Cannot use --inplace with stdin")
    if (options.promote or options.demote) and len(files) != 1:
        raise ValueError("--promote and --demote take exactly one file")
    if not options.inplace and options.output != "-" and len(files) > 1:
        raise ValueError("--output takes exactly one input file")

    exit_code = 0
    for path in files:
        document = _read_document(path, settings)
        if options.check:
            if settings.enabled and not is_canonical(document):
                print(path)
                exit_code = 1
            continue
        if settings.enabled:
            _edit(document, options)
        else:
            log.warning("Numbering is disabled; leaving %s unchanged", path)

        if options.inplace:
            save_document(document, path, backup=not options.nobackup)
        elif options.output == "-":
            sys.stdout.write(document.text)
        else:
            save_document(document, options.output, backup=False)
    return exit_code


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the outnum CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for errors or non-canonical files with --check,
        2 for unexpected failures)
    """
    options, explicit_flags = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if options.version:
        try:
            version = importlib.metadata.version("outnum")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    config_path = find_config_file(Path.cwd())
    if config_path:
        log.debug("Using config file %s", config_path)
        merge_cli_with_config(options, load_config(config_path), explicit_flags)

    if options.depth is not None:
        print(depth(options.depth, options.separator or DEFAULT_SEPARATOR))
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide files, directories (use '.' for current"
            " directory), or '-' for stdin. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        settings = DocumentSettings(
            pattern=heading_pattern(options.preset, options.pattern, options.separator),
            enabled=options.enabled,
            renumber_on_save=options.renumber_on_save,
        )
        resolved_files = _resolve_files(options)

        if options.list_files:
            for f in resolved_files:
                print(f)
            return 0

        return process_files(resolved_files, options, settings)
    except (ValueError, OutnumError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
