"""
Core logic for pacont package.

Text analysis, single-file resolution, bounded directory walking and the
path aggregator that folds everything into one :class:`AggregateResult`.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pathspec
from colorama import Fore, Style

PathLike = Union[str, "os.PathLike[str]"]


# Exceptions
class PacontError(Exception): ...
class InvalidInputError(PacontError): ...
class ConfigFileError(PacontError): ...
class ClipboardError(PacontError): ...

# Per-entry failures; absorbed by the walker and the aggregator
class TraversalError(PacontError): ...
class NotReadableError(TraversalError): ...
class NotDecodableError(TraversalError): ...
class PathEscapesBaseError(TraversalError): ...
class WalkError(TraversalError): ...


# Defaults & helpers
DEFAULT_MAX_DEPTH = 10
SEPARATOR = "-" * 80 + "\n"


@dataclass(frozen=True)
class TraversalOptions:
    max_depth: int = DEFAULT_MAX_DEPTH
    include_errors: bool = False
    summary_only: bool = False
    exclude: Tuple[str, ...] = ()
    respect_gitignore: bool = False


@dataclass(frozen=True)
class FileResult:
    label: str
    text: str
    chars: int
    words: int
    lines: int


@dataclass
class AggregateResult:
    """Running body and counters for one file, directory or whole run.

    ``paths`` holds the input paths as given by the caller, ``files`` the
    labels of every file that was read successfully, in traversal order.
    """

    body: str = ""
    chars: int = 0
    words: int = 0
    lines: int = 0
    paths: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    def _append(self, text: str, summary_only: bool) -> None:
        if self.body and text and not summary_only:
            self.body += SEPARATOR
        self.body += text

    def add_file(self, result: FileResult, summary_only: bool) -> None:
        self._append(result.text, summary_only)
        self.chars += result.chars
        self.words += result.words
        self.lines += result.lines
        self.files.append(result.label)

    def extend(self, other: "AggregateResult", summary_only: bool) -> None:
        self._append(other.body, summary_only)
        self.chars += other.chars
        self.words += other.words
        self.lines += other.lines
        self.files.extend(other.files)


def paint(message: str, color: str) -> str:
    if sys.stderr.isatty():
        return color + message + Style.RESET_ALL
    return message


def _report(message: str, include_errors: bool) -> None:
    if include_errors:
        print(paint(message, Fore.YELLOW), file=sys.stderr)


# Text analysis
# Anything but Unicode whitespace; str.isspace() also accepts \x1c-\x1f, which are not
_VISIBLE = re.compile(r"[\S\x1c-\x1f]")
_WORD = re.compile(r"[\S\x1c-\x1f]+")


def analyze(contents: str) -> Tuple[int, int, int]:
    """Return ``(characters, words, non-empty lines)`` for *contents*.

    Only ``\\n`` ends a line; a ``\\r`` left at the end of a line is
    whitespace, so CRLF files count the same as LF files.
    """
    chars = len(contents)
    words = len(_WORD.findall(contents))
    lines = sum(1 for line in contents.split("\n") if _VISIBLE.search(line))
    return chars, words, lines


def format_block(label: str, contents: str) -> str:
    return f"**{label}:**\n{contents}\n"


# Single files
def display_label(path: Path, base: Optional[Path]) -> str:
    """Label *path* relative to *base*, always with forward slashes.

    With no base, or when *base* is the file's own directory, the label is
    just the file name.
    """
    if base is None or base == path.parent:
        return path.name
    try:
        return path.relative_to(base).as_posix()
    except ValueError as e:
        raise PathEscapesBaseError(f"'{path}' is not inside '{base}'") from e


def resolve_file(
    path: PathLike,
    base: Optional[PathLike] = None,
    summary_only: bool = False,
) -> FileResult:
    path = Path(path)
    base_path = Path(base) if base else None
    label = display_label(path, base_path)

    try:
        with path.open("rb") as fh:
            raw = fh.read()
    except OSError as e:
        raise NotReadableError(f"Failed to open file {path}: {e}") from e

    try:
        contents = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise NotDecodableError(f"Failed to read file contents of {path}: {e}") from e

    chars, words, lines = analyze(contents)
    text = "" if summary_only else format_block(label, contents)
    return FileResult(label, text, chars, words, lines)


# Ignore patterns
def _pattern_lines(text: str) -> List[str]:
    return [
        ln.strip()
        for ln in text.splitlines()
        if ln.strip() and not ln.lstrip().startswith("#")
    ]


def load_extra_patterns(config_path: Path) -> List[str]:
    """Patterns from an ``--ignore-file``; blank lines and ``#`` comments are dropped."""
    if not config_path.is_file():
        raise ConfigFileError(f"No such ignore file: {config_path}")
    try:
        return _pattern_lines(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Cannot load patterns from {config_path}: {e}") from e


def load_gitignore(root: Path) -> List[str]:
    """Patterns from the ``.gitignore`` directly inside a walk root, if any."""
    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file():
        return []
    return _pattern_lines(gitignore_path.read_text(encoding="utf-8"))


def _ignore_spec(root: Path, options: TraversalOptions) -> Optional[pathspec.PathSpec]:
    patterns = list(options.exclude)
    if options.respect_gitignore:
        try:
            patterns.extend(load_gitignore(root))
        except (OSError, UnicodeDecodeError) as e:
            _report(
                f"ERROR: Could not read {root / '.gitignore'}: {e}",
                options.include_errors,
            )
    if not patterns:
        return None
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def _is_excluded(spec: pathspec.PathSpec, path: Path, root: Path, is_dir: bool) -> bool:
    rel = path.relative_to(root).as_posix()
    return spec.match_file(rel + "/" if is_dir else rel)


# Directory walking
def _list_entries(directory: Path) -> List[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise WalkError(str(e)) from e


def _walk(
    directory: Path,
    root: Path,
    depth: int,
    spec: Optional[pathspec.PathSpec],
    options: TraversalOptions,
) -> AggregateResult:
    # entries of *directory* sit at *depth*; the walk root is depth 0
    result = AggregateResult()
    try:
        entries = _list_entries(directory)
    except WalkError as e:
        _report(f"ERROR: Failed to read entry in {root}: {e}", options.include_errors)
        return result

    for entry in entries:
        path = directory / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError as e:
            _report(f"ERROR: Failed to read entry in {root}: {e}", options.include_errors)
            continue

        if spec is not None and _is_excluded(spec, path, root, is_dir):
            continue

        if is_dir:
            if depth < options.max_depth:
                sub = _walk(path, root, depth + 1, spec, options)
                result.extend(sub, options.summary_only)
            continue
        if not is_file:
            continue

        try:
            file_result = resolve_file(path, root, options.summary_only)
        except TraversalError as e:
            _report(
                f"**{path}:**\nERROR: Failed to process file: {e}",
                options.include_errors,
            )
            continue
        result.add_file(file_result, options.summary_only)

    return result


def walk_directory(root: PathLike, options: TraversalOptions) -> AggregateResult:
    """Concatenate every regular file under *root*, at most ``max_depth`` deep.

    Entries directly inside *root* are at depth 1, so ``max_depth=0`` gives
    an empty result. Symlinks and special files are skipped. Entry-level
    failures are reported (with ``include_errors``) and never abort the walk.
    """
    root = Path(root)
    if options.max_depth < 1:
        return AggregateResult()
    return _walk(root, root, 1, _ignore_spec(root, options), options)


# Aggregation over input paths
def process_path(path: Path, options: TraversalOptions) -> AggregateResult:
    if path.is_dir():
        return walk_directory(path, options)
    if path.is_file():
        part = AggregateResult()
        part.add_file(resolve_file(path, None, options.summary_only), options.summary_only)
        return part
    _report(f"Skipping {path}: not a regular file or directory", options.include_errors)
    return AggregateResult()


def aggregate(paths: Sequence[PathLike], options: TraversalOptions) -> AggregateResult:
    if not paths:
        raise InvalidInputError("No paths provided. Use --help for usage information.")
    for p in paths:
        if not os.path.exists(p):
            raise InvalidInputError(f"Path or file does not exist: {os.fspath(p)}")

    result = AggregateResult()
    for p in paths:
        result.paths.append(os.fspath(p))
        try:
            part = process_path(Path(p), options)
        except PacontError as e:
            _report(f"ERROR processing path {os.fspath(p)}: {e}", options.include_errors)
            continue
        result.extend(part, options.summary_only)
    return result


# Output rendering
def render_summary(result: AggregateResult) -> str:
    return (
        f"Paths: {' '.join(result.paths)}\n"
        f"Total Characters: {result.chars}\n"
        f"Total Words: {result.words}\n"
        f"Total Non-Empty Lines: {result.lines}\n"
    )


def render(result: AggregateResult, options: TraversalOptions) -> str:
    if options.summary_only:
        return render_summary(result)
    return result.body
