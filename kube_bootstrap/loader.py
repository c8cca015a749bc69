"""Manifest loader for the bootstrap process.

Reads every file below a manifest directory, keeps the files accepted by all
of the configured predicates, and decodes each file as a single YAML (or
JSON) document. A file that fails to decode does not prevent the others from
loading: the successfully decoded manifests are returned with an aggregated
error describing the rest.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

import aiofiles
import yaml

from .exceptions import DirectoryNotFoundError, InputException, ManifestDecodeError
from .manifest import Manifest

__all__ = [
    "FileInfo",
    "FileInfoPredicate",
    "load_files",
    "load_manifests",
    "decode_manifest",
    "only_yaml_files",
    "has_prefix",
    "exclude_names",
]

_LOGGER = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True)
class FileInfo:
    """Details about a file considered for loading."""

    path: Path
    """The absolute path of the file."""

    name: str
    """The base name of the file."""

    size: int
    """The size of the file in bytes."""


FileInfoPredicate = Callable[[FileInfo], bool]


def only_yaml_files(info: FileInfo) -> bool:
    """Accept only files with a YAML or JSON suffix."""
    return info.path.suffix.lower() in YAML_SUFFIXES


def has_prefix(*prefixes: str) -> FileInfoPredicate:
    """Accept only files whose name starts with one of the prefixes."""

    def predicate(info: FileInfo) -> bool:
        return info.name.startswith(prefixes)

    return predicate


def exclude_names(*names: str) -> FileInfoPredicate:
    """Reject files with any of the specified names."""
    excluded = set(names)

    def predicate(info: FileInfo) -> bool:
        return info.name not in excluded

    return predicate


def _walk(path: Path) -> Iterable[Path]:
    for entry in sorted(path.iterdir()):
        if entry.is_dir():
            yield from _walk(entry)
        elif entry.is_file():
            yield entry


async def load_files(
    directory: Path, filters: Iterable[FileInfoPredicate] = ()
) -> dict[str, bytes]:
    """Read the contents of all files below the directory.

    Only files accepted by every predicate are read. The result is keyed by
    the POSIX path of the file relative to the directory.
    """
    if not directory.is_dir():
        raise DirectoryNotFoundError(str(directory))
    predicates = list(filters)
    result: dict[str, bytes] = {}
    for path in _walk(directory):
        info = FileInfo(path=path, name=path.name, size=path.stat().st_size)
        if not all(predicate(info) for predicate in predicates):
            _LOGGER.debug("Skipping filtered file: %s", path)
            continue
        key = path.relative_to(directory).as_posix()
        async with aiofiles.open(path, mode="rb") as f:
            result[key] = await f.read()
    return result


def decode_manifest(path: str, content: bytes) -> Manifest:
    """Decode the raw contents of a single manifest file."""
    try:
        doc: Any = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise InputException(
            f"unable to convert asset {path!r} from YAML to JSON: {err}"
        ) from err
    try:
        return Manifest.parse_doc(path, doc)
    except InputException as err:
        raise InputException(f"unable to decode asset {path!r}: {err}") from err


async def load_manifests(
    directory: Path, filters: Iterable[FileInfoPredicate] = ()
) -> dict[str, Manifest]:
    """Load and decode all the manifests below the directory.

    Raises:
        DirectoryNotFoundError: If the directory does not exist.
        ManifestDecodeError: If any of the files could not be decoded. The
            manifests that did decode are attached to the exception.
    """
    _LOGGER.info("Loading manifests from %s", directory)
    contents = await load_files(directory, filters)
    manifests: dict[str, Manifest] = {}
    errors: dict[str, str] = {}
    for path, content in contents.items():
        try:
            manifests[path] = decode_manifest(path, content)
        except InputException as err:
            errors[path] = str(err)
    if errors:
        raise ManifestDecodeError(errors, manifests)
    _LOGGER.info("Loaded %d manifests", len(manifests))
    return manifests
