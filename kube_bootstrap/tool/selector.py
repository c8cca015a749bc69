"""Library for common file selection flags."""

from argparse import ArgumentParser, BooleanOptionalAction
import logging
import pathlib

from kube_bootstrap import loader

_LOGGER = logging.getLogger(__name__)


def add_path_flags(args: ArgumentParser) -> None:
    """Add the manifest directory and file filter flags."""
    args.add_argument(
        "path",
        type=pathlib.Path,
        help="Directory containing the manifests to create",
    )
    args.add_argument(
        "--include-prefix",
        action="append",
        default=None,
        help="Only load files whose name starts with the prefix (repeatable)",
    )
    args.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Skip files with this exact name (repeatable)",
    )
    args.add_argument(
        "--only-yaml",
        type=bool,
        default=True,
        action=BooleanOptionalAction,
        help="Only load files with a .yaml, .yml or .json suffix",
    )


def build_filters(
    include_prefix: list[str] | None = None,
    exclude: list[str] | None = None,
    only_yaml: bool = True,
) -> list[loader.FileInfoPredicate]:
    """Return the file predicates for the flags."""
    filters: list[loader.FileInfoPredicate] = []
    if only_yaml:
        filters.append(loader.only_yaml_files)
    if include_prefix:
        filters.append(loader.has_prefix(*include_prefix))
    if exclude:
        filters.append(loader.exclude_names(*exclude))
    _LOGGER.debug("Built %d file filters", len(filters))
    return filters
