"""Kube-bootstrap get action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from kube_bootstrap.loader import load_manifests

from . import selector
from .format import FORMATTERS, formatter

_LOGGER = logging.getLogger(__name__)


class GetManifestsAction:
    """Get details about the manifests in a directory."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "manifests",
                aliases=["manifest"],
                help="Get the manifests that would be created",
                description="""Print the manifests in the directory in the
                    order they are created.""",
            ),
        )
        selector.add_path_flags(args)
        args.add_argument(
            "--output",
            "-o",
            choices=list(FORMATTERS),
            default=None,
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path,
        output: str | None,
        include_prefix: list[str] | None,
        exclude: list[str] | None,
        only_yaml: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        manifests = await load_manifests(
            path, selector.build_filters(include_prefix, exclude, only_yaml)
        )
        ordered = [manifests[key] for key in sorted(manifests)]
        if output is None:
            results = [manifest.compact_dict() for manifest in ordered]
        else:
            results = [manifest.to_dict() for manifest in ordered]
        if not results:
            print("No manifests found")
            return
        formatter(output).print(results)


class GetAction:
    """Kube-bootstrap get action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Print information about local manifests",
                description="Print information about local manifests",
            ),
        )
        subcmds = args.add_subparsers(
            title="Available commands",
            required=True,
        )
        GetManifestsAction.register(subcmds)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        # No-op given subcommands are always the dispatch target
