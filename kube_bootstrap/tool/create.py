"""Kube-bootstrap create action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from kube_bootstrap.ensure import CreateOptions, ensure_manifests_created, POLL_INTERVAL
from kube_bootstrap.kube import ConnectionConfig

from . import selector

_LOGGER = logging.getLogger(__name__)


class CreateAction:
    """Kube-bootstrap create action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "create",
                help="Create all manifests in a directory in the cluster",
                description="""Create every manifest found in the directory,
                    retrying until all of them exist in the cluster or the
                    timeout is reached. Resources that already exist are
                    left untouched.""",
            ),
        )
        selector.add_path_flags(args)
        args.add_argument(
            "--kubeconfig",
            type=pathlib.Path,
            default=None,
            help="Path to the kubeconfig file to use",
        )
        args.add_argument(
            "--context",
            type=str,
            default=None,
            help="The kubeconfig context to use",
        )
        args.add_argument(
            "--in-cluster",
            action="store_true",
            help="Use the service account of the pod running the command",
        )
        args.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to keep retrying before giving up (default: forever)",
        )
        args.add_argument(
            "--poll-interval",
            type=float,
            default=POLL_INTERVAL,
            help="Seconds to wait between attempts",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path,
        kubeconfig: pathlib.Path | None,
        context: str | None,
        in_cluster: bool,
        timeout: float | None,
        poll_interval: float,
        include_prefix: list[str] | None,
        exclude: list[str] | None,
        only_yaml: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        connection = ConnectionConfig(
            kubeconfig=kubeconfig, context=context, in_cluster=in_cluster
        )
        options = CreateOptions(
            filters=selector.build_filters(include_prefix, exclude, only_yaml),
            timeout=timeout,
            poll_interval=poll_interval,
        )
        await ensure_manifests_created(path, connection, options)
        print(f"All manifests in {path} are created")
