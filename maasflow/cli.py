"""maas-flow command line entry point.

Lists the MAAS node inventory and moves every selected node one step
toward the target state. With ``--period`` the run repeats until
interrupted; otherwise it runs once and exits.

Usage:
    maas-flow --url http://maas/MAAS --apikey KEY --include-zone '^default$'
"""
import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from maasflow import __version__
from maasflow.config import Settings, settings
from maasflow.core.batch import process_all, summarize
from maasflow.core.filters import ConfigurationError, FilterSet
from maasflow.core.options import FilterOptions, ProcessingOptions
from maasflow.core.transitions import TRANSITIONS, TransitionTable
from maasflow.maas.client import MaasClient, MaasClientError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser. Unset flags fall back to settings."""
    parser = argparse.ArgumentParser(
        prog="maas-flow",
        description="Drive MAAS nodes toward a target lifecycle state",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--url", help="MAAS server URL")
    parser.add_argument("--apikey", help="MAAS API key (consumer:token:secret)")
    parser.add_argument("--api-version", help="MAAS API version")
    parser.add_argument("--target", dest="target_state", help="Target lifecycle state")
    parser.add_argument(
        "--preview",
        action="store_true",
        default=None,
        help="Log the actions that would be taken without calling MAAS",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Log why nodes are skipped by the filters",
    )
    parser.add_argument("--period", type=float, help="Seconds between runs (0 = run once)")
    parser.add_argument(
        "--timeout",
        dest="action_timeout",
        type=float,
        help="Seconds to wait for launched actions",
    )
    for flag, dest, what in (
        ("--include-host", "include_hosts", "hostnames to process"),
        ("--exclude-host", "exclude_hosts", "hostnames to skip"),
        ("--include-zone", "include_zones", "zones to process"),
        ("--exclude-zone", "exclude_zones", "zones to skip"),
    ):
        parser.add_argument(
            flag,
            dest=dest,
            action="append",
            metavar="REGEX",
            help=f"Regular expression matching {what} (repeatable)",
        )
    return parser


def _merge_filter(base: FilterOptions, include: list[str] | None, exclude: list[str] | None) -> FilterOptions:
    return FilterOptions(
        include=tuple(include) if include is not None else base.include,
        exclude=tuple(exclude) if exclude is not None else base.exclude,
        empty_policy=base.empty_policy,
    )


def build_options(args: argparse.Namespace, config: Settings) -> ProcessingOptions:
    """Overlay command line flags on configured processing options.

    Raises:
        ValidationError: If the merged options are invalid
    """
    base = config.processing_options()
    updates = {
        name: getattr(args, name)
        for name in ("verbose", "preview", "target_state", "action_timeout")
        if getattr(args, name) is not None
    }
    return ProcessingOptions(
        **{**base.model_dump(exclude={"hosts", "zones"}), **updates},
        hosts=_merge_filter(base.hosts, args.include_hosts, args.exclude_hosts),
        zones=_merge_filter(base.zones, args.include_zones, args.exclude_zones),
    )


async def run_once(
    client: MaasClient,
    options: ProcessingOptions,
    table: TransitionTable = TRANSITIONS,
) -> list[Exception | None]:
    """List the inventory and process it once."""
    nodes = await client.list_nodes()
    results = await process_all(client, nodes, options, table)

    summary = summarize(results)
    if summary.failed:
        logger.warning(
            f"Processed {summary.total} nodes, {summary.failed} with errors: {summary.errors}"
        )
    else:
        logger.info(f"Processed {summary.total} nodes")
    return results


async def run(
    args: argparse.Namespace,
    config: Settings = settings,
    table: TransitionTable = TRANSITIONS,
) -> int:
    """Validate configuration, then run one or more batches."""
    try:
        options = build_options(args, config)
        FilterSet.from_options(options)
        table.actions_for(options.target_state)
    except (ValidationError, ConfigurationError, LookupError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    api_key = args.apikey or config.maas.api_key
    if not api_key:
        logger.error("A MAAS API key is required (--apikey or MAASFLOW_MAAS__API_KEY)")
        return EXIT_CONFIG_ERROR

    try:
        client = MaasClient(
            url=args.url or config.maas.url,
            api_key=api_key,
            api_version=args.api_version or config.maas.api_version,
            timeout=config.maas.timeout,
        )
    except MaasClientError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    table.validate_coverage()
    period = args.period if args.period is not None else config.period
    if options.preview:
        logger.info("Preview mode: no changes will be made in MAAS")

    async with client:
        while True:
            try:
                await run_once(client, options, table)
            except MaasClientError as e:
                logger.error(f"Unable to list nodes: {e}")
                if period <= 0:
                    return EXIT_RUN_FAILED

            if period <= 0:
                return EXIT_OK
            await asyncio.sleep(period)


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
