"""
Command line entry point.

Commands:
- sweep: delete objects leaked by earlier acceptance runs
- render: print a fixture configuration
"""
import argparse
import os
import sys
from typing import List, Optional

from resource_acctest._package import __version__
from resource_acctest.config.manager import ConfigurationManager
from resource_acctest.config.schemas import LogLevel
from resource_acctest.domain.core.exceptions import AccTestError
from resource_acctest.harness import configuration as fixtures
from resource_acctest.harness.naming import random_with_prefix
from resource_acctest.harness.sweeper import registered_sweepers, run_sweepers
from resource_acctest.helpers.logger import get_logger, setup_logging
from resource_acctest.infrastructure.aws.aws_client import AWSClient

FIXTURES = {
    'tape_pool_basic': fixtures.tape_pool_basic,
    'tape_pool_retention': fixtures.tape_pool_retention,
    'placement_group_basic': fixtures.placement_group_basic,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]),
        description="Resource acceptance-test toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sweep --region us-west-2                         # Sweep every registered type
  %(prog)s sweep --region us-west-2 --sweepers aws_placement_group
  %(prog)s render placement_group_basic                     # Print a fixture configuration
        """
    )

    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    sweep = subparsers.add_parser('sweep', help='Delete leaked test resources')
    sweep.add_argument('--region', required=True, help='Region to sweep')
    sweep.add_argument('--sweepers', help='Comma-separated sweeper names (default: all)')
    sweep.add_argument('--prefix', help='Only delete resources whose name starts with this prefix')

    render = subparsers.add_parser('render', help='Print a fixture configuration')
    render.add_argument('fixture', choices=sorted(FIXTURES), help='Fixture to render')
    render.add_argument('--name', help='Resource name (default: random test name)')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    manager = ConfigurationManager(args.config)
    app_config = manager.app_config
    logging_config = app_config.logging
    if args.log_level:
        logging_config = logging_config.model_copy(update={'level': LogLevel(args.log_level)})
    setup_logging(logging_config)
    logger = get_logger(__name__)

    if args.command == 'render':
        name = args.name or random_with_prefix(app_config.acceptance.resource_prefix)
        print(FIXTURES[args.fixture](name).render(), end='')
        return 0

    if args.command != 'sweep':
        print("No command given; see --help", file=sys.stderr)
        return 2

    names = [n.strip() for n in args.sweepers.split(',')] if args.sweepers else None
    prefix = args.prefix or app_config.acceptance.resource_prefix
    try:
        aws_client = AWSClient(region_name=args.region, config=app_config.aws)
        results = run_sweepers(aws_client, names, prefix=prefix)
    except AccTestError as e:
        logger.error("Sweep failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    failed = [name for name, error in results.items() if error is not None]
    for name in results:
        print(f"{name}: {'FAILED' if name in failed else 'ok'}")
    if failed:
        return 1
    logger.info("Sweep complete", sweepers=registered_sweepers() if names is None else names)
    return 0


if __name__ == "__main__":
    sys.exit(main())
