"""Argument parsing functionality for cratescout."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="cratescout",
        description=(
            "cratescout - discover the transitive dependency closure of registry packages"
        ),
        add_help=True,
    )

    parser.add_argument("packages",
                        metavar="NAME[@REQ]",
                        help="Seed package, optionally with a version requirement, e.g. actix-web@1.0",
                        nargs="*",
                        default=[])
    parser.add_argument("-F", "--features",
                        dest="FEATURES",
                        help="Feature tokens enabled on every seed (comma separated, e.g. ext,serde/derive)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--no-default-features",
                        dest="NO_DEFAULT_FEATURES",
                        help="Do not request the 'default' feature of the seeds.",
                        action="store_true")

    parser.add_argument("--registry-url",
                        dest="REGISTRY_URL",
                        help=f"Registry index base URL (default: {Constants.REGISTRY_URL})",
                        action="store",
                        type=str)
    parser.add_argument("--channel-size",
                        dest="CHANNEL_SIZE",
                        help=f"Completed fetches buffered before workers block (default: {Constants.RESULT_CHANNEL_SIZE})",
                        action="store",
                        type=int)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write a JSON report of the discovered packages to this path",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
