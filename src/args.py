"""Argument parsing functionality for versionwatch."""

import argparse

from versioning.models import Strategy


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="versionwatch",
        description=(
            "versionwatch - resolve published versions of GitHub repositories"
        ),
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="YAML file with github settings and sources",
                        action="store", type=str)
    input_group.add_argument("-r", "--repo",
                        dest="REPO",
                        help="Resolve a single repository, i.e: owner/name",
                        action="store", type=str)

    parser.add_argument("-s", "--strategy",
                        dest="STRATEGY",
                        help="Collection to read versions from (default: releases)",
                        action="store", type=str.lower,
                        default=Strategy.RELEASES.value,
                        choices=[s.value for s in Strategy])
    parser.add_argument("--pattern",
                        dest="PATTERN",
                        help="Extraction regex applied to each tag/release name",
                        action="store", type=str,
                        default=r"^v?(\d+\.\d+\.\d+)$")
    parser.add_argument("--result",
                        dest="RESULT",
                        help="Result template using $1/${name} group references (default: $1)",
                        action="store", type=str,
                        default="$1")
    parser.add_argument("--constraint",
                        dest="CONSTRAINT",
                        help="Semver constraint, i.e: '>=1.2.0 <2.0.0'",
                        action="store", type=str,
                        default="")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to JSON output file (default: stdout)",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
