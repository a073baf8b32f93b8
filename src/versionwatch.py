"""versionwatch - resolve published versions of GitHub repositories

    Loads sources from a YAML config (or a single --repo on the command
    line), resolves each through the GitHub version resolver and writes a
    JSON report.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import ExitCodes, Constants
from common.logging_utils import configure_logging
from args import parse_args
from config import ProviderConfig, build_resolver, describe, load_config
from versioning.errors import BudgetCheckError, VersionResolutionError
from versioning.models import ExtractionConfig, ResolutionRequest


def setup_logging(args):
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logging.info("Logging to file: %s", log_file)


def build_config(args):
    """Build the provider configuration from a config file or --repo flags.

    Exits with FILE_ERROR when the configuration cannot be built.
    """
    try:
        if args.CONFIG:
            return load_config(args.CONFIG)
        source = ResolutionRequest(
            repo=args.REPO,
            strategy=args.STRATEGY,
            extraction=ExtractionConfig(pattern=args.PATTERN, result=args.RESULT),
            constraint=args.CONSTRAINT or "",
        )
        return ProviderConfig(
            token=os.environ.get(Constants.ENV_GITHUB_TOKEN),
            sources=[source],
        )
    except VersionResolutionError as e:
        logging.error("Invalid configuration: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def write_report(results, path=None):
    """Write results as JSON to ``path`` or stdout."""
    payload = json.dumps(results, indent=2)
    if not path:
        sys.stdout.write(payload + "\n")
        return
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)

    config = build_config(args)
    logging.debug("Provider configuration: %s", describe(config))
    if not config.sources:
        logging.warning("No sources configured.")
        sys.exit(ExitCodes.SUCCESS.value)

    try:
        resolver = build_resolver(config)
    except BudgetCheckError as e:
        logging.error("GitHub API is not usable: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)

    results = resolver.resolve_many(config.sources)
    write_report(results, getattr(args, "OUTPUT", None))

    if any("error" in r for r in results):
        logging.warning("One or more sources could not be resolved.")
        sys.exit(ExitCodes.EXIT_WARNINGS.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
