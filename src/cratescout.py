"""cratescout - transitive dependency discovery for registry packages

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import ExitCodes, Constants
from common.errors import ExplorationError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_config_overrides
from exploration import Exploration, LookupFeatures
from versioning.parser import parse_seed_token, split_feature_list

USAGE_HINT = (
    "Specify names of crates as arguments using name@version format, e.g. actix-web@1.0"
)


def build_seeds(tokens, features=(), default_features=True):
    """Turn CLI tokens into (name, demand) pairs for the engine.

    Args:
        tokens (list): ``name`` or ``name@requirement`` strings.
        features (list): Extra feature tokens enabled on every seed.
        default_features (bool): Whether seeds request their "default" feature.

    Returns:
        list: Seed (name, LookupFeatures) pairs in input order.
    """
    seeds = []
    for tok in tokens:
        req = parse_seed_token(tok)
        seeds.append((req.name, LookupFeatures.seed(req.requirement, features, default_features)))
    return seeds


def format_summary(result):
    """One-line report of the discovered packages."""
    return "Discovered {} crates in {}ms: {}".format(
        len(result.packages), result.elapsed_ms, ", ".join(result.names())
    )


def export_json(result, path):
    """Exports the discovered packages to a JSON file.

    Args:
        result (ExplorationResult): Finished exploration.
        path (str): File path to export the JSON.
    """
    data = {
        "count": len(result.packages),
        "elapsed_ms": result.elapsed_ms,
        "fetches": result.fetch_count,
        "packages": [
            {
                "name": name,
                "features": sorted(result.packages[name].features),
                "version_reqs": sorted(str(r) for r in result.packages[name].version_reqs),
            }
            for name in result.names()
        ],
    }
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def _setup_logging(args):
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logging.info("Logging to file: %s", log_file)


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    _setup_logging(args)
    apply_config_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        seeds = build_seeds(
            args.packages,
            split_feature_list(args.FEATURES),
            default_features=not args.NO_DEFAULT_FEATURES,
        )
    except ExplorationError as e:
        logging.error("Invalid package argument: %s", e)
        sys.exit(e.exit_code.value)

    if not seeds:
        logging.warning(USAGE_HINT)
        sys.exit(ExitCodes.SUCCESS.value)

    try:
        result = Exploration(channel_size=Constants.RESULT_CHANNEL_SIZE).explore(seeds)
    except ExplorationError as e:
        logging.error("Exploration failed: %s", e)
        if is_debug_enabled(logger):
            logger.debug(
                "Exploration aborted",
                exc_info=True,
                extra=extra_context(
                    event="function_exit",
                    component="cli",
                    action="explore",
                    outcome=type(e).__name__
                )
            )
        sys.exit(e.exit_code.value)

    print(format_summary(result))

    if getattr(args, "OUTPUT", None):
        export_json(result, args.OUTPUT)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
