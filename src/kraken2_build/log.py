import sys

from loguru import logger

from kraken2_build import PROG


def configure_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=PROG + ": <level>{message}</level>",
    )
