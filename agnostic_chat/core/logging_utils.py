import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    # logs go to stderr so demo output on stdout stays readable
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
