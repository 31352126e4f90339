import logging


logger = logging.getLogger(__name__)


def backoff_hndlr(details):
    target = details["target"]
    logger.info(
        f"Backing off {details['wait']:0.1f} seconds after {details['tries']} tries "
        f"calling {getattr(target, '__qualname__', target)}: {details.get('exception')!r}"
    )
