import logging


def get_logger(name: str, tag: str) -> logging.Logger:
    """
    Console logger whose lines carry a [TAG] prefix, e.g. "INFO: [CHECKOUT] ...".

    Handlers are attached once per logger name so re-imports during tests
    don't duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter(f'%(levelname)s: [{tag}] %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger
