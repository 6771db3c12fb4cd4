import logging

import config as cfg


def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(cfg.LOG_LEVEL)

    if not logger.handlers:
        formatter = logging.Formatter(cfg.LOG_FORMAT)
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    return logger
