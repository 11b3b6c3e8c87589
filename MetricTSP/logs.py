import logging

FORMAT = '[%(asctime)s][%(levelname)s] %(name)s: %(message)s'
FORMATTER = logging.Formatter(FORMAT, datefmt='%m-%d %H:%M:%S')

logger = logging.getLogger('MetricTSP')
logger.setLevel(logging.WARNING)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(FORMATTER)
    logger.addHandler(handler)
    logger.propagate = False
