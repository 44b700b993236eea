import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

LOGGER_NAME = "bm_branch_api"


# Configure logging
def setup_logging():
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # module loggers (db.*, routers.*, utils.*) share the same handler
    for name in ("db", "models", "routers", "utils"):
        child = logging.getLogger(name)
        child.setLevel(level)
        if not child.handlers:
            for handler in logger.handlers:
                child.addHandler(handler)

    return logger


# Get the logger
logger = setup_logging()


def log_request_info(request, message="Request received"):
    """Log the request line; headers only at debug level, Authorization masked."""
    logger.info(f"{message}: {request.method} {request.url.path}")
    if logger.isEnabledFor(logging.DEBUG):
        headers = dict(request.headers)
        if "authorization" in headers:
            headers["authorization"] = "***"
        logger.debug(f"Request headers: {headers}")


def log_response_info(request, response, message="Response sent"):
    logger.info(f"{message}: {request.method} {request.url.path} -> {response.status_code}")
