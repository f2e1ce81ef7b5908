"""Logging configuration for the application."""
import logging
import os
import sys

# Read the environment directly so logging works before settings validate.
_environment = os.getenv("ENVIRONMENT", "development").lower()
_default_level = "DEBUG" if _environment == "development" else "INFO"
_level = getattr(logging, os.getenv("LOG_LEVEL", _default_level).upper(), logging.INFO)

logger = logging.getLogger("app")
logger.setLevel(_level)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(_level)
handler.setFormatter(logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
))

if not logger.handlers:
    logger.addHandler(handler)

# Uvicorn configures the root logger too
logger.propagate = False

__all__ = ["logger"]
