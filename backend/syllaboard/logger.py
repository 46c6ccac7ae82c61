from __future__ import annotations
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .settings import settings

LOGGER_NAME = "syllaboard"


def _parse_level(level: str) -> int:
	lvl = (level or "INFO").upper()
	return logging.getLevelNamesMapping().get(lvl, logging.INFO)


def configure_logging(*, level: Optional[str] = None, log_dir: Optional[str] = None) -> logging.Logger:
	"""
	Configure the package logger: console always, rotating file when a log dir is set.
	Idempotent: safe to call multiple times.
	"""
	logger = logging.getLogger(LOGGER_NAME)
	if getattr(logger, "_configured", False):
		return logger

	level = os.getenv("LOG_LEVEL", level or settings.log_level)
	numeric_level = _parse_level(level)
	logger.setLevel(numeric_level)
	logger.propagate = False

	fmt = "%(asctime)s %(levelname)-8s %(name)s src=%(filename)s:%(lineno)d %(message)s"
	formatter = logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

	ch = logging.StreamHandler(sys.stdout)
	ch.setLevel(numeric_level)
	ch.setFormatter(formatter)
	logger.addHandler(ch)

	log_dir = log_dir or settings.log_dir
	if log_dir:
		Path(log_dir).mkdir(parents=True, exist_ok=True)
		fh = RotatingFileHandler(
			filename=str(Path(log_dir) / "syllaboard.log"),
			maxBytes=10 * 1024 * 1024,  # 10MB
			backupCount=5,
			encoding="utf-8",
		)
		fh.setLevel(numeric_level)
		fh.setFormatter(formatter)
		logger.addHandler(fh)

	logger._configured = True  # type: ignore[attr-defined]
	return logger
