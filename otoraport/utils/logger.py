# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Application logger configuration.

Console output goes through colorlog; a rotating file handler keeps JSON
lines under ``logs/otoraport.log`` for log shipping. Event dictionaries are
rendered by structlog: JSON when ``LOG_FORMAT=json`` or outside development
and testing, key/value console output otherwise.

Usage:
    from otoraport.utils.logger import logger
    logger.info("csv_parsed", rows=42, developer_id=str(developer.id))
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import colorlog
import structlog

env = os.environ.get("FLASK_ENV", "development").lower()
log_format = os.environ.get("LOG_FORMAT", "text").lower()

log_dir = Path(os.environ.get("LOG_DIR", Path(__file__).parent.parent.parent / "logs"))
log_dir.mkdir(parents=True, exist_ok=True)

handlers: list[logging.Handler] = []

console_handler = colorlog.StreamHandler()
console_handler.setFormatter(
    colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)s %(filename)s:%(lineno)d "
        "%(funcName)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
    )
)
handlers.append(console_handler)

file_handler = RotatingFileHandler(
    log_dir / "otoraport.log",
    maxBytes=10 * 1024 * 1024,  # 10MB
    backupCount=5,
    encoding="utf-8",
)
file_handler.setFormatter(logging.Formatter("%(message)s"))
handlers.append(file_handler)

log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
    log_level = "INFO"
logging.basicConfig(level=getattr(logging, log_level), handlers=handlers)

renderer: structlog.types.Processor
if log_format == "json" or env not in ("development", "testing"):
    renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
else:
    renderer = structlog.dev.ConsoleRenderer(colors=False)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger("otoraport")
