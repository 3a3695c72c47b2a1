import gzip
import logging
import os
import shutil
import uuid
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from time import perf_counter
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"

# One correlation id per process; a batch run is one process.
RUN_ID = str(uuid.uuid4())


# ----------------------------------------------------------------------
# Custom Filters
# ----------------------------------------------------------------------
class CorrelationFilter(logging.Filter):
    """Attach correlation/run ID to every log record."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


# ----------------------------------------------------------------------
# Log rotation with gzip compression
# ----------------------------------------------------------------------
def _rotator(source, dest):
    with open(source, "rb") as sf, gzip.open(dest + ".gz", "wb") as df:
        shutil.copyfileobj(sf, df)
    Path(source).unlink()


def resolve_log_level(log_level: Optional[str] = None) -> str:
    """Explicit level first, then BIGIP_SD_LOG_LEVEL, then INFO."""
    return (log_level or os.getenv("BIGIP_SD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


# ----------------------------------------------------------------------
# Logger Setup
# ----------------------------------------------------------------------
def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: str = "bigip_sd.log",
    run_id: Optional[str] = None,
    retention_days: int = 30,
) -> logging.Logger:
    """
    Create or retrieve a logger with:
    - Console + rotating file (daily, compress, retain N days)
    - Correlation ID (run_id)
    """

    log_dir = Path(os.getenv("BIGIP_SD_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, resolve_log_level(log_level), logging.INFO))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    corr_filter = CorrelationFilter(run_id or RUN_ID)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | run_id=%(run_id)s | "
        "%(filename)s:%(lineno)d | %(message)s"
    )

    # Console handler (stderr, stdout is reserved for exported targets)
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG)
    ch.setFormatter(fmt)
    ch.addFilter(corr_filter)

    # File handler (rotates daily, keeps retention_days, compresses old logs)
    fh = TimedRotatingFileHandler(
        log_dir / log_file, when="midnight", backupCount=retention_days, encoding="utf-8"
    )
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    fh.rotator = _rotator
    fh.addFilter(corr_filter)

    logger.addHandler(ch)
    logger.addHandler(fh)
    return logger


# ----------------------------------------------------------------------
# Metrics Logging Helper
# ----------------------------------------------------------------------
def log_metric(logger: logging.Logger, name: str, value: int, **labels):
    """Log a structured metric in a consistent format."""
    label_str = " ".join(f"{k}={v}" for k, v in labels.items())
    logger.info("METRIC | %s=%s %s", name, value, label_str)


# ----------------------------------------------------------------------
# Stage Timing Context Manager
# ----------------------------------------------------------------------
class log_stage:
    """Context manager for timing a pipeline stage."""

    def __init__(self, logger: logging.Logger, stage: str):
        self.logger = logger
        self.stage = stage

    def __enter__(self):
        self.start = perf_counter()
        self.logger.debug("Stage '%s' started", self.stage)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = perf_counter() - self.start
        if exc_type is None:
            self.logger.info("Stage '%s' completed in %.2fs", self.stage, duration)
        else:
            self.logger.error("Stage '%s' aborted after %.2fs", self.stage, duration)
