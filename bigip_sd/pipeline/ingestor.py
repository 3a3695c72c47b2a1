#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
File Ingestor

- Reads a local list file (URLs or subnets) line by line
- Returns raw `RawLine` objects ready for validation
- Any failure to open or read the file is fatal and raised as `InputFileError`
"""

from pathlib import Path
from typing import List, Optional, Union

from bigip_sd.exceptions import InputFileError
from bigip_sd.models.schemas import RawLine
from bigip_sd.utils.logger import get_logger, log_metric


class FileIngestor:
    """
    Read raw lines from a single input file.
    """

    def __init__(self, log_level: Optional[str] = None):
        self.logger = get_logger("bigip_sd.ingestor", log_level)

    def read(self, path: Union[str, Path]) -> List[RawLine]:
        """Read every line of `path`; line terminators are removed, nothing else."""
        name = str(path)
        self.logger.info("Opening `%s` for reading", name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error("Failed to read file %s: %s", name, e)
            raise InputFileError(name, str(e)) from e

        entries = [
            RawLine(source=name, raw=line.rstrip("\r\n"), line_number=index)
            for index, line in enumerate(lines, start=1)
        ]
        non_empty = sum(1 for e in entries if e.raw.strip())
        self.logger.info("Read %d lines (%d non-empty) from file %s", len(entries), non_empty, name)
        log_metric(self.logger, "lines_read_total", len(entries), stage="read", source=name)
        return entries
