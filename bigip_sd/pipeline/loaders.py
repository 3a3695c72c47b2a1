"""
URL and subnet list loaders: read a file, validate each line, keep the survivors.
"""

from pathlib import Path
from typing import Optional, Union

from bigip_sd.models.schemas import Subnet, ValidatedURL
from bigip_sd.models.validation_model import LoadResult, SubnetValidator, URLValidator
from bigip_sd.pipeline.ingestor import FileIngestor


def load_urls(path: Union[str, Path], log_level: Optional[str] = None) -> LoadResult[ValidatedURL]:
    """
    Load the URL list at `path`, preserving line order among lines that parse.

    Raises InputFileError if the file cannot be read.
    """
    lines = FileIngestor(log_level=log_level).read(path)
    return URLValidator(log_level=log_level).validate_lines(lines)


def load_subnets(path: Union[str, Path], log_level: Optional[str] = None) -> LoadResult[Subnet]:
    """
    Load the IPv4 CIDR list at `path`. Duplicates are kept.

    Raises InputFileError if the file cannot be read.
    """
    lines = FileIngestor(log_level=log_level).read(path)
    return SubnetValidator(log_level=log_level).validate_lines(lines)
