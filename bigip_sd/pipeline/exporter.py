"""
Target exporter: wrap classified targets as Prometheus file_sd groups.

Output is always two groups, matched first, even when a group is empty.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

import yaml

from bigip_sd.exceptions import OutputFileError
from bigip_sd.models.schemas import ClassifiedTargets, ExportRecord, OutputFormat, TargetLabels
from bigip_sd.utils.logger import get_logger


def build_export_records(classified: ClassifiedTargets, labels: TargetLabels) -> List[ExportRecord]:
    return [
        ExportRecord(targets=list(classified.matched), labels=dict(labels.matched)),
        ExportRecord(targets=list(classified.unmatched), labels=dict(labels.unmatched)),
    ]


def render_targets(records: Sequence[ExportRecord], fmt: Union[str, OutputFormat] = OutputFormat.JSON) -> str:
    payload = [record.model_dump() for record in records]
    fmt = OutputFormat(fmt)
    if fmt is OutputFormat.YAML:
        return yaml.safe_dump(payload, sort_keys=False, default_flow_style=False, allow_unicode=True)
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_targets(
    records: Sequence[ExportRecord],
    output: Optional[str] = None,
    fmt: Union[str, OutputFormat] = OutputFormat.JSON,
    log_level: Optional[str] = None,
) -> None:
    """Write the rendered groups to `output`, or to stdout when it is None."""
    logger = get_logger("bigip_sd.exporter", log_level)
    text = render_targets(records, fmt)

    if output is None:
        sys.stdout.write(text)
        logger.info("Targets written to stdout")
        return

    out_path = Path(output)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.error("Failed to write targets to %s: %s", out_path, e)
        raise OutputFileError(str(out_path), str(e)) from e
    logger.info("Targets written to %s", out_path)
