# cli.py
import argparse
import sys
from typing import List, Optional

from bigip_sd.exceptions import BigIPSDError
from bigip_sd.models.schemas import OutputFormat
from bigip_sd.pipeline.engine import run_pipeline
from bigip_sd.utils.config_loader import load_run_config
from bigip_sd.utils.logger import get_logger, log_stage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bigip-sd",
        description="Resolve a URL list and split it into BigIP / other Prometheus file_sd target groups.",
    )
    parser.add_argument("urls", help="Path to the URL list (one URL per line)")
    parser.add_argument("subnets", help="Path to the BigIP subnet list (one IPv4 CIDR per line)")
    parser.add_argument("--output", "-o", help="Write targets here instead of stdout")
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        help="Serialization format (default: json, or the config file's output.format)",
    )
    parser.add_argument("--config", help="Path to an optional YAML config (labels, output)")
    parser.add_argument("--log-level", help="Logging level (default: $BIGIP_SD_LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = get_logger("bigip_sd.cli", args.log_level)
    logger.info(
        "CLI invocation | urls=%s subnets=%s output=%s format=%s",
        args.urls,
        args.subnets,
        args.output or "<stdout>",
        args.format or "<config>",
    )

    try:
        config = load_run_config(args.config, logger)
        with log_stage(logger, "pipeline_total"):
            run_pipeline(
                urls_path=args.urls,
                subnets_path=args.subnets,
                output=args.output,
                fmt=args.format,
                config=config,
                log_level=args.log_level,
            )
    except BigIPSDError as e:
        logger.error("%s", e.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
