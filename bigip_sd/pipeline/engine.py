# engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from bigip_sd.models.schemas import (
    ClassifiedTargets,
    Diagnostic,
    ExportRecord,
    OutputFormat,
    ResolvedSite,
    RunConfig,
    Subnet,
    ValidatedURL,
)
from bigip_sd.pipeline.classifier import split_targets
from bigip_sd.pipeline.exporter import build_export_records, write_targets
from bigip_sd.pipeline.loaders import load_subnets, load_urls
from bigip_sd.pipeline.resolver import DNSResolver, Lookup
from bigip_sd.utils.logger import get_logger, log_metric, log_stage


# ----------------------------------------------------------------------
# Structured execution payload
# ----------------------------------------------------------------------
@dataclass
class PipelineExecutionResult:
    urls: List[ValidatedURL]
    sites: List[ResolvedSite]
    subnets: List[Subnet]
    classified: ClassifiedTargets
    records: List[ExportRecord]
    diagnostics: List[Diagnostic] = field(default_factory=list)


# ----------------------------------------------------------------------
# Orchestrator
# ----------------------------------------------------------------------
class Orchestrator:
    """
    Orchestrates one batch run:
      load urls + subnets -> resolve -> classify -> export records
    """

    def __init__(
        self,
        urls_path: Union[str, Path],
        subnets_path: Union[str, Path],
        config: Optional[RunConfig] = None,
        lookup: Optional[Lookup] = None,
        log_level: Optional[str] = None,
    ):
        self.logger = get_logger("bigip_sd.engine", log_level)
        self.urls_path = urls_path
        self.subnets_path = subnets_path
        self.config = config or RunConfig()
        self.resolver = DNSResolver(lookup=lookup, log_level=log_level)
        self.log_level = log_level

    def run(self) -> PipelineExecutionResult:
        self.logger.info("Starting run | urls=%s subnets=%s", self.urls_path, self.subnets_path)
        diagnostics: List[Diagnostic] = []

        # Step 1: URLs
        with log_stage(self.logger, "load_urls"):
            url_result = load_urls(self.urls_path, log_level=self.log_level)
        if not url_result.items:
            self.logger.warning("No valid URLs read from %s", self.urls_path)

        # Step 2: Subnets (both inputs are read before any lookup)
        with log_stage(self.logger, "load_subnets"):
            subnet_result = load_subnets(self.subnets_path, log_level=self.log_level)
        if not subnet_result.items:
            self.logger.warning("No valid subnets read from %s; every target will be unmatched", self.subnets_path)

        # Step 3: Resolve
        with log_stage(self.logger, "resolve"):
            resolution = self.resolver.resolve(url_result.items)

        diagnostics.extend(url_result.diagnostics)
        diagnostics.extend(resolution.diagnostics)
        diagnostics.extend(subnet_result.diagnostics)

        # Step 4: Classify
        with log_stage(self.logger, "classify"):
            classified = split_targets(resolution.items, subnet_result.items, log_level=self.log_level)

        records = build_export_records(classified, self.config.labels)

        log_metric(self.logger, "diagnostics_total", len(diagnostics), stage="finalize")
        self.logger.info(
            "Run complete | urls=%d sites=%d subnets=%d matched=%d unmatched=%d diagnostics=%d",
            len(url_result.items),
            len(resolution.items),
            len(subnet_result.items),
            len(classified.matched),
            len(classified.unmatched),
            len(diagnostics),
        )

        return PipelineExecutionResult(
            urls=url_result.items,
            sites=resolution.items,
            subnets=subnet_result.items,
            classified=classified,
            records=records,
            diagnostics=diagnostics,
        )


# ----------------------------------------------------------------------
# Runner
# ----------------------------------------------------------------------
def run_pipeline(
    urls_path: Union[str, Path],
    subnets_path: Union[str, Path],
    output: Optional[str] = None,
    fmt: Optional[Union[str, OutputFormat]] = None,
    config: Optional[RunConfig] = None,
    lookup: Optional[Lookup] = None,
    log_level: Optional[str] = None,
) -> PipelineExecutionResult:
    """
    Convenience wrapper for the CLI entrypoint.
    Explicit `output`/`fmt` win over the config file's output section.
    """
    config = config or RunConfig()
    orchestrator = Orchestrator(
        urls_path=urls_path,
        subnets_path=subnets_path,
        config=config,
        lookup=lookup,
        log_level=log_level,
    )
    result = orchestrator.run()
    write_targets(
        result.records,
        output=output if output is not None else config.output.path,
        fmt=fmt or config.output.format,
        log_level=log_level,
    )
    return result
