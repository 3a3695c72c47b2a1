"""
Classifier: split resolved sites into BigIP (matched) and other (unmatched) targets.
"""

from typing import Iterable, Optional, Sequence

from bigip_sd.models.schemas import ClassifiedTargets, ResolvedSite, Subnet
from bigip_sd.utils.logger import get_logger, log_metric


def site_matches(site: ResolvedSite, subnets: Sequence[Subnet]) -> bool:
    """
    True if any IPv4 address of `site` lies in any of `subnets`.

    Non-IPv4 addresses never match. Stops at the first hit.
    """
    for address in site.addresses:
        if address.version != 4:
            continue
        for subnet in subnets:
            if subnet.contains(address):
                return True
    return False


def split_targets(
    sites: Iterable[ResolvedSite],
    subnets: Sequence[Subnet],
    log_level: Optional[str] = None,
) -> ClassifiedTargets:
    """
    Place every site's URL in exactly one of matched/unmatched, keeping input order.
    """
    logger = get_logger("bigip_sd.classifier", log_level)
    subnets = list(subnets)
    targets = ClassifiedTargets()

    for site in sites:
        if site_matches(site, subnets):
            targets.matched.append(site.url.url)
        else:
            targets.unmatched.append(site.url.url)

    logger.info("Found %d bigip targets", len(targets.matched))
    logger.info("Found %d other targets", len(targets.unmatched))
    log_metric(logger, "targets_matched_total", len(targets.matched), stage="classify")
    log_metric(logger, "targets_unmatched_total", len(targets.unmatched), stage="classify")
    return targets
