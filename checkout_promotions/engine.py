"""Promotion engine driver.

Runs an ordered list of campaigns against one cart. Every campaign whose
qualifiers pass is applied, and later campaigns see the prices, quantities and
split line items left by earlier ones. A configuration error raised by any
campaign aborts the evaluation.

Example::

    engine = PromotionEngine(default_config())
    result = engine.evaluate(cart)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from .campaigns import Campaign, CampaignOutcome
from .errors import ConfigurationError

logger = structlog.get_logger()


@dataclass(frozen=True)
class EngineConfig:
    """The ordered campaigns to run. Built once and shared between evaluations."""

    campaigns: tuple[Campaign, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "campaigns", tuple(self.campaigns))

    @classmethod
    def of(cls, campaigns: Iterable[Campaign]) -> EngineConfig:
        return cls(tuple(campaigns))


@dataclass
class EvaluationResult:
    """Which campaigns applied, were reverted, or were skipped, in run order."""

    applied: list[str] = field(default_factory=list)
    reverted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def record(self, campaign: Campaign, outcome: CampaignOutcome) -> None:
        if outcome is CampaignOutcome.APPLIED:
            self.applied.append(campaign.name)
        elif outcome is CampaignOutcome.REVERTED:
            self.reverted.append(campaign.name)
        else:
            self.skipped.append(campaign.name)


class PromotionEngine:
    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def evaluate(self, cart) -> EvaluationResult:
        """Apply every qualifying campaign to ``cart`` in place."""
        result = EvaluationResult()
        subtotal_before = cart.subtotal

        for campaign in self.config.campaigns:
            try:
                outcome = campaign.run(cart)
            except ConfigurationError as err:
                logger.error("evaluation_failed", campaign=campaign.name, error=str(err))
                raise
            result.record(campaign, outcome)

        logger.info(
            "evaluation_complete",
            applied=result.applied,
            reverted=result.reverted,
            subtotal_before=str(subtotal_before),
            subtotal_after=str(cart.subtotal),
        )
        return result
