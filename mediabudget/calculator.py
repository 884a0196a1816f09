"""
MediaBudget - Budget Engine Module.

This module provides the core calculation chain from planner inputs to
the next-year media budget. All calculations use Decimal arithmetic;
rounding is left to the renderers so the chain stays exact.

Classes:
    BudgetEngine: Derives a BudgetPlan from BudgetInputs.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from mediabudget.schema import (
    RATIO_TABLE,
    BudgetInputs,
    BudgetPlan,
    MarketType,
    RatioBand,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class BudgetEngine:
    """
    Derives the media budget from share-of-market targets.

    Every operation is a pure function of its arguments. The engine
    never raises for finite inputs; degenerate inputs produce zero
    outputs instead.

    Attributes:
        ratio_table: Ordered ratio bands, scanned first-match.

    Example:
        >>> engine = BudgetEngine()
        >>> inputs = BudgetInputs(current_som=Decimal("10"), next_som=Decimal("12"))
        >>> plan = engine.build_plan(inputs)
        >>> plan.market_type
        <MarketType.LARGE: 'Large'>
    """

    def __init__(self, ratio_table: Optional[Sequence[RatioBand]] = None):
        """
        Initialises the BudgetEngine.

        Args:
            ratio_table: Ratio bands to use. Defaults to RATIO_TABLE.
        """
        self._ratio_table = tuple(ratio_table) if ratio_table is not None else RATIO_TABLE

    def calculate_growth(self, inputs: BudgetInputs) -> Decimal:
        """
        Calculates SOM growth in percentage points.

        Formula: Next_SOM - Current_SOM
        """
        return inputs.next_som - inputs.current_som

    def determine_market_type(self, inputs: BudgetInputs) -> MarketType:
        """
        Classifies the market from the leader's share.

        A brand is a CONTENDER when the leader's share is more than
        twice its own; otherwise it is LARGE.

        Args:
            inputs: Planner inputs.

        Returns:
            MarketType enum value.
        """
        if inputs.leader_som / 2 > inputs.current_som:
            return MarketType.CONTENDER
        return MarketType.LARGE

    def select_ratio(self, growth: Decimal, market_type: MarketType) -> Decimal:
        """
        Looks up the SOV/SOM ratio for a growth figure.

        Scans the ratio table in order and uses the first band whose
        interval contains growth. Growth falling between bands yields
        Decimal('0').

        Args:
            growth: SOM growth in percentage points.
            market_type: Selects the LARGE or CONTENDER column.

        Returns:
            The selected ratio, or Decimal('0') if no band matched.
        """
        for band in self._ratio_table:
            if band.matches(growth):
                return band.ratio_for(market_type)

        logger.debug("No ratio band matches growth %s; using 0", growth)
        return Decimal("0")

    def calculate_expected_sov(self, next_som: Decimal, ratio: Decimal) -> Decimal:
        """Required next-year Share of Voice (%): Next_SOM * Ratio."""
        return next_som * ratio

    def calculate_next_competitor_grp(
        self,
        comp_grp: Decimal,
        comp_grp_increase: Decimal
    ) -> Decimal:
        """Next-year competitor GRP: Comp_GRP * (1 + Increase / 100)."""
        return comp_grp * (1 + comp_grp_increase / HUNDRED)

    def calculate_total_market_grp(
        self,
        next_comp_grp: Decimal,
        expected_sov: Decimal
    ) -> Decimal:
        """
        Calculates the next-year category GRP (100%).

        Competitors hold (1 - SOV/100) of the market, so the total is
        the competitor GRP divided by that share.

        Args:
            next_comp_grp: Next-year competitor GRP.
            expected_sov: Required brand Share of Voice (%).

        Returns:
            Total market GRP, or Decimal('0') when the competitor share
            is zero or negative (SOV >= 100%).
        """
        comp_share = 1 - expected_sov / HUNDRED
        if comp_share <= 0:
            return Decimal("0")
        return next_comp_grp / comp_share

    def calculate_brand_grp(
        self,
        total_market_grp: Decimal,
        expected_sov: Decimal
    ) -> Decimal:
        """Next-year brand GRP: Total_Market_GRP * SOV / 100."""
        return total_market_grp * (expected_sov / HUNDRED)

    def calculate_tv_budget(self, brand_grp: Decimal, cprp: Decimal) -> Decimal:
        """Next-year TV budget: Brand_GRP * CPRP."""
        return brand_grp * cprp

    def calculate_total_budget(self, tv_budget: Decimal, factor: Decimal) -> Decimal:
        """Next-year all-media budget: TV_Budget * TV_Factor."""
        return tv_budget * factor

    def build_plan(self, inputs: BudgetInputs) -> BudgetPlan:
        """
        Runs the complete calculation chain.

        Args:
            inputs: Planner inputs.

        Returns:
            BudgetPlan with every derived value.
        """
        growth = self.calculate_growth(inputs)
        market_type = self.determine_market_type(inputs)
        ratio = self.select_ratio(growth, market_type)
        expected_sov = self.calculate_expected_sov(inputs.next_som, ratio)
        next_comp_grp = self.calculate_next_competitor_grp(
            inputs.comp_grp,
            inputs.comp_grp_increase
        )
        total_market_grp = self.calculate_total_market_grp(next_comp_grp, expected_sov)
        brand_grp = self.calculate_brand_grp(total_market_grp, expected_sov)
        tv_budget = self.calculate_tv_budget(brand_grp, inputs.cprp)
        total_budget = self.calculate_total_budget(
            tv_budget,
            inputs.tv_to_all_media_factor
        )

        logger.info(
            "Planned %s: growth=%s market=%s ratio=%s total_budget=%s",
            inputs.brand or "<unnamed>",
            growth,
            market_type.value,
            ratio,
            total_budget,
        )

        return BudgetPlan(
            inputs=inputs,
            growth=growth,
            market_type=market_type,
            ratio=ratio,
            expected_sov=expected_sov,
            next_comp_grp=next_comp_grp,
            total_market_grp=total_market_grp,
            next_year_brand_grp=brand_grp,
            next_year_tv_budget=tv_budget,
            total_budget=total_budget
        )
