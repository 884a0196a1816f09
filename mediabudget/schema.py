"""
MediaBudget - Data Schema Module.

This module defines the core data models for the budget planner.
All share, GRP and monetary fields use Decimal type so that the derived
budget chain is reproducible to the last digit.

Market Context:
    - SOM: Share of Market, a brand's percentage of category volume/value
    - SOV: Share of Voice, a brand's percentage of category GRPs
    - The SOV/SOM ratio table targets developing and emerging markets
    - CPRP is the TV cost per rating point in local currency

Classes:
    MarketType: Binary market classification selecting the ratio column.
    RatioBand: One growth interval of the SOV/SOM ratio table.
    BudgetInputs: Planner-supplied figures for a single brand.
    BudgetPlan: Complete derived budget for a set of inputs.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


# Report branding
COMPANY_NAME = "MTM Group"

# Placeholder for blank text fields at render time
NOT_SPECIFIED = "Not specified"

DEFAULT_CURRENT_YEAR = 2026
DEFAULT_TV_FACTOR = Decimal("1")


class MarketType(Enum):
    """
    Market classification for ratio selection.

    Attributes:
        LARGE: Brand holds at least half of the category leader's share.
        CONTENDER: Brand holds less than half of the leader's share.
    """

    LARGE = "Large"
    CONTENDER = "Contender"


@dataclass(frozen=True)
class RatioBand:
    """
    A growth interval of the SOV/SOM ratio table.

    Either bound may be open-ended (None). A band with neither bound
    never matches.

    Attributes:
        min_growth: Inclusive lower bound in SOM percentage points.
        max_growth: Inclusive upper bound in SOM percentage points.
        large: SOV/SOM ratio for a LARGE market type.
        contender: SOV/SOM ratio for a CONTENDER market type.
    """

    min_growth: Optional[Decimal]
    max_growth: Optional[Decimal]
    large: Decimal
    contender: Decimal

    def matches(self, growth: Decimal) -> bool:
        """Returns True if growth falls inside this band."""
        if self.min_growth is None and self.max_growth is None:
            return False
        if self.min_growth is not None and growth < self.min_growth:
            return False
        if self.max_growth is not None and growth > self.max_growth:
            return False
        return True

    def ratio_for(self, market_type: MarketType) -> Decimal:
        """Returns the ratio column for the given market type."""
        if market_type == MarketType.LARGE:
            return self.large
        return self.contender


# SOV/SOM ratio table, developing & emerging markets.
# Scanned in order; the first matching band wins.
RATIO_TABLE: Tuple[RatioBand, ...] = (
    RatioBand(Decimal("1.0"), None, Decimal("1.2"), Decimal("1.65")),
    RatioBand(Decimal("0.5"), Decimal("0.99"), Decimal("1.15"), Decimal("1.5")),
    RatioBand(Decimal("0.0"), Decimal("0.49"), Decimal("1.1"), Decimal("1.35")),
    RatioBand(Decimal("-0.5"), Decimal("-0.01"), Decimal("1.05"), Decimal("1.25")),
    RatioBand(None, Decimal("-0.51"), Decimal("0.8"), Decimal("0.9")),
)


@dataclass
class BudgetInputs:
    """
    Planner-supplied figures for a single brand.

    Unset numeric fields default to zero and text fields to an empty
    string, so every instance can be planned.

    Attributes:
        brand: Brand name.
        current_year: Planning base year; the plan targets the year after.
        current_som: Current Share of Market (%).
        next_som: Target Share of Market for next year (%).
        leader_name: Category leader's name.
        leader_som: Category leader's Share of Market (%).
        brand_grp: Current brand GRP. Shown for reference only.
        comp_grp: Current competitor GRP.
        comp_grp_increase: Expected competitor GRP increase (%).
        cprp: TV cost per rating point.
        tv_to_all_media_factor: Multiplier from TV budget to all-media budget.
    """

    brand: str = ""
    current_year: int = DEFAULT_CURRENT_YEAR
    current_som: Decimal = Decimal("0")
    next_som: Decimal = Decimal("0")
    leader_name: str = ""
    leader_som: Decimal = Decimal("0")
    brand_grp: Decimal = Decimal("0")
    comp_grp: Decimal = Decimal("0")
    comp_grp_increase: Decimal = Decimal("0")
    cprp: Decimal = Decimal("0")
    tv_to_all_media_factor: Decimal = DEFAULT_TV_FACTOR

    @property
    def next_year(self) -> int:
        """Returns the year the plan targets."""
        return self.current_year + 1


@dataclass(frozen=True)
class BudgetPlan:
    """
    Complete derived budget for a set of inputs.

    Every field after `inputs` is recomputed from the inputs by
    BudgetEngine.build_plan; none is independently settable.

    Attributes:
        inputs: Source inputs.
        growth: SOM growth in percentage points.
        market_type: LARGE or CONTENDER classification.
        ratio: Selected SOV/SOM ratio (0 if no band matched).
        expected_sov: Required next-year Share of Voice (%).
        next_comp_grp: Next-year competitor GRP.
        total_market_grp: Next-year category GRP (100%).
        next_year_brand_grp: Next-year brand GRP.
        next_year_tv_budget: Next-year TV budget.
        total_budget: Next-year all-media budget.
    """

    inputs: BudgetInputs
    growth: Decimal
    market_type: MarketType
    ratio: Decimal
    expected_sov: Decimal
    next_comp_grp: Decimal
    total_market_grp: Decimal
    next_year_brand_grp: Decimal
    next_year_tv_budget: Decimal
    total_budget: Decimal
