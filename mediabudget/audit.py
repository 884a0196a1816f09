"""
MediaBudget - Audit and Serialisation Module.

This module provides JSON serialisation of budget plans so a planning
decision can be traced back to its exact inputs. All Decimal values are
converted to string representation to preserve precision.

Snapshot Format:
    - metadata: timestamp, version, generator
    - inputs: every BudgetInputs field
    - results: every derived BudgetPlan value

Classes:
    DecimalEncoder: JSON encoder for Decimal, datetime and enum values.
    AuditLogger: Manages JSON serialisation for audit and re-rendering.
"""

import json
import logging
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from mediabudget import __version__
from mediabudget.schema import BudgetInputs, BudgetPlan, MarketType

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """
    Custom JSON encoder that converts Decimal to string.

    Preserves full precision of Decimal values by encoding them
    as strings rather than floats.
    """

    def default(self, obj: Any) -> Any:
        """
        Encode Decimal, datetime and MarketType objects.

        Args:
            obj: Object to encode.

        Returns:
            JSON-serialisable representation.
        """
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, MarketType):
            return obj.value
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation of budget plans.

    Every snapshot includes a timestamp and version identifier.

    Example:
        >>> logger = AuditLogger()
        >>> json_str = logger.serialise_plan(plan)
        >>> restored, _ = logger.deserialise_plan(json_str)
        >>> assert plan.total_budget == restored.total_budget
    """

    GENERATOR = "MediaBudget"

    def __init__(self, version: Optional[str] = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Version identifier for snapshots.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_plan(
        self,
        plan: BudgetPlan,
        timestamp: Optional[datetime] = None
    ) -> str:
        """
        Serialises a BudgetPlan to JSON string.

        Args:
            plan: Budget plan to serialise.
            timestamp: Snapshot time. Defaults to now.

        Returns:
            JSON string representation.
        """
        data = self._plan_to_dict(plan, timestamp or datetime.now())
        return json.dumps(data, cls=DecimalEncoder, indent=2)

    def deserialise_plan(self, json_str: str) -> Tuple[BudgetPlan, datetime]:
        """
        Deserialises a JSON string to a BudgetPlan.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Tuple of (reconstructed BudgetPlan, snapshot timestamp).

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
            ValueError: If data types are invalid.
        """
        data = json.loads(json_str)
        timestamp = datetime.fromisoformat(data["metadata"]["timestamp"])
        return self._dict_to_plan(data), timestamp

    def save_to_file(
        self,
        plan: BudgetPlan,
        file_path: Union[str, Path],
        timestamp: Optional[datetime] = None
    ) -> Path:
        """
        Saves a BudgetPlan to a JSON file.

        Args:
            plan: Budget plan to save.
            file_path: Output file path.
            timestamp: Snapshot time. Defaults to now.

        Returns:
            Path of the written file.

        Raises:
            PermissionError: If file cannot be written.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_path.write_text(self.serialise_plan(plan, timestamp), encoding="utf-8")
        logger.info("Audit snapshot written to %s", file_path)
        return file_path

    def load_from_file(self, file_path: Union[str, Path]) -> Tuple[BudgetPlan, datetime]:
        """
        Loads a BudgetPlan from a JSON file.

        Args:
            file_path: Path to JSON file.

        Returns:
            Tuple of (loaded BudgetPlan, snapshot timestamp).

        Raises:
            FileNotFoundError: If file does not exist.
            json.JSONDecodeError: If JSON is malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Audit file not found: {file_path}")

        return self.deserialise_plan(file_path.read_text(encoding="utf-8"))

    def _plan_to_dict(self, plan: BudgetPlan, timestamp: datetime) -> Dict[str, Any]:
        """
        Converts BudgetPlan to dictionary for JSON serialisation.

        Args:
            plan: Plan to convert.
            timestamp: Snapshot time.

        Returns:
            Dictionary representation.
        """
        return {
            "metadata": {
                "timestamp": timestamp.isoformat(),
                "version": self._version,
                "generated_by": self.GENERATOR,
            },
            "inputs": asdict(plan.inputs),
            "results": {
                "growth": plan.growth,
                "market_type": plan.market_type,
                "ratio": plan.ratio,
                "expected_sov": plan.expected_sov,
                "next_comp_grp": plan.next_comp_grp,
                "total_market_grp": plan.total_market_grp,
                "next_year_brand_grp": plan.next_year_brand_grp,
                "next_year_tv_budget": plan.next_year_tv_budget,
                "total_budget": plan.total_budget,
            },
        }

    def _dict_to_plan(self, data: Dict[str, Any]) -> BudgetPlan:
        """
        Converts dictionary to BudgetPlan.

        Args:
            data: Dictionary from JSON.

        Returns:
            Reconstructed BudgetPlan.
        """
        inputs_data = data["inputs"]
        results = data["results"]

        inputs = BudgetInputs(
            brand=inputs_data["brand"],
            current_year=int(inputs_data["current_year"]),
            current_som=Decimal(inputs_data["current_som"]),
            next_som=Decimal(inputs_data["next_som"]),
            leader_name=inputs_data["leader_name"],
            leader_som=Decimal(inputs_data["leader_som"]),
            brand_grp=Decimal(inputs_data["brand_grp"]),
            comp_grp=Decimal(inputs_data["comp_grp"]),
            comp_grp_increase=Decimal(inputs_data["comp_grp_increase"]),
            cprp=Decimal(inputs_data["cprp"]),
            tv_to_all_media_factor=Decimal(inputs_data["tv_to_all_media_factor"]),
        )

        return BudgetPlan(
            inputs=inputs,
            growth=Decimal(results["growth"]),
            market_type=MarketType(results["market_type"]),
            ratio=Decimal(results["ratio"]),
            expected_sov=Decimal(results["expected_sov"]),
            next_comp_grp=Decimal(results["next_comp_grp"]),
            total_market_grp=Decimal(results["total_market_grp"]),
            next_year_brand_grp=Decimal(results["next_year_brand_grp"]),
            next_year_tv_budget=Decimal(results["next_year_tv_budget"]),
            total_budget=Decimal(results["total_budget"]),
        )

    def generate_filename(self, prefix: str = "budget_audit") -> str:
        """
        Generates a timestamped filename for audit files.

        Args:
            prefix: Filename prefix. Defaults to "budget_audit".

        Returns:
            Filename like "budget_audit_2026-10-19_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
