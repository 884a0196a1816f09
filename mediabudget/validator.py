"""
MediaBudget - Input Validation Module.

This module turns raw planner input (form fields, JSON values, CSV rows)
into BudgetInputs objects. All numeric values are converted to Decimal
type with error reporting including row numbers and field names.

Input Conventions:
    - Blank numeric fields take their default (0, factor 1, year 2026)
    - Thousands separators ("1,000") and a trailing "%" are accepted
    - Field names are matched case-insensitively ("Current_SOM" works)

Classes:
    ValidationError: A single rejected field value.
    ValidationResult: Container for validation outcomes.
    InputValidator: Main validation class for form and CSV input.
"""

import csv
import logging
import re
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from mediabudget.schema import BudgetInputs

logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        row_number: The 1-based row number (CSV line, or 1 for a form).
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A user-facing error message.
    """

    row_number: int
    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted error message for display."""
        return f"Error: Row {self.row_number} '{self.field_name}' - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes:
        plans_inputs: Successfully validated BudgetInputs objects.
        errors: ValidationError objects for rejected fields.
        total_rows: Total number of rows processed.
    """

    plans_inputs: List[BudgetInputs] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def valid_count(self) -> int:
        """Returns the number of successfully validated rows."""
        return len(self.plans_inputs)

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


class InputValidator:
    """
    Validates raw input and converts it to BudgetInputs objects.

    Text fields are stripped; numeric fields are parsed to Decimal and
    the year to int. A row with any rejected field is dropped from the
    result, and every rejected field is reported.

    Attributes:
        TEXT_FIELDS: Free-text BudgetInputs fields.
        INTEGER_FIELDS: Whole-number BudgetInputs fields.

    Example:
        >>> validator = InputValidator()
        >>> result = validator.validate_form({"brand": "Acme", "current_som": "10"})
        >>> result.plans_inputs[0].current_som
        Decimal('10')
    """

    TEXT_FIELDS = ("brand", "leader_name")
    INTEGER_FIELDS = ("current_year",)

    # Pattern to clean numeric strings (removes thousands separators, spaces, %)
    NUMBER_CLEAN_PATTERN = re.compile(r"[,\s%]")
    NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

    # Largest accepted power of ten, either way, for a non-zero value
    MAX_MAGNITUDE = 15

    def __init__(self):
        """Initialises the InputValidator."""
        self._defaults = BudgetInputs()
        self._field_names = [f.name for f in fields(BudgetInputs)]

    def validate_form(
        self,
        values: Mapping[str, Any],
        row_number: int = 1
    ) -> ValidationResult:
        """
        Validates a single set of form values.

        Args:
            values: Mapping of field name to raw value. Missing keys
                    take the field default.
            row_number: Row number for error reporting.

        Returns:
            ValidationResult with at most one BudgetInputs.
        """
        result = ValidationResult(total_rows=1)
        inputs, errors = self._validate_row(values, row_number)

        if inputs:
            result.plans_inputs.append(inputs)
        result.errors.extend(errors)

        return result

    def validate_rows(
        self,
        rows: List[Mapping[str, Any]],
        start_row: int = 2
    ) -> ValidationResult:
        """
        Validates a list of row dictionaries.

        Args:
            rows: List of mappings with plan input data.
            start_row: Starting row number for error reporting.

        Returns:
            ValidationResult with inputs list and any errors.
        """
        result = ValidationResult()
        result.total_rows = len(rows)

        for idx, row in enumerate(rows):
            row_num = start_row + idx
            inputs, errors = self._validate_row(row, row_num)

            if inputs:
                result.plans_inputs.append(inputs)
            result.errors.extend(errors)

        return result

    def validate_csv(self, file_path: Union[str, Path]) -> ValidationResult:
        """
        Validates a CSV file with one brand plan per row.

        The header row names BudgetInputs fields (case-insensitive).
        Unrecognised columns are ignored.

        Args:
            file_path: Path to the CSV file.

        Returns:
            ValidationResult with inputs list and any errors.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If no header column names a known field.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
            reader = csv.DictReader(csvfile)
            columns = reader.fieldnames or []

            known = [c for c in columns if self._normalise_key(c) in self._field_names]
            if not known:
                raise ValueError(
                    "CSV header has no recognised columns. "
                    f"Expected any of: {', '.join(self._field_names)}"
                )

            unknown = [c for c in columns if c not in known]
            if unknown:
                logger.warning("Ignoring unrecognised CSV columns: %s", ", ".join(unknown))

            rows = list(reader)

        logger.info("Read %d rows from %s", len(rows), file_path)
        return self.validate_rows(rows, start_row=2)

    def _normalise_key(self, key: Any) -> str:
        return str(key).strip().lower().replace("-", "_").replace(" ", "_")

    def _validate_row(
        self,
        row: Mapping[str, Any],
        row_number: int
    ) -> Tuple[Optional[BudgetInputs], List[ValidationError]]:
        """
        Validates a single row and converts it to BudgetInputs.

        Args:
            row: Mapping with raw values.
            row_number: Row number for error reporting.

        Returns:
            Tuple of (BudgetInputs or None, list of errors).
        """
        errors: List[ValidationError] = []
        normalised = {
            self._normalise_key(k): v for k, v in row.items() if k is not None
        }
        parsed: Dict[str, Any] = {}

        for name in self._field_names:
            raw = normalised.get(name)
            if raw is None:
                continue
            raw = str(raw)

            if name in self.TEXT_FIELDS:
                parsed[name] = raw.strip()
                continue

            if not raw.strip():
                # Blank numeric fields keep their default
                continue

            if name in self.INTEGER_FIELDS:
                value, error = self._parse_integer(raw, name, row_number)
            else:
                value, error = self._parse_decimal(raw, name, row_number)

            if error:
                errors.append(error)
            else:
                parsed[name] = value

        if errors:
            return None, errors

        return BudgetInputs(**parsed), errors

    def _parse_decimal(
        self,
        value: str,
        field_name: str,
        row_number: int
    ) -> Tuple[Optional[Decimal], Optional[ValidationError]]:
        """
        Parses a string value to Decimal with validation.

        Handles these formats:
        - "12" / "12.5" / "-0.5" (plain number)
        - "1,250" (with thousands separator)
        - "12.5%" (with percent sign)

        Args:
            value: String value to parse.
            field_name: Name of the field for error messages.
            row_number: Row number for error messages.

        Returns:
            Tuple of (Decimal value or None, ValidationError or None).
        """
        cleaned = self.NUMBER_CLEAN_PATTERN.sub("", value)

        if not self.NUMBER_PATTERN.match(cleaned):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=value,
                message=f"{field_name} must be a valid number "
                        f"(received: '{value}')"
            )

        try:
            decimal_value = Decimal(cleaned)
        except InvalidOperation:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=value,
                message=f"{field_name} must be a valid number "
                        f"(received: '{value}')"
            )

        if decimal_value and abs(decimal_value.adjusted()) > self.MAX_MAGNITUDE:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=value,
                message=f"{field_name} is out of range "
                        f"(received: '{value}')"
            )

        return decimal_value, None

    def _parse_integer(
        self,
        value: str,
        field_name: str,
        row_number: int
    ) -> Tuple[Optional[int], Optional[ValidationError]]:
        """
        Parses a string value to int. "2026.0" is accepted, "2026.5" is not.

        Args:
            value: String value to parse.
            field_name: Name of the field for error messages.
            row_number: Row number for error messages.

        Returns:
            Tuple of (int value or None, ValidationError or None).
        """
        decimal_value, error = self._parse_decimal(value, field_name, row_number)
        if error:
            return None, error

        if decimal_value != decimal_value.to_integral_value():
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=value,
                message=f"{field_name} must be a whole number "
                        f"(received: '{value}')"
            )

        return int(decimal_value), None
