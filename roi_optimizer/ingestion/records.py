"""
Record parsing for investments and sales data.

Input format is a JSON document::

    {
      "investments": [ {...}, ... ],
      "sales_data":  [ {...}, ... ]      # "salesData" is accepted too
    }

Keys may be snake_case (``tool_name``) or camelCase (``toolName``); both are
normalized to the canonical snake_case model fields.

Conversion-rate scale
---------------------
Models store ``conversion_rate`` on a 0–100 scale. Sources that record it
as a 0–1 fraction must say so (``conversion_scale="fraction"``); the value
is then multiplied by 100 here. The scale is never inferred from the data.

Validation
----------
All rows are validated before any are returned. If **any** row fails, a
single :class:`InvalidInputError` is raised listing the first 10 failures.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Literal

from pydantic import ValidationError

from roi_optimizer.errors import InvalidInputError
from roi_optimizer.models.investment import Investment, SalesDataPoint

logger = logging.getLogger(__name__)

ConversionScale = Literal["percent", "fraction"]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_MAX_ERRORS_SHOWN = 10


@dataclass(frozen=True)
class Dataset:
    """Validated investments and sales points loaded from one source."""

    investments: list[Investment]
    sales_points: list[SalesDataPoint]


def to_snake_case(key: str) -> str:
    """``"implementationDate"`` → ``"implementation_date"``; snake_case passes through."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(record: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` with every key converted to snake_case."""
    return {to_snake_case(k): v for k, v in record.items()}


def parse_investments(records: Iterable[dict[str, Any]]) -> list[Investment]:
    """Validate investment records.

    Raises:
        InvalidInputError: If any record fails validation.
    """
    return _parse_all(records, "investment", lambda r: Investment(**normalize_keys(r)))


def parse_sales_points(
    records: Iterable[dict[str, Any]],
    conversion_scale: ConversionScale = "percent",
) -> list[SalesDataPoint]:
    """Validate sales records, converting fractional conversion rates if asked.

    Args:
        records:          Raw sales dicts.
        conversion_scale: ``"percent"`` (0–100, stored as-is) or
                          ``"fraction"`` (0–1, multiplied by 100).

    Raises:
        InvalidInputError: If the scale is unknown or any record fails validation.
    """
    if conversion_scale not in ("percent", "fraction"):
        raise InvalidInputError(
            f"Unknown conversion_scale {conversion_scale!r}; expected 'percent' or 'fraction'."
        )

    def _build(record: dict[str, Any]) -> SalesDataPoint:
        fields = normalize_keys(record)
        if conversion_scale == "fraction" and fields.get("conversion_rate") is not None:
            fields["conversion_rate"] = _to_percent(fields["conversion_rate"])
        return SalesDataPoint(**fields)

    return _parse_all(records, "sales", _build)


def load_dataset(path: Path, conversion_scale: ConversionScale = "percent") -> Dataset:
    """Read and validate a JSON dataset file.

    Args:
        path:             Path to the JSON document.
        conversion_scale: Scale of ``conversion_rate`` in the file.

    Returns:
        Dataset with validated investments and sales points.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidInputError: If the JSON is malformed or any record is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"{path.name} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise InvalidInputError(f"{path.name} must contain a JSON object at the top level.")

    investments_raw = raw.get("investments", [])
    sales_raw = raw.get("sales_data", raw.get("salesData", []))
    if not isinstance(investments_raw, list) or not isinstance(sales_raw, list):
        raise InvalidInputError("'investments' and 'sales_data' must be JSON arrays.")

    dataset = Dataset(
        investments=parse_investments(investments_raw),
        sales_points=parse_sales_points(sales_raw, conversion_scale),
    )
    _warn_orphans(dataset)
    logger.info(
        "Loaded %d investment(s) and %d sales record(s) from %s",
        len(dataset.investments),
        len(dataset.sales_points),
        path.name,
    )
    return dataset


# ── Private helpers ────────────────────────────────────────────────────────────

def _to_percent(value: Any) -> Any:
    try:
        return float(value) * 100.0
    except (TypeError, ValueError):
        return value  # left for model validation to reject


def _parse_all(records: Iterable[dict[str, Any]], kind: str, build) -> list:
    parsed: list = []
    errors: list[tuple[int, str]] = []

    for i, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append((i, "record is not a JSON object"))
            continue
        try:
            parsed.append(build(record))
        except (ValueError, TypeError, ValidationError) as exc:
            errors.append((i, str(exc)))

    if errors:
        detail = "\n".join(f"  {kind}[{idx}]: {msg}" for idx, msg in errors[:_MAX_ERRORS_SHOWN])
        extra = len(errors) - _MAX_ERRORS_SHOWN
        suffix = f"\n  … and {extra} more" if extra > 0 else ""
        raise InvalidInputError(
            f"{len(errors)} {kind} record(s) failed validation:\n{detail}{suffix}"
        )
    return parsed


def _warn_orphans(dataset: Dataset) -> None:
    known = {inv.id for inv in dataset.investments}
    orphans = sum(1 for p in dataset.sales_points if p.investment_id not in known)
    if orphans:
        logger.warning(
            "%d sales record(s) reference unknown investments and will be ignored.", orphans
        )
