"""
Input Data Validation

Validates observations before the time-shift entropy stage.
Flags SHORT signals: fewer finite samples than the embedding dimension,
so no scale can ever be computed for them.

Usage:
    from shiftentropy.validation import validate_input

    report = validate_input(obs, min_length=3)
    print(report.summary())
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import polars as pl


REQUIRED_COLUMNS = {'signal_id', 'signal_0', 'value'}


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, errors: List[str], warnings: List[str] = None):
        self.errors = errors
        self.warnings = warnings or []

        message = "Input validation failed:\n" + "\n".join(
            f"  ERROR: {e}" for e in errors
        )
        if warnings:
            message += "\n" + "\n".join(f"  WARNING: {w}" for w in warnings)

        super().__init__(message)


@dataclass
class InputValidationReport:
    """Report from input validation."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    # Counts
    total_signals: int = 0
    short_signals: int = 0
    active_signals: int = 0
    total_observations: int = 0

    # Signal lists
    short_signal_ids: List[str] = field(default_factory=list)
    active_signal_ids: List[str] = field(default_factory=list)

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "=" * 60,
            "INPUT VALIDATION REPORT",
            "=" * 60,
            "",
            f"Total signals: {self.total_signals}",
            f"  Active: {self.active_signals}",
            f"  SHORT (skipped): {self.short_signals}",
            f"Total observations: {self.total_observations:,}",
            "",
        ]

        if self.short_signal_ids:
            lines.append(f"SHORT signals skipped ({len(self.short_signal_ids)}):")
            for sig in self.short_signal_ids[:10]:
                lines.append(f"  - {sig}")
            if len(self.short_signal_ids) > 10:
                lines.append(f"  ... and {len(self.short_signal_ids) - 10} more")
            lines.append("")

        if self.errors:
            lines.append("ERRORS:")
            for e in self.errors:
                lines.append(f"  - {e}")
            lines.append("")

        if self.warnings:
            lines.append("WARNINGS:")
            for w in self.warnings:
                lines.append(f"  - {w}")
            lines.append("")

        status = "PASSED" if self.valid else "FAILED"
        lines.append(f"Status: {status}")
        lines.append("=" * 60)

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to serializable dict."""
        return {
            'valid': self.valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'total_signals': self.total_signals,
            'short_signals': self.short_signals,
            'active_signals': self.active_signals,
            'total_observations': self.total_observations,
            'short_signal_ids': self.short_signal_ids,
            'active_signal_ids': self.active_signal_ids,
        }


def validate_observations(
    obs: pl.DataFrame,
    report: InputValidationReport,
    min_length: int = 1,
) -> InputValidationReport:
    """
    Validate observations schema, data quality and per-signal length.

    Args:
        obs: Long-form observations (signal_id, signal_0, value)
        report: Report to update with findings
        min_length: Minimum finite samples per signal (the embedding dimension)

    Returns:
        The updated report
    """
    missing_cols = REQUIRED_COLUMNS - set(obs.columns)
    if missing_cols:
        report.errors.append(f"Missing required columns: {sorted(missing_cols)}")
        report.valid = False
        return report

    report.total_observations = len(obs)
    report.total_signals = obs['signal_id'].n_unique()

    if report.total_observations == 0:
        report.errors.append("observations table is empty")
        report.valid = False
        return report

    value = pl.col('value').cast(pl.Float64)

    null_count = obs['value'].null_count()
    if null_count > 0:
        pct = 100.0 * null_count / len(obs)
        report.warnings.append(f"{null_count:,} null values ({pct:.1f}%)")

    inf_count = obs.filter(value.is_not_null() & ~value.is_finite()).height
    if inf_count > 0:
        pct = 100.0 * inf_count / len(obs)
        report.warnings.append(f"{inf_count:,} non-finite values ({pct:.1f}%)")

    lengths = (
        obs
        .filter(value.is_finite())
        .group_by('signal_id')
        .agg(pl.len().alias('n'))
    )
    counts = dict(zip(lengths['signal_id'].to_list(), lengths['n'].to_list()))

    for signal_id in sorted(obs['signal_id'].unique().to_list()):
        if counts.get(signal_id, 0) < min_length:
            report.short_signal_ids.append(signal_id)
        else:
            report.active_signal_ids.append(signal_id)

    report.short_signals = len(report.short_signal_ids)
    report.active_signals = len(report.active_signal_ids)

    if report.short_signals:
        report.warnings.append(
            f"{report.short_signals} signal(s) shorter than {min_length} samples will be skipped"
        )
    if report.active_signals == 0:
        report.errors.append(f"No signal has at least {min_length} finite samples")
        report.valid = False

    return report


def validate_input(
    obs: pl.DataFrame,
    min_length: int = 1,
    raise_on_error: bool = True,
) -> InputValidationReport:
    """
    Validate observations before computing curves.

    Args:
        obs: Long-form observations
        min_length: Minimum finite samples per signal
        raise_on_error: Raise ValidationError when the report is invalid

    Returns:
        InputValidationReport
    """
    report = validate_observations(obs, InputValidationReport(), min_length=min_length)

    if raise_on_error and not report.valid:
        raise ValidationError(report.errors, report.warnings)

    return report
