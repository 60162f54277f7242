"""
Validation Module

Validates input observations before the time-shift entropy stage.

Exports:
    - validate_input: Validate observations schema, quality and signal lengths
    - ValidationError: Raised when input validation fails
    - InputValidationReport: Findings of a validation run
"""

from .input_validation import (
    validate_input,
    validate_observations,
    ValidationError,
    InputValidationReport,
)

__all__ = [
    'validate_input',
    'validate_observations',
    'ValidationError',
    'InputValidationReport',
]
