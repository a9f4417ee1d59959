# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic checks for SADL models (duplicate names, dangling references, etc.)."""

from sadl.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
