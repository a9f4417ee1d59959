# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest configuration for the SADL test suite."""

import pytest

from sadl.log import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging() -> None:
    """Keep debug events from the parser and layout out of test output."""
    configure_logging(verbose=False)
