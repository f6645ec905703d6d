"""Fixtures for CLI tests"""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner


@pytest.fixture
def runner():
    """CLI test runner"""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI runs from reconfiguring the root logger"""
    with patch("tofuverify.cli.commands.verify.setup_logging") as mock_setup:
        yield mock_setup
