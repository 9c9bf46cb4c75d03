"""Shared fixtures for zecwallettool tests."""

import pytest

from zecwallettool import ConversionSettings
from zecwallettool.testing import MockAddressDeriver


@pytest.fixture
def deriver() -> MockAddressDeriver:
    return MockAddressDeriver()


@pytest.fixture
def settings(deriver: MockAddressDeriver) -> ConversionSettings:
    return ConversionSettings(deriver=deriver)
