"""
Gemeinsame Fixtures für die Tests.

- src liegt im sys.path, damit die Tests auch ohne Installation laufen.
- Jeder Test bekommt einen frischen ApplicationState und Services darauf.
- Handler am Paket-Logger werden nach jedem Test entfernt.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from initiative_configurator.config import PACKAGE_LOGGER
from initiative_configurator.domain import ApplicationState
from initiative_configurator.service import (
    AuthService,
    CategoryService,
    ConfigurationService,
    FieldService,
)


@pytest.fixture()
def state() -> ApplicationState:
    return ApplicationState()


@pytest.fixture()
def auth(state) -> AuthService:
    return AuthService(state)


@pytest.fixture()
def configuration(state) -> ConfigurationService:
    return ConfigurationService(state)


@pytest.fixture()
def fields(state) -> FieldService:
    return FieldService(state)


@pytest.fixture()
def categories(state) -> CategoryService:
    return CategoryService(state)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
