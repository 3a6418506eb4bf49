"""Shared fixtures for the opendatalayer test suite."""

from __future__ import annotations

import logging

import pytest
import structlog

from opendatalayer.bus.event_bus import EventBus
from opendatalayer.context.manager import ContextManager
from opendatalayer.data_layer import DataLayer
from opendatalayer.odl import OpenDataLayer
from opendatalayer.pipeline.middleware import MiddlewarePipeline
from opendatalayer.testing import EventSpy, make_event


@pytest.fixture
def context_manager() -> ContextManager:
    return ContextManager()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def pipeline() -> MiddlewarePipeline:
    return MiddlewarePipeline()


@pytest.fixture
def data_layer() -> DataLayer:
    return DataLayer()


@pytest.fixture
def odl() -> OpenDataLayer:
    return OpenDataLayer()


@pytest.fixture
def spy(odl: OpenDataLayer) -> EventSpy:
    """An EventSpy attached to the ``odl`` fixture on ``"*"``."""
    return EventSpy().attach(odl)


@pytest.fixture
def sample_event():
    return make_event(event="ecommerce.purchase", data={"orderId": "o-1"})


@pytest.fixture
def restore_logging():
    """Undo ``setup_logging``: root handlers, root level and structlog config."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
