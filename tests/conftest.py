"""Pytest configuration and fixtures."""

import os
from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from core.id import SequentialGenerator
from monitoring import MetricsCollector
from sdui import ActionDispatcher, EffectHandlers, create_registry


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['SDUI_LOG_LEVEL'] = 'DEBUG'
    os.environ['SDUI_ENABLE_METRICS'] = 'true'


# ============================================================================
# Test Components
# ============================================================================

class RecordingComponent:
    """Component double that records every call and echoes its inputs."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: list[tuple[dict[str, Any], Any]] = []

    def __call__(self, props: dict[str, Any], children: Any) -> dict[str, Any]:
        self.calls.append((props, children))
        return {"component": self.name, "props": props, "children": children}

    @property
    def last_props(self) -> dict[str, Any]:
        return self.calls[-1][0]


def fallback_component(type_name: str) -> dict[str, Any]:
    return {"fallback": type_name}


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def metrics():
    """Metrics collector on an isolated Prometheus registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def id_generator():
    """Deterministic dispatch ids."""
    return SequentialGenerator()


@pytest.fixture
def card():
    return RecordingComponent("Card")


@pytest.fixture
def button():
    return RecordingComponent("Button")


@pytest.fixture
def registry_builder(card, button):
    """Builder with a Card (default subtitle) and a Button (explicit onPress)."""
    return (
        create_registry()
        .register("Card", card, default_props={"subtitle": "Default"})
        .register("Button", button, action_props=["onPress"])
    )


@pytest.fixture
def registry(registry_builder):
    return registry_builder.build()


# ============================================================================
# Dispatch Fixtures
# ============================================================================

@pytest.fixture
def call_log():
    """Ordered record of effect invocations."""
    return []


@pytest.fixture
def recording_handlers(call_log):
    """Effect handlers that append (name, args) to call_log."""

    def record(name):
        def handler(*args):
            call_log.append((name, args))
        return handler

    return EffectHandlers(
        navigate=record("navigate"),
        go_back=record("go_back"),
        open_url=record("open_url"),
        add_to_cart=record("add_to_cart"),
        update_cart_quantity=record("update_cart_quantity"),
        remove_from_cart=record("remove_from_cart"),
        toggle_favorite=record("toggle_favorite"),
        show_toast=record("toast"),
        show_modal=record("show_modal"),
        close_modal=record("close_modal"),
        share=record("share"),
        track_event=record("track"),
        refresh=record("refresh"),
    )


@pytest.fixture
def dispatcher(recording_handlers, id_generator, metrics):
    return ActionDispatcher(recording_handlers, id_generator=id_generator, metrics=metrics)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_screen_json():
    """Sample screen payload as the server sends it."""
    return """{
  "id": "home",
  "title": "Home",
  "analyticsName": "home_screen",
  "onRefresh": {"type": "REFRESH"},
  "header": {"type": "Card", "props": {"title": "Welcome"}},
  "sections": [
    {
      "id": "featured",
      "title": "Featured",
      "seeAllAction": {"type": "NAVIGATE", "screen": "/featured"},
      "components": [
        {"type": "Card", "key": "c1", "props": {"title": "Apples"}},
        {
          "type": "Button",
          "key": "b1",
          "props": {"label": "Add"},
          "actions": {"onPress": {"type": "ADD_TO_CART", "productId": "p-1", "quantity": 2}}
        }
      ]
    },
    {
      "id": "deals",
      "components": [
        {"type": "Card", "props": {"title": "Half price"}, "style": {"padding": 8}}
      ]
    }
  ]
}"""
