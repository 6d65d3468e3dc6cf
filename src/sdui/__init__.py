"""
SDUI Engine
Component registry, action dispatcher and recursive renderer for
server-driven UI payloads
"""

from .actions import (
    Action,
    ActionType,
    BaseAction,
    NavigateAction,
    GoBackAction,
    OpenURLAction,
    AddToCartAction,
    UpdateCartQuantityAction,
    RemoveFromCartAction,
    ToggleFavoriteAction,
    APICallAction,
    ShowToastAction,
    ShowModalAction,
    CloseModalAction,
    ShareAction,
    TrackEventAction,
    RefreshAction,
    SequenceAction,
    ConditionalAction,
    NoOpAction,
    action_type,
    coerce_action,
    parse_action,
    to_wire,
)
from .models import ComponentDescriptor, SectionDescriptor, ScreenDescriptor
from .registry import (
    DEFAULT_ACTION_PROPS,
    Component,
    ComponentRegistry,
    ComponentRegistryBuilder,
    RegisteredComponent,
    create_registry,
    looks_like_handler,
)
from .dispatcher import ActionDispatcher, EffectHandlers, bind_action, bind_actions
from .renderer import Keyed, SDUIRenderer, render_component, render_section, render_screen
from .payload import load_screen, parse_component, parse_screen, parse_section

__all__ = [
    # Actions
    "Action",
    "ActionType",
    "BaseAction",
    "NavigateAction",
    "GoBackAction",
    "OpenURLAction",
    "AddToCartAction",
    "UpdateCartQuantityAction",
    "RemoveFromCartAction",
    "ToggleFavoriteAction",
    "APICallAction",
    "ShowToastAction",
    "ShowModalAction",
    "CloseModalAction",
    "ShareAction",
    "TrackEventAction",
    "RefreshAction",
    "SequenceAction",
    "ConditionalAction",
    "NoOpAction",
    "action_type",
    "coerce_action",
    "parse_action",
    "to_wire",
    # Descriptors
    "ComponentDescriptor",
    "SectionDescriptor",
    "ScreenDescriptor",
    # Registry
    "DEFAULT_ACTION_PROPS",
    "Component",
    "ComponentRegistry",
    "ComponentRegistryBuilder",
    "RegisteredComponent",
    "create_registry",
    "looks_like_handler",
    # Dispatch
    "ActionDispatcher",
    "EffectHandlers",
    "bind_action",
    "bind_actions",
    # Rendering
    "Keyed",
    "SDUIRenderer",
    "render_component",
    "render_section",
    "render_screen",
    # Payloads
    "load_screen",
    "parse_component",
    "parse_screen",
    "parse_section",
]
