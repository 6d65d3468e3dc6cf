"""
Component Registry
Maps server type names to local component implementations
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from core import get_logger

logger = get_logger(__name__)


# Common action prop names; the action list for components registered with
# infer_action_props=False and no explicit list.
DEFAULT_ACTION_PROPS: tuple[str, ...] = (
    "onPress",
    "onLongPress",
    "onAddToCart",
    "onToggleFavorite",
    "onQuantityChange",
    "onRemove",
    "onSubmit",
    "onCancel",
    "onClose",
    "onSeeAll",
    "onHeaderPress",
)


class Component(Protocol):
    """
    A renderable unit: takes the resolved prop bag and the rendered
    children (None when the node has none) and returns its output.
    """

    def __call__(self, props: Dict[str, Any], children: Optional[List[Any]]) -> Any:
        ...


def looks_like_handler(prop_name: str, prefix: str = "on") -> bool:
    """Event-handler naming convention (onPress, onClose, ...)."""
    return prop_name.startswith(prefix)


@dataclass(frozen=True)
class RegisteredComponent:
    """Implementation plus the metadata the renderer needs"""

    component: Component
    default_props: Dict[str, Any] = field(default_factory=dict)
    action_props: tuple[str, ...] = ()
    children_props: tuple[str, ...] = ()
    infer_action_props: bool = True

    def accepts_action(self, prop_name: str, is_action_prop: Callable[[str], bool]) -> bool:
        """Explicit list first, naming heuristic second (if enabled)."""
        if prop_name in self.action_props:
            return True
        return self.infer_action_props and is_action_prop(prop_name)

    def copy(self) -> "RegisteredComponent":
        return RegisteredComponent(
            component=self.component,
            default_props=dict(self.default_props),
            action_props=self.action_props,
            children_props=self.children_props,
            infer_action_props=self.infer_action_props,
        )


ComponentRegistry = Dict[str, RegisteredComponent]
"""Snapshot handed to renderers; lookups of unknown types return None."""


class ComponentRegistryBuilder:
    """
    Mutable builder for component registries.
    Registration is chainable; build() hands out independent snapshots.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, RegisteredComponent] = {}

    def register(
        self,
        type_name: str,
        component: Component,
        *,
        default_props: Optional[Mapping[str, Any]] = None,
        action_props: Optional[Iterable[str]] = None,
        children_props: Optional[Iterable[str]] = None,
        infer_action_props: bool = True,
    ) -> "ComponentRegistryBuilder":
        """
        Bind a server type name to a component implementation.

        Args:
            type_name: Type name used by the server
            component: Renderable implementation
            default_props: Props applied beneath the server's props
            action_props: Prop names that take synthesized action callbacks
            children_props: Prop names holding nested descriptors to render
            infer_action_props: Also accept handler-looking prop names

        Returns:
            The builder, for chaining
        """
        if type_name in self._entries:
            logger.debug("component_replaced", type=type_name)

        # Components that opt out of name sniffing still get the common handlers
        if action_props is not None:
            resolved_action_props = tuple(action_props)
        elif not infer_action_props:
            resolved_action_props = DEFAULT_ACTION_PROPS
        else:
            resolved_action_props = ()

        self._entries[type_name] = RegisteredComponent(
            component=component,
            default_props=dict(default_props or {}),
            action_props=resolved_action_props,
            children_props=tuple(children_props or ()),
            infer_action_props=infer_action_props,
        )
        logger.debug("component_registered", type=type_name)
        return self

    def unregister(self, type_name: str) -> "ComponentRegistryBuilder":
        """Remove a binding; unknown names are ignored."""
        if self._entries.pop(type_name, None) is not None:
            logger.debug("component_unregistered", type=type_name)
        return self

    def build(self) -> ComponentRegistry:
        """Return a fresh snapshot; later registrations do not leak into it."""
        snapshot = {name: entry.copy() for name, entry in self._entries.items()}
        logger.info("registry_built", components=len(snapshot))
        return snapshot

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        return {
            "total_components": len(self._entries),
            "with_defaults": sum(1 for e in self._entries.values() if e.default_props),
            "with_action_props": sum(1 for e in self._entries.values() if e.action_props),
            "type_names": list(self._entries.keys()),
        }


def create_registry() -> ComponentRegistryBuilder:
    """Start a new registry builder."""
    return ComponentRegistryBuilder()
