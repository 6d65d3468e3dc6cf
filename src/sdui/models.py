"""SDUI Descriptor Models."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .actions import ActionLike, coerce_action


class Descriptor(BaseModel):
    """Read-only server data; camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class ComponentDescriptor(Descriptor):
    """One node of a server-sent UI tree."""

    type: str = Field(..., description="Registered component type name")
    props: dict[str, Any] = Field(default_factory=dict)
    actions: dict[str, Any] | None = Field(default=None, description="Prop name -> action")
    key: str | int | None = Field(default=None, description="Stable identity within a list")
    children: list["ComponentDescriptor"] | None = None
    condition: str | None = Field(default=None, description="Carried, not evaluated")
    style: dict[str, Any] | None = None

    @field_validator("actions", mode="before")
    @classmethod
    def coerce_actions(cls, v: Any) -> Any:
        """Parse known action types, keep unknown ones raw for the dispatcher."""
        if v is None:
            return None
        if not isinstance(v, Mapping):
            raise ValueError("actions must be a mapping of prop name to action")
        return {name: coerce_action(action) for name, action in v.items()}


class SectionDescriptor(Descriptor):
    """A named, ordered group of components."""

    id: str | None = Field(default=None, description="Key among sibling sections; list index when absent")
    type: str | None = None
    title: str | None = None
    components: list[ComponentDescriptor]
    color_props: dict[str, Any] | None = None
    style: dict[str, Any] | None = None
    collapsible: bool | None = None
    collapsed: bool | None = None
    on_header_press: ActionLike = None
    see_all_action: ActionLike = None


class ScreenDescriptor(Descriptor):
    """A full screen: ordered sections plus optional header and footer."""

    id: str
    title: str | None = None
    sections: list[SectionDescriptor]
    header: ComponentDescriptor | None = None
    footer: ComponentDescriptor | None = None
    on_refresh: ActionLike = None
    background: Any = None
    analytics_name: str | None = None


ComponentDescriptor.model_rebuild()


def as_component(data: ComponentDescriptor | Mapping[str, Any]) -> ComponentDescriptor:
    """Accept a descriptor or its wire mapping."""
    if isinstance(data, ComponentDescriptor):
        return data
    return ComponentDescriptor.model_validate(data)


def as_section(data: SectionDescriptor | Mapping[str, Any]) -> SectionDescriptor:
    """Accept a descriptor or its wire mapping."""
    if isinstance(data, SectionDescriptor):
        return data
    return SectionDescriptor.model_validate(data)


def has_components(item: Any) -> bool:
    """Heuristic used to tell a section from a component."""
    if isinstance(item, SectionDescriptor):
        return True
    if isinstance(item, Mapping):
        return "components" in item
    return hasattr(item, "components")
