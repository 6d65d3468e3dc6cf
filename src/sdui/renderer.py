"""SDUI Renderer - walks descriptor trees and invokes registered components."""

from collections.abc import Callable, Mapping, Sequence
from contextlib import nullcontext
from functools import partial
from typing import Any, NamedTuple

from pydantic import ValidationError as ModelValidationError

from core import LogContext, get_logger, get_settings
from core.id import new_render_id
from monitoring import MetricsCollector, metrics_collector, trace_operation

from .dispatcher import OnAction, bind_actions
from .models import (
    ComponentDescriptor,
    ScreenDescriptor,
    SectionDescriptor,
    as_component,
    as_section,
    has_components,
)
from .registry import RegisteredComponent, looks_like_handler

logger = get_logger(__name__)

Fallback = Callable[[str], Any]


class Keyed(NamedTuple):
    """One rendered item of a list, with its resolved identity."""

    key: str | int
    output: Any


SectionWrapper = Callable[[SectionDescriptor, list[Keyed]], Any]
NodeInput = ComponentDescriptor | Mapping[str, Any]
SectionInput = SectionDescriptor | Mapping[str, Any]


def _key_of(item: Any, index: int, attr: str = "key") -> str | int:
    if isinstance(item, Mapping):
        value = item.get(attr)
    else:
        value = getattr(item, attr, None)
    return index if value is None else value


class SDUIRenderer:
    """
    Renders component, section and screen descriptors against a registry
    snapshot. Holds configuration only; nothing changes between calls.
    """

    def __init__(
        self,
        registry: Mapping[str, RegisteredComponent],
        *,
        on_action: OnAction | None = None,
        fallback: Fallback | None = None,
        section_wrapper: SectionWrapper | None = None,
        is_action_prop: Callable[[str], bool] | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.registry = registry
        self.on_action = on_action
        self.fallback = fallback
        self.section_wrapper = section_wrapper
        if is_action_prop is None:
            is_action_prop = partial(looks_like_handler, prefix=get_settings().action_prop_prefix)
        self.is_action_prop = is_action_prop
        if metrics is None and get_settings().enable_metrics:
            metrics = metrics_collector
        self.metrics = metrics

    # ------------------------------------------------------------------
    # Single node
    # ------------------------------------------------------------------

    def render(self, data: NodeInput) -> Any:
        """
        Render one component descriptor.

        Returns:
            The component's output, the fallback's output for an unknown
            type, or None when nothing is rendered
        """
        try:
            node = as_component(data)
        except ModelValidationError as e:
            logger.warning("malformed_component", error_count=e.error_count())
            self._record("malformed")
            return None

        entry = self.registry.get(node.type)
        if entry is None:
            logger.warning("unknown_component_type", type=node.type)
            if self.fallback is not None:
                self._record("fallback")
                return self.fallback(node.type)
            self._record("omitted")
            return None

        props = self._build_props(node, entry)
        children = self._render_list(node.children) if node.children else None
        self._record("rendered")
        return entry.component(props, children)

    def resolve_props(self, data: NodeInput) -> dict[str, Any] | None:
        """Final prop bag for a node, or None if it is malformed or its type is not registered."""
        try:
            node = as_component(data)
        except ModelValidationError as e:
            logger.warning("malformed_component", error_count=e.error_count())
            return None
        entry = self.registry.get(node.type)
        if entry is None:
            return None
        return self._build_props(node, entry)

    def _build_props(self, node: ComponentDescriptor, entry: RegisteredComponent) -> dict[str, Any]:
        # defaults < server props < action callbacks < style overrides
        props: dict[str, Any] = {**entry.default_props, **node.props}

        for slot in entry.children_props:
            if slot in props:
                props[slot] = self._render_slot(props[slot])

        if node.actions and self.on_action is not None:
            accepted = {
                name: action
                for name, action in node.actions.items()
                if entry.accepts_action(name, self.is_action_prop)
            }
            props.update(bind_actions(self.on_action, accepted, with_arguments=True))

        if node.style:
            base = props.get("style")
            props["style"] = {**(base if isinstance(base, Mapping) else {}), **node.style}

        return props

    def _render_slot(self, value: Any) -> Any:
        if isinstance(value, ComponentDescriptor):
            return self.render(value)
        if isinstance(value, Mapping) and "type" in value:
            return self.render(value)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return self._render_list(value)
        return value

    def _render_list(self, nodes: Sequence[NodeInput]) -> list[Keyed]:
        rendered = []
        for index, child in enumerate(nodes):
            output = self.render(child)
            if output is not None:
                rendered.append(Keyed(_key_of(child, index), output))
        return rendered

    # ------------------------------------------------------------------
    # Sections and screens
    # ------------------------------------------------------------------

    def render_section(self, data: SectionInput) -> Any:
        """Render a section's components in order, wrapped if a wrapper is set."""
        try:
            section = as_section(data)
        except ModelValidationError as e:
            logger.warning("malformed_section", error_count=e.error_count())
            return None

        content = self._render_list(section.components)
        if self.section_wrapper is not None:
            return self.section_wrapper(section, content)
        return content

    def render_screen(
        self,
        data: Sequence[NodeInput] | Sequence[SectionInput],
        is_sections: bool | None = None,
    ) -> list[Keyed]:
        """
        Render a list of components or a list of sections.

        Args:
            data: Components or sections
            is_sections: Skip the first-element heuristic when given

        Returns:
            Keyed outputs (sections keyed by id, components by key)
        """
        if not data:
            return []

        rendering_sections = is_sections if is_sections is not None else has_components(data[0])

        with self._measure("screen"), trace_operation(
            "render_screen", items=len(data), sections=rendering_sections
        ):
            if not rendering_sections:
                return self._render_list(data)

            rendered = []
            for index, section in enumerate(data):
                output = self.render_section(section)
                if output is not None:
                    rendered.append(Keyed(_key_of(section, index, "id"), output))
            return rendered

    def render_screen_descriptor(self, data: ScreenDescriptor | Mapping[str, Any]) -> list[Keyed]:
        """Render header, sections and footer of a full screen."""
        screen = data if isinstance(data, ScreenDescriptor) else ScreenDescriptor.model_validate(data)

        with LogContext(render_id=new_render_id(), screen_id=screen.id):
            logger.info("render_screen_descriptor", sections=len(screen.sections))
            rendered = []
            if screen.header is not None:
                header = self.render(screen.header)
                if header is not None:
                    rendered.append(Keyed("header", header))
            rendered.extend(self.render_screen(screen.sections, is_sections=True))
            if screen.footer is not None:
                footer = self.render(screen.footer)
                if footer is not None:
                    rendered.append(Keyed("footer", footer))
            return rendered

    def _record(self, status: str) -> None:
        if self.metrics is not None:
            self.metrics.record_node(status)

    def _measure(self, scope: str) -> Any:
        if self.metrics is not None:
            return self.metrics.measure_render(scope)
        return nullcontext()


# ============================================================================
# Convenience functions
# ============================================================================


def render_component(
    data: NodeInput,
    registry: Mapping[str, RegisteredComponent],
    on_action: OnAction | None = None,
    fallback: Fallback | None = None,
) -> Any:
    """Render a single descriptor."""
    return SDUIRenderer(registry, on_action=on_action, fallback=fallback).render(data)


def render_section(
    section: SectionInput,
    registry: Mapping[str, RegisteredComponent],
    on_action: OnAction | None = None,
    fallback: Fallback | None = None,
    section_wrapper: SectionWrapper | None = None,
) -> Any:
    """Render one section."""
    renderer = SDUIRenderer(
        registry, on_action=on_action, fallback=fallback, section_wrapper=section_wrapper
    )
    return renderer.render_section(section)


def render_screen(
    data: Sequence[NodeInput] | Sequence[SectionInput],
    registry: Mapping[str, RegisteredComponent],
    on_action: OnAction | None = None,
    fallback: Fallback | None = None,
    is_sections: bool | None = None,
    section_wrapper: SectionWrapper | None = None,
) -> list[Keyed]:
    """Render a list of components or sections."""
    renderer = SDUIRenderer(
        registry, on_action=on_action, fallback=fallback, section_wrapper=section_wrapper
    )
    return renderer.render_screen(data, is_sections=is_sections)
