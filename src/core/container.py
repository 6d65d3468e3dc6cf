"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from monitoring import MetricsCollector, metrics_collector
from sdui.dispatcher import ActionDispatcher, EffectHandlers
from sdui.registry import ComponentRegistryBuilder
from sdui.renderer import Fallback, SDUIRenderer, SectionWrapper

from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


class EngineModule(Module):
    """Engine dependencies: one registry snapshot, one dispatcher, one renderer."""

    def __init__(
        self,
        builder: ComponentRegistryBuilder,
        handlers: EffectHandlers | None = None,
        fallback: Fallback | None = None,
        section_wrapper: SectionWrapper | None = None,
    ) -> None:
        self.builder = builder
        self.handlers = handlers or EffectHandlers()
        self.fallback = fallback
        self.section_wrapper = section_wrapper

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide cached settings."""
        return get_settings()

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        """Provide the process-wide metrics collector."""
        return metrics_collector

    @singleton
    @provider
    def provide_handlers(self) -> EffectHandlers:
        return self.handlers

    @singleton
    @provider
    def provide_dispatcher(
        self, handlers: EffectHandlers, settings: Settings, metrics: MetricsCollector
    ) -> ActionDispatcher:
        """Provide the action dispatcher bound to the client's effect handlers."""
        return ActionDispatcher(handlers, metrics=metrics if settings.enable_metrics else None)

    @singleton
    @provider
    def provide_renderer(
        self, dispatcher: ActionDispatcher, settings: Settings, metrics: MetricsCollector
    ) -> SDUIRenderer:
        """Provide a renderer over a registry snapshot taken at container start."""
        registry = self.builder.build()
        if settings.enable_metrics:
            metrics.set_registry_size(len(registry))
        logger.info("engine_ready", components=len(registry))
        return SDUIRenderer(
            registry,
            on_action=dispatcher.dispatch,
            fallback=self.fallback,
            section_wrapper=self.section_wrapper,
            metrics=metrics if settings.enable_metrics else None,
        )


def create_container(
    builder: ComponentRegistryBuilder,
    handlers: EffectHandlers | None = None,
    fallback: Fallback | None = None,
    section_wrapper: SectionWrapper | None = None,
) -> Injector:
    """Create configured injector."""
    return Injector([EngineModule(builder, handlers, fallback, section_wrapper)])
