"""
Action Dispatcher
Interprets action descriptors against client-provided effect handlers.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core import LogContext, get_logger, get_settings
from core.id import IDGenerator, default_generator, new_dispatch_id
from monitoring import MetricsCollector, metrics_collector

from .actions import (
    APICallAction,
    ActionType,
    BaseAction,
    ConditionalAction,
    SequenceAction,
    action_type,
    coerce_action,
)

logger = get_logger(__name__)

ActionInput = BaseAction | Mapping[str, Any]
OnAction = Callable[[ActionInput], Any]


@dataclass
class EffectHandlers:
    """
    Client side effects, one optional callback per built-in action type.
    Callbacks receive the action's fields positionally in wire order and
    may return an awaitable. custom_handlers, keyed by action type,
    replace the built-in handling for that type entirely.
    """

    navigate: Optional[Callable[[str, Optional[Dict[str, Any]]], Any]] = None
    go_back: Optional[Callable[[], Any]] = None
    open_url: Optional[Callable[[str, Optional[bool]], Any]] = None
    add_to_cart: Optional[Callable[[str, Optional[int]], Any]] = None
    update_cart_quantity: Optional[Callable[[str, int], Any]] = None
    remove_from_cart: Optional[Callable[[str], Any]] = None
    toggle_favorite: Optional[Callable[[str], Any]] = None
    api_call: Optional[Callable[[str, Optional[str], Optional[Dict[str, Any]]], Any]] = None
    show_toast: Optional[Callable[[str, Optional[str], Optional[float]], Any]] = None
    show_modal: Optional[Callable[[str, Optional[Dict[str, Any]]], Any]] = None
    close_modal: Optional[Callable[[Optional[str]], Any]] = None
    share: Optional[Callable[[Optional[str], Optional[str], Optional[str]], Any]] = None
    track_event: Optional[Callable[[str, Optional[Dict[str, Any]]], Any]] = None
    refresh: Optional[Callable[[Optional[str]], Any]] = None
    custom_handlers: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def custom_handler(self, tag: Optional[str]) -> Optional[Callable[[Any], Any]]:
        if tag is None or not self.custom_handlers:
            return None
        return self.custom_handlers.get(tag)


# action type -> (EffectHandlers attribute, action fields in wire order)
SIMPLE_EFFECTS: Dict[str, tuple[str, tuple[str, ...]]] = {
    ActionType.NAVIGATE.value: ("navigate", ("screen", "params")),
    ActionType.GO_BACK.value: ("go_back", ()),
    ActionType.OPEN_URL.value: ("open_url", ("url", "external")),
    ActionType.ADD_TO_CART.value: ("add_to_cart", ("product_id", "quantity")),
    ActionType.UPDATE_CART_QUANTITY.value: ("update_cart_quantity", ("product_id", "quantity")),
    ActionType.REMOVE_FROM_CART.value: ("remove_from_cart", ("product_id",)),
    ActionType.TOGGLE_FAVORITE.value: ("toggle_favorite", ("product_id",)),
    ActionType.SHOW_TOAST.value: ("show_toast", ("message", "status", "duration")),
    ActionType.SHOW_MODAL.value: ("show_modal", ("modal_id", "props")),
    ActionType.CLOSE_MODAL.value: ("close_modal", ("modal_id",)),
    ActionType.SHARE.value: ("share", ("title", "message", "url")),
    ActionType.TRACK_EVENT.value: ("track_event", ("event", "properties")),
    ActionType.REFRESH.value: ("refresh", ("section_id",)),
}

# prop name -> (action type, field filled from the callback's argument)
ARGUMENT_BINDINGS: Dict[str, tuple[str, str]] = {
    "onQuantityChange": (ActionType.UPDATE_CART_QUANTITY.value, "quantity"),
}


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


# Callback tasks still in flight
_pending: set[asyncio.Future] = set()


def _log_callback_failure(task: asyncio.Future) -> None:
    _pending.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("action_callback_failed", error=str(task.exception()))


def _start(result: Any) -> Any:
    """
    Start an awaitable returned by on_action right away, like an event
    handler would. Inside a running loop it becomes a Task (still
    awaitable); without one it runs to completion before returning.
    """
    if not inspect.isawaitable(result):
        return result
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_resolve(result))
    task = asyncio.ensure_future(result)
    _pending.add(task)
    task.add_done_callback(_log_callback_failure)
    return task


def _with_field(action: ActionInput, name: str, value: Any) -> ActionInput:
    if isinstance(action, BaseAction):
        return action.model_copy(update={name: value})
    return {**action, name: value}


def bind_action(
    on_action: OnAction,
    prop_name: str,
    action: ActionInput,
    with_arguments: bool = False,
) -> Callable[..., Any]:
    """
    Close over one action. Calling the callback starts the action at once;
    with an async on_action it returns the running Task inside an event
    loop, or the finished result outside one.
    """
    binding = ARGUMENT_BINDINGS.get(prop_name) if with_arguments else None
    if binding is not None and action_type(action) == binding[0]:
        field_name = binding[1]

        def argument_callback(value: Any) -> Any:
            return _start(on_action(_with_field(action, field_name, value)))

        return argument_callback

    def callback() -> Any:
        return _start(on_action(action))

    return callback


def bind_actions(
    on_action: OnAction,
    actions: Optional[Mapping[str, ActionInput]],
    with_arguments: bool = False,
) -> Dict[str, Callable[..., Any]]:
    """Map prop name -> callback for every entry; empty for None."""
    if not actions:
        return {}
    return {
        prop_name: bind_action(on_action, prop_name, action, with_arguments)
        for prop_name, action in actions.items()
    }


class ActionDispatcher:
    """
    Executes action descriptors.

    Resolution per action is an ordered chain: custom handler for the
    type, then the built-in table, then the unknown-type arm. The chain is
    re-read from self.handlers on every nested step, so replacing the
    handlers mid-sequence changes what later steps call.
    """

    def __init__(
        self,
        handlers: Optional[EffectHandlers] = None,
        *,
        id_generator: Optional[IDGenerator] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.handlers = handlers or EffectHandlers()
        self.id_generator = id_generator or default_generator()
        if metrics is None and get_settings().enable_metrics:
            metrics = metrics_collector
        self.metrics = metrics

        self._builtins: Dict[str, Callable[[Any], Awaitable[None]]] = {
            tag: self._run_effect for tag in SIMPLE_EFFECTS
        }
        self._builtins.update({
            ActionType.API_CALL.value: self._run_api_call,
            ActionType.SEQUENCE.value: self._run_sequence,
            ActionType.CONDITIONAL.value: self._run_conditional,
            ActionType.NOOP.value: self._run_noop,
        })

    async def dispatch(self, action: ActionInput) -> Any:
        """
        Execute one action (and any actions chained under it).

        Returns:
            The custom handler's result when one handled the action, else None

        Raises:
            Whatever a custom or effect handler raises, except inside
            API_CALL's own call/onSuccess path
        """
        dispatch_id = new_dispatch_id(self.id_generator)
        with LogContext(dispatch_id=dispatch_id):
            return await self._dispatch(action)

    def map_actions_to_props(
        self, actions: Optional[Mapping[str, ActionInput]] = None
    ) -> Dict[str, Callable[[], Any]]:
        """Zero-argument callbacks that start dispatching the mapped actions when called."""
        return bind_actions(self.dispatch, actions)

    async def _dispatch(self, action: ActionInput) -> Any:
        action = coerce_action(action)
        tag = action_type(action)

        custom = self.handlers.custom_handler(tag)
        if custom is not None:
            self._record(tag, "custom")
            return await _resolve(custom(action))

        builtin = self._builtins.get(tag) if isinstance(tag, str) else None
        if builtin is None:
            logger.warning("unknown_action_type", action_type=tag)
            self._record(tag, "unknown")
            return None

        await builtin(action)
        return None

    async def _run_effect(self, action: BaseAction) -> None:
        tag = action_type(action)
        handler_name, fields = SIMPLE_EFFECTS[tag]
        callback = getattr(self.handlers, handler_name)
        if callback is None:
            logger.debug("effect_handler_missing", action_type=tag, handler=handler_name)
            self._record(tag, "unhandled")
            return

        await _resolve(callback(*(getattr(action, name) for name in fields)))
        self._record(tag, "handled")

    async def _run_api_call(self, action: APICallAction) -> None:
        try:
            if self.handlers.api_call is not None:
                await _resolve(self.handlers.api_call(action.endpoint, action.method, action.body))
            if action.on_success is not None:
                await self._dispatch(action.on_success)
        except Exception as e:
            logger.warning(
                "api_call_failed",
                endpoint=action.endpoint,
                method=action.method,
                error=str(e),
                has_on_error=action.on_error is not None,
            )
            self._record(ActionType.API_CALL.value, "failed")
            if self.metrics is not None:
                self.metrics.record_api_failure()
            if action.on_error is not None:
                await self._dispatch(action.on_error)
            return

        self._record(ActionType.API_CALL.value, "handled")

    async def _run_sequence(self, action: SequenceAction) -> None:
        for index, nested in enumerate(action.actions):
            logger.debug("sequence_step", index=index, action_type=action_type(nested))
            await self._dispatch(nested)
        self._record(ActionType.SEQUENCE.value, "handled")

    async def _run_conditional(self, action: ConditionalAction) -> None:
        # No evaluation context exists for condition strings yet
        logger.warning("conditional_not_evaluated", condition=action.condition)
        self._record(ActionType.CONDITIONAL.value, "skipped")

    async def _run_noop(self, action: BaseAction) -> None:
        self._record(ActionType.NOOP.value, "handled")

    def _record(self, tag: Optional[str], outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_action(str(tag), outcome)
