"""
SDUI Action Types
Serializable descriptors for what should happen when a user interacts
with a component. The dispatcher maps these to client effect handlers.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class ActionType(str, Enum):
    """Closed set of action tags understood by the dispatcher"""
    NAVIGATE = "NAVIGATE"
    GO_BACK = "GO_BACK"
    OPEN_URL = "OPEN_URL"
    ADD_TO_CART = "ADD_TO_CART"
    UPDATE_CART_QUANTITY = "UPDATE_CART_QUANTITY"
    REMOVE_FROM_CART = "REMOVE_FROM_CART"
    TOGGLE_FAVORITE = "TOGGLE_FAVORITE"
    API_CALL = "API_CALL"
    SHOW_TOAST = "SHOW_TOAST"
    SHOW_MODAL = "SHOW_MODAL"
    CLOSE_MODAL = "CLOSE_MODAL"
    SHARE = "SHARE"
    TRACK_EVENT = "TRACK_EVENT"
    REFRESH = "REFRESH"
    SEQUENCE = "SEQUENCE"
    CONDITIONAL = "CONDITIONAL"
    NOOP = "NOOP"


KNOWN_ACTION_TYPES = frozenset(t.value for t in ActionType)


def _coerce_nested(value: Any) -> Any:
    if value is None:
        return None
    return coerce_action(value)


def _coerce_nested_list(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        raise ValueError("actions must be a list")
    return tuple(coerce_action(item) for item in value)


# Nested actions are parsed leniently so an unknown tag deep in a chain
# reaches the dispatcher's default arm instead of failing the whole payload.
ActionLike = Annotated[Any, BeforeValidator(_coerce_nested)]
ActionList = Annotated[Any, BeforeValidator(_coerce_nested_list)]


class BaseAction(BaseModel):
    """Common configuration: immutable, camelCase on the wire"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class NavigateAction(BaseAction):
    """Navigate to a screen"""
    type: Literal["NAVIGATE"] = "NAVIGATE"
    screen: str
    params: dict[str, Any] | None = None


class GoBackAction(BaseAction):
    type: Literal["GO_BACK"] = "GO_BACK"


class OpenURLAction(BaseAction):
    """Open a link, optionally outside the app"""
    type: Literal["OPEN_URL"] = "OPEN_URL"
    url: str
    external: bool | None = None


class AddToCartAction(BaseAction):
    type: Literal["ADD_TO_CART"] = "ADD_TO_CART"
    product_id: str
    quantity: int | None = None


class UpdateCartQuantityAction(BaseAction):
    type: Literal["UPDATE_CART_QUANTITY"] = "UPDATE_CART_QUANTITY"
    product_id: str
    quantity: int


class RemoveFromCartAction(BaseAction):
    type: Literal["REMOVE_FROM_CART"] = "REMOVE_FROM_CART"
    product_id: str


class ToggleFavoriteAction(BaseAction):
    type: Literal["TOGGLE_FAVORITE"] = "TOGGLE_FAVORITE"
    product_id: str


class APICallAction(BaseAction):
    """Network request with optional success/failure continuations"""
    type: Literal["API_CALL"] = "API_CALL"
    endpoint: str
    method: Literal["GET", "POST", "PUT", "DELETE"] | None = None
    body: dict[str, Any] | None = None
    on_success: ActionLike = None
    on_error: ActionLike = None


class ShowToastAction(BaseAction):
    type: Literal["SHOW_TOAST"] = "SHOW_TOAST"
    message: str
    status: Literal["info", "success", "warning", "error"] | None = None
    duration: int | float | None = None


class ShowModalAction(BaseAction):
    type: Literal["SHOW_MODAL"] = "SHOW_MODAL"
    modal_id: str
    props: dict[str, Any] | None = None


class CloseModalAction(BaseAction):
    type: Literal["CLOSE_MODAL"] = "CLOSE_MODAL"
    modal_id: str | None = None


class ShareAction(BaseAction):
    type: Literal["SHARE"] = "SHARE"
    title: str | None = None
    message: str | None = None
    url: str | None = None


class TrackEventAction(BaseAction):
    """Analytics event"""
    type: Literal["TRACK_EVENT"] = "TRACK_EVENT"
    event: str
    properties: dict[str, Any] | None = None


class RefreshAction(BaseAction):
    """Refresh the current screen, or one section of it"""
    type: Literal["REFRESH"] = "REFRESH"
    section_id: str | None = None


class SequenceAction(BaseAction):
    """Run nested actions one after another"""
    type: Literal["SEQUENCE"] = "SEQUENCE"
    actions: ActionList = Field(default_factory=tuple)


class ConditionalAction(BaseAction):
    """Branch on a condition expression (carried, never evaluated)"""
    type: Literal["CONDITIONAL"] = "CONDITIONAL"
    condition: str
    on_true: ActionLike
    on_false: ActionLike = None


class NoOpAction(BaseAction):
    type: Literal["NOOP"] = "NOOP"


Action = Annotated[
    Union[
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
    ],
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: Mapping[str, Any]) -> BaseAction:
    """
    Validate a wire mapping into its action model.

    Raises:
        pydantic.ValidationError: If the tag is unknown or fields are malformed
    """
    return _action_adapter.validate_python(dict(data))


def coerce_action(data: Any) -> BaseAction | Mapping[str, Any]:
    """
    Lenient parse: models pass through, known tags are validated and
    unknown tags are returned untouched for the dispatcher to report.
    """
    if isinstance(data, BaseAction):
        return data
    if not isinstance(data, Mapping):
        raise ValueError(f"Action must be a mapping, got {type(data).__name__}")
    if data.get("type") in KNOWN_ACTION_TYPES:
        return parse_action(data)
    return data


def action_type(action: BaseAction | Mapping[str, Any]) -> str | None:
    """Tag of a parsed or raw action."""
    if isinstance(action, BaseAction):
        return getattr(action, "type", None)
    tag = action.get("type")
    if isinstance(tag, Enum):
        return tag.value
    return tag


def to_wire(action: BaseAction | Mapping[str, Any]) -> dict[str, Any]:
    """Serialize an action to its camelCase wire form, dropping unset optionals."""
    if isinstance(action, BaseAction):
        return action.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(action)
