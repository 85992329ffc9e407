import inspect
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar, get_args, get_origin

T = TypeVar("T")

# Marker for appliers that want the Event wrapper, not just the payload
_WANTS_EVENT_WRAPPER_ATTR = "_wants_event_wrapper"
_APPLIER_MARKER_ATTR = "_is_event_applier"
_APPLIER_TYPE_ATTR = "_applies_event_type"


def _ignore_unregistered(message: Any, instance: Any, *args: Any, **kwargs: Any) -> None:
    # Aggregates silently skip events they have no applier for
    return None


def _extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> tuple[type, bool]:
    """Extract the event type annotation from an applier method.

    Detects whether the applier wants the Event wrapper (annotated as
    ``Event[T]``) or just the payload (annotated as ``T``).

    Args:
        func: The applier method to inspect.
        param_index: Index of the parameter to extract (0=self, 1=first arg).

    Returns:
        A tuple of (payload_type, wants_wrapper).

    Raises:
        ValueError: If the parameter lacks a type annotation.
    """
    func_name = getattr(func, "__name__", repr(func))
    params = list(inspect.signature(func).parameters.values())

    if len(params) <= param_index:
        raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

    param = params[param_index]
    if param.annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must have a type annotation"
        )
    annotation = param.annotation

    from .domain import Event  # Import here to avoid circular dependency

    if get_origin(annotation) is Event:
        args = get_args(annotation)
        if not args:
            raise ValueError(
                f"Handler {func_name}: Event type must have a type"
                " argument, e.g., Event[InvoiceWasCreated]"
            )
        return (args[0], True)

    # Event[T] on a pydantic generic is a runtime subclass carrying its
    # origin and args in __pydantic_generic_metadata__
    if isinstance(annotation, type) and issubclass(annotation, Event):
        metadata = getattr(annotation, "__pydantic_generic_metadata__", None)
        if metadata and metadata.get("origin") is Event and metadata.get("args"):
            return (metadata["args"][0], True)
        raise ValueError(
            f"Handler {func_name}: Event type must have a type"
            " argument, e.g., Event[InvoiceWasCreated]"
        )

    return (annotation, False)


class MessageRouter:
    """Dispatches event payloads to type-specific applier methods.

    Appliers annotated with ``Event[T]`` receive the full wrapper (passed to
    ``route`` as the ``event_wrapper`` keyword); all others receive the payload.
    """

    __slots__ = ("_dispatch",)

    def __init__(self) -> None:
        @singledispatch
        def dispatch(message: object, instance: object, *args: Any, **kwargs: Any) -> object:
            return _ignore_unregistered(message, instance, *args, **kwargs)

        self._dispatch = dispatch

    def register(
        self,
        message_type: type,
        handler: Callable[..., object],
        wants_wrapper: bool = False,
    ) -> None:
        if wants_wrapper:

            def wrapper(
                msg: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any
            ) -> object:
                event_wrapper = kwargs.pop("event_wrapper", None)
                if event_wrapper is None:
                    raise TypeError(
                        f"Applier {h.__name__} requires the Event wrapper for "
                        f"{type(msg).__name__}"
                    )
                return h(inst, event_wrapper, *args, **kwargs)

            self._dispatch.register(message_type)(wrapper)
        else:

            def payload_wrapper(
                msg: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any
            ) -> object:
                kwargs.pop("event_wrapper", None)
                return h(inst, msg, *args, **kwargs)

            self._dispatch.register(message_type)(payload_wrapper)

    def route(self, instance: Any, message: Any, *args: Any, **kwargs: Any) -> object:
        """Route an event payload to its registered applier.

        Args:
            instance: The aggregate to call the applier on.
            message: The event payload.
            **kwargs: Pass ``event_wrapper=<Event>`` to provide the full
                wrapper to appliers that want it.
        """
        return self._dispatch(message, instance, *args, **kwargs)


def applies_event(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator marking a method as an event applier.

    The event type is extracted from the method's type annotation.

    Example:
        >>> class Invoice(Aggregate):
        ...     @applies_event
        ...     def apply_created(self, event: Event[InvoiceWasCreated]) -> None:
        ...         self.number = event.data.number
        ...         self.created_at = event.recorded_at
    """
    message_type, wants_wrapper = _extract_handler_type(func, param_index=1)
    setattr(func, _APPLIER_TYPE_ATTR, message_type)
    setattr(func, _APPLIER_MARKER_ATTR, True)
    setattr(func, _WANTS_EVENT_WRAPPER_ATTR, wants_wrapper)
    return func


def setup_event_applying(cls: type) -> MessageRouter:
    """Scan a class hierarchy for ``@applies_event`` methods.

    Args:
        cls: The aggregate class to set up routing for.

    Returns:
        A configured MessageRouter for event appliers.
    """
    router = MessageRouter()

    # Walk the MRO base-first so subclass appliers override inherited ones
    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            if getattr(value, _APPLIER_MARKER_ATTR, False) is not True:
                continue
            router.register(
                getattr(value, _APPLIER_TYPE_ATTR),
                value,
                wants_wrapper=getattr(value, _WANTS_EVENT_WRAPPER_ATTR, False),
            )

    return router
