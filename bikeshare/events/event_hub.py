"""
The hub keeps track of the handlers subscribed to each event
of its event lists, and calls them in order of subscription.
"""

from collections import defaultdict
from inspect import signature, Parameter
from typing import Callable, Dict, List, Type, Union, Set

from .event_list import EventList
from .exceptions import NoSuchEventError, NoSuchListenerError, InvalidHandlerError


def _positional_arity(func: Callable, *, skip_self=False):
    """Returns the number of positional parameters, or None if it takes ``*args``."""
    parameters = list(signature(func).parameters.values())
    if skip_self and parameters and parameters[0].name == "self":
        parameters = parameters[1:]

    if any(p.kind == Parameter.VAR_POSITIONAL for p in parameters):
        return None

    return len([
        p for p in parameters
        if p.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
    ])


class BoundEvent:
    """
    An event accessed through a hub. Allows the natural syntax:

    >>> hub.bike_updated += handler
    >>> hub.bike_updated(3)
    """

    def __init__(self, hub: "EventHub", event: Callable):
        self.hub = hub
        self.event = event

    def __call__(self, *args, **kwargs):
        self.hub.emit(self.event, *args, **kwargs)

    def __iadd__(self, handler: Callable):
        self.hub.subscribe(self.event, handler)
        return self

    def __isub__(self, handler: Callable):
        self.hub.unsubscribe(self.event, handler)
        return self


class EventHub:

    def __init__(self, *event_lists: Type[EventList]):
        self._event_lists: Set[Type[EventList]] = set()
        self._listeners: Dict[Callable, List[Callable]] = defaultdict(list)
        self.add_events(*event_lists)

    def add_events(self, *event_lists: Type[EventList]):
        """Adds more event lists to the hub."""
        self._event_lists.update(event_lists)

    def __contains__(self, item: Union[Type[EventList], Callable]):
        """Checks whether an event list, or a single event, is on the hub."""
        if isinstance(item, type) and issubclass(item, EventList):
            return item in self._event_lists
        return any(item in event_list for event_list in self._event_lists)

    def __getattr__(self, name) -> BoundEvent:
        for event_list in self.__dict__.get("_event_lists", ()):
            event = getattr(event_list, name, None)
            if event is not None and callable(event):
                return BoundEvent(self, event)
        raise NoSuchEventError(f"No event named {name} on this hub.")

    def __setattr__(self, name, value):
        # assignment is a side effect of the += and -= syntax
        if isinstance(value, BoundEvent):
            return
        super().__setattr__(name, value)

    def subscribe(self, event: Union[Callable, BoundEvent], handler: Callable):
        """
        Subscribes a handler to an event.

        :raises NoSuchEventError: If the event is not on this hub.
        :raises InvalidHandlerError: If the handler does not accept the event's arguments.
        """
        event = self._resolve(event)
        expected = _positional_arity(event, skip_self=True)
        actual = _positional_arity(handler)
        if expected is not None and actual is not None and expected != actual:
            raise InvalidHandlerError(
                f"Handler {handler.__name__} takes {actual} arguments but {event.__name__} sends {expected}."
            )
        self._listeners[event].append(handler)

    def unsubscribe(self, event: Union[Callable, BoundEvent], handler: Callable):
        """
        Removes a handler from an event.

        :raises NoSuchListenerError: If the handler is not subscribed.
        """
        event = event.event if isinstance(event, BoundEvent) else event
        if handler not in self._listeners.get(event, []):
            raise NoSuchListenerError(f"{handler} is not subscribed to {event.__name__}.")
        self._listeners[event].remove(handler)

    def emit(self, event: Union[Callable, BoundEvent], *args, **kwargs):
        """Calls every handler subscribed to the event with the given arguments."""
        event = self._resolve(event)
        for handler in list(self._listeners.get(event, [])):
            handler(*args, **kwargs)

    def _resolve(self, event: Union[Callable, BoundEvent]) -> Callable:
        event = event.event if isinstance(event, BoundEvent) else event
        if event not in self:
            raise NoSuchEventError(f"Event {event.__name__} is not on this hub.")
        return event
