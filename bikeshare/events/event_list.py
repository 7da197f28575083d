from typing import Callable


class EventListMeta(type):

    def __contains__(self, event: Callable):
        """Checks that the event is the one declared under its name on this list."""
        event_name = getattr(event, "__name__", None)
        if event_name is None or event_name.startswith("_"):
            return False
        return event is getattr(self, event_name, None)


class EventList(metaclass=EventListMeta):
    """
    Declares the events a component emits. Each event is a function on a
    subclass whose signature is what handlers must accept, for instance
    ``bike_updated(self, bike)`` hands its handlers a single bike.
    """
