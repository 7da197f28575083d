"""
.. autoclasstree:: bikeshare.events

This module provides a simple event system. It is centered around the use of hubs.
A hub is created by passing a number of event lists in. These event lists provide
typed callback signatures which subscribers can use to implement their handlers.

>>> class FleetEvents(EventList):
>>>     @staticmethod
>>>     def bike_updated(index: int):
>>>         "A bike was re-read from the ledger."
>>>
>>> def bike_handler(index):
>>>     print(f"Bike {index} changed")
>>>
>>> hub = EventHub(FleetEvents)
>>> hub.subscribe(FleetEvents.bike_updated, bike_handler)
>>> hub.emit(FleetEvents.bike_updated, 3)
Bike 3 changed
"""

from .event_hub import EventHub, BoundEvent
from .event_list import EventList
from .exceptions import NoSuchEventError, NoSuchListenerError, InvalidHandlerError
