from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Union

from cms.application.events.models import VETOABLE_EVENTS, Rejection

logger = logging.getLogger(__name__)

Handler = Callable[[object], Union[Rejection, str, None]]


class EventDispatcher:
    """
    Synchronous, in-process plugin bus.

    Handlers are registered per event class. "Before" events (see
    ``VETOABLE_EVENTS``) are delivered through ``before`` and any handler may
    reject by returning a ``Rejection`` (or a non-empty string). Everything
    else goes through ``after``, where handler failures are logged and swallowed.
    An "after" event only means the write reached the unit of work: some fire
    before the commit (``UserAddedToGroup``), so a later failure can still roll
    the change back.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def register(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[Handler]:
        return list(self._handlers.get(event_type, ()))

    def before(self, event: object) -> Rejection | None:
        if not isinstance(event, VETOABLE_EVENTS):
            raise TypeError(f"{type(event).__name__} is not a vetoable event")
        messages: list[str] = []
        for handler in self.handlers_for(type(event)):
            outcome = handler(event)
            if isinstance(outcome, Rejection):
                outcome = outcome.message
            if outcome:
                messages.append(str(outcome))
        if not messages:
            return None
        logger.info("Event %s rejected: %s", type(event).__name__, "; ".join(messages))
        return Rejection("\n".join(messages))

    def after(self, event: object) -> None:
        for handler in self.handlers_for(type(event)):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Error dispatching event %s: %s", type(event).__name__, e, exc_info=True
                )
