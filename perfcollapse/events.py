import logging

logger = logging.getLogger(__name__)


class EventFilter:
    """Lets through records of one event type only.

    Merging different event types, such as instructions and cycles,
    produces misleading counts, so unless an event is given explicitly
    the first event type seen is the one kept for the whole run.
    """

    def __init__(self, event=None):
        self.event = event or None
        self.defaulted = False
        self.warned = False

    def accept(self, event):
        if self.event is None:
            self.event = event
            self.defaulted = True
            return True
        if event == self.event:
            return True
        # only tell when we defaulted and there are several event types
        if self.defaulted and not self.warned:
            logger.warning('Filtering for events of type: %s', self.event)
            self.warned = True
        return False
