import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from src.core.events import (
    ChatEvent, NormalEvent, ActionEvent, SlapEvent, NickchangeEvent,
    JoinEvent, PartEvent, QuitEvent, ModeEvent, TopicEvent, KickEvent
)

logger = logging.getLogger(__name__)

class EventSink(ABC):
    """
    Receiver for events decoded by a line parser.
    One method per event kind plus output() for diagnostics.
    """

    @abstractmethod
    def set_normal(self, time: str, nick: str, line: str):
        pass

    @abstractmethod
    def set_action(self, time: str, nick_performing: str, line: str):
        pass

    @abstractmethod
    def set_slap(self, time: str, nick_performing: str, nick_undergoing: Optional[str]):
        pass

    @abstractmethod
    def set_nickchange(self, time: str, nick_performing: str, nick_undergoing: str):
        pass

    @abstractmethod
    def set_join(self, time: str, nick: str):
        pass

    @abstractmethod
    def set_part(self, time: str, nick: str):
        pass

    @abstractmethod
    def set_quit(self, time: str, nick: str):
        pass

    @abstractmethod
    def set_mode(self, time: str, nick_performing: str, nick_undergoing: str, mode: str):
        pass

    @abstractmethod
    def set_topic(self, time: str, nick: str, line: str):
        pass

    @abstractmethod
    def set_kick(self, time: str, nick_performing: str, nick_undergoing: str, line: str):
        pass

    def output(self, level: str, message: str):
        """Diagnostic hook. Routed to the logging module by default."""
        logger.log(getattr(logging, level.upper(), logging.INFO), message)


class RecordingSink(EventSink):
    """Keeps every event and diagnostic in memory, in arrival order."""

    def __init__(self):
        self.events: List[ChatEvent] = []
        self.diagnostics: List[Tuple[str, str]] = []

    def set_normal(self, time, nick, line):
        self.events.append(NormalEvent(time, nick, line))

    def set_action(self, time, nick_performing, line):
        self.events.append(ActionEvent(time, nick_performing, line))

    def set_slap(self, time, nick_performing, nick_undergoing):
        self.events.append(SlapEvent(time, nick_performing, nick_undergoing))

    def set_nickchange(self, time, nick_performing, nick_undergoing):
        self.events.append(NickchangeEvent(time, nick_performing, nick_undergoing))

    def set_join(self, time, nick):
        self.events.append(JoinEvent(time, nick))

    def set_part(self, time, nick):
        self.events.append(PartEvent(time, nick))

    def set_quit(self, time, nick):
        self.events.append(QuitEvent(time, nick))

    def set_mode(self, time, nick_performing, nick_undergoing, mode):
        self.events.append(ModeEvent(time, nick_performing, nick_undergoing, mode))

    def set_topic(self, time, nick, line):
        self.events.append(TopicEvent(time, nick, line))

    def set_kick(self, time, nick_performing, nick_undergoing, line):
        self.events.append(KickEvent(time, nick_performing, nick_undergoing, line))

    def output(self, level, message):
        self.diagnostics.append((level, message))
        super().output(level, message)

    def clear(self):
        self.events.clear()
        self.diagnostics.clear()
