from dataclasses import dataclass, asdict
from typing import ClassVar, Optional

@dataclass
class ChatEvent:
    """Base for every event decoded from a transcript line."""
    kind: ClassVar[str] = 'event'

    time: str                     # HH:MM or HH:MM:SS, verbatim

    def to_dict(self) -> dict:
        data = {'kind': self.kind}
        data.update(asdict(self))
        return data

@dataclass
class NormalEvent(ChatEvent):
    kind: ClassVar[str] = 'normal'

    nick: str
    text: str

@dataclass
class ActionEvent(ChatEvent):
    kind: ClassVar[str] = 'action'

    nick_performing: str
    text: str

@dataclass
class SlapEvent(ChatEvent):
    kind: ClassVar[str] = 'slap'

    nick_performing: str
    nick_undergoing: Optional[str] = None  # "* bob slaps" slaps nobody in particular

@dataclass
class NickchangeEvent(ChatEvent):
    kind: ClassVar[str] = 'nickchange'

    nick_performing: str          # Old nick
    nick_undergoing: str          # New nick

@dataclass
class JoinEvent(ChatEvent):
    kind: ClassVar[str] = 'join'

    nick: str

@dataclass
class PartEvent(ChatEvent):
    kind: ClassVar[str] = 'part'

    nick: str

@dataclass
class QuitEvent(ChatEvent):
    kind: ClassVar[str] = 'quit'

    nick: str

@dataclass
class ModeEvent(ChatEvent):
    kind: ClassVar[str] = 'mode'

    nick_performing: str
    nick_undergoing: str
    mode: str                     # Signed flag, e.g. "+o"

@dataclass
class TopicEvent(ChatEvent):
    kind: ClassVar[str] = 'topic'

    nick: str
    text: str

@dataclass
class KickEvent(ChatEvent):
    kind: ClassVar[str] = 'kick'

    nick_performing: str          # Kicker
    nick_undergoing: str          # Kicked
    text: str                     # Full "<kicked> has kicked <kicker> (<reason>)" clause
