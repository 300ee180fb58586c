import re
from typing import Callable, List, Tuple

from src.core.modes import MalformedModeError, expand_modes
from src.core.sink import EventSink

NICK_SIGILS = '~&@%+!*'

def strip_sigil(nick: str) -> str:
    """Drop a single leading role sigil ("@op" -> "op"). A lone sigil is kept."""
    if len(nick) > 1 and nick[0] in NICK_SIGILS:
        return nick[1:]
    return nick

class WeechatLineParser:
    """
    Parses normalized lines from WeeChat chat logs and forwards the decoded
    events to an EventSink.

    Line         Format
    -----------------------------------------------------------------------
    Normal       NICK MSG
    Action       * NICK MSG
    Nickchange   -- NICK is now known as NICK
    Join         --> NICK (HOST) has joined CHAN
    Part         <-- NICK (HOST) has left CHAN (MSG)
    Quit         <-- NICK (HOST) has quit (MSG)
    Mode         -- Mode CHAN [+o-v NICK NICK] by NICK
    Topic        -- NICK has changed topic for CHAN [from "MSG"] to "MSG"
    Kick         <-- NICK has kicked NICK (MSG)
    -----------------------------------------------------------------------

    Every line starts with "YYYY-MM-DD HH:MM[:SS]"; only the time is kept.
    Nicks can't contain "/" or a channel prefix, so at most one pattern can
    match a line. Rules are tried in the order below for speed.
    """
    PREFIX = r'^\d{4}-\d{2}-\d{2} (?P<time>\d{2}:\d{2}(?::\d{2})?)\s'

    # The nick column of a normal line is never one of the event markers
    NORMAL_PATTERN = re.compile(
        PREFIX + r'(?!(?:-->|<--|--|\*)\s)[~&@%+!*]?(?P<nick>\S+)\s(?P<line>.+)$'
    )
    JOIN_PATTERN = re.compile(
        PREFIX + r'-->\s(?P<nick>\S+) \(\S+\) has joined [#&!+]\S+$'
    )
    QUIT_PATTERN = re.compile(
        PREFIX + r'<--\s(?P<nick>\S+) \(\S+\) has quit \(.*\)$'
    )
    # Only ops (+o) and voices (+v). Extra performers after a comma are ignored.
    MODE_PATTERN = re.compile(
        PREFIX + r'--\sMode [#&!+]\S+ '
        r'\[(?P<modes>[-+][ov]+(?:[-+][ov]+)?) (?P<nicks_undergoing>\S+(?: \S+)*)\]'
        r' by (?P<nick_performing>\S+)(?:, \S+)*$'
    )
    ACTION_PATTERN = re.compile(
        PREFIX + r'\*\s(?P<nick_performing>\S+) '
        r'(?P<line>(?P<slap>(?i:slaps)(?: (?P<nick_undergoing>\S+)(?: .+)?)?)|.+)$'
    )
    NICKCHANGE_PATTERN = re.compile(
        PREFIX + r'--\s(?P<nick_performing>\S+) is now known as (?P<nick_undergoing>\S+)$'
    )
    PART_PATTERN = re.compile(
        PREFIX + r'<--\s(?P<nick>\S+) \(\S+\) has left [#&!+]\S+ \(.*\)$'
    )
    TOPIC_PATTERN = re.compile(
        PREFIX + r'--\s(?P<nick>\S+) has changed topic for [#&!+]\S+'
        r'(?: from "[^"]*")? to "(?P<line>.*)"$'
    )
    KICK_PATTERN = re.compile(
        PREFIX + r'<--\s(?P<line>(?P<nick_undergoing>\S+) has kicked (?P<nick_performing>\S+) \(.*\))$'
    )

    def __init__(self, sink: EventSink):
        self.sink = sink
        self.rules: List[Tuple[re.Pattern, Callable[[re.Match], None]]] = [
            (self.NORMAL_PATTERN, self._on_normal),
            (self.JOIN_PATTERN, self._on_join),
            (self.QUIT_PATTERN, self._on_quit),
            (self.MODE_PATTERN, self._on_mode),
            (self.ACTION_PATTERN, self._on_action),
            (self.NICKCHANGE_PATTERN, self._on_nickchange),
            (self.PART_PATTERN, self._on_part),
            (self.TOPIC_PATTERN, self._on_topic),
            (self.KICK_PATTERN, self._on_kick),
        ]

    def parse_line(self, line: str, line_number: int) -> bool:
        """
        Classify a single normalized line.
        Returns True if a rule accepted the line (even when it emitted nothing).
        """
        reason = None
        for pattern, handler in self.rules:
            match = pattern.match(line)
            if not match:
                continue

            try:
                handler(match)
                return True
            except MalformedModeError as e:
                reason = e
                break

        if line != '':
            message = f"{type(self).__name__}.parse_line(): skipping line {line_number}: '{line}'"
            if reason:
                message += f" ({reason})"
            self.sink.output('debug', message)
        return False

    # --- Rule handlers ---

    def _on_normal(self, m: re.Match):
        # Sigil already dropped by the pattern
        self.sink.set_normal(m['time'], m['nick'], m['line'])

    def _on_join(self, m: re.Match):
        self.sink.set_join(m['time'], strip_sigil(m['nick']))

    def _on_quit(self, m: re.Match):
        self.sink.set_quit(m['time'], strip_sigil(m['nick']))

    def _on_mode(self, m: re.Match):
        # Decode everything first so a bad line emits nothing
        changes = expand_modes(m['modes'], m['nicks_undergoing'].split(' '))
        nick_performing = strip_sigil(m['nick_performing'])

        for change in changes:
            self.sink.set_mode(m['time'], nick_performing, change.target, change.mode)

    def _on_action(self, m: re.Match):
        nick_performing = strip_sigil(m['nick_performing'])

        if m['slap']:
            self.sink.set_slap(m['time'], nick_performing, m['nick_undergoing'] or None)

        self.sink.set_action(m['time'], nick_performing, m['line'])

    def _on_nickchange(self, m: re.Match):
        self.sink.set_nickchange(
            m['time'], strip_sigil(m['nick_performing']), strip_sigil(m['nick_undergoing'])
        )

    def _on_part(self, m: re.Match):
        self.sink.set_part(m['time'], strip_sigil(m['nick']))

    def _on_topic(self, m: re.Match):
        # Empty topics carry no information
        if not m['line']:
            return
        self.sink.set_topic(m['time'], strip_sigil(m['nick']), m['line'])

    def _on_kick(self, m: re.Match):
        self.sink.set_kick(
            m['time'],
            strip_sigil(m['nick_performing']),
            strip_sigil(m['nick_undergoing']),
            m['line']
        )
