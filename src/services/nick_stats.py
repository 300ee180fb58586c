import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from src.core.parser import strip_sigil
from src.core.sink import EventSink

logger = logging.getLogger(__name__)

COUNTERS = (
    'lines', 'actions', 'slaps_given', 'slaps_received',
    'joins', 'parts', 'quits', 'kicks_given', 'kicks_received',
    'ops_given', 'ops_taken', 'voices_given', 'voices_taken',
    'topics', 'nickchanges',
)

# Signed mode -> counter credited to the performing nick
MODE_COUNTERS = {
    '+o': 'ops_given',
    '-o': 'ops_taken',
    '+v': 'voices_given',
    '-v': 'voices_taken',
}

class NickStatsSink(EventSink):
    """
    Accumulates per-nick activity counters from parsed events.
    Nicks are matched case-insensitively and reported under the
    spelling they were first seen with.
    """

    def __init__(self):
        self.counts: Dict[str, Dict[str, int]] = defaultdict(lambda: dict.fromkeys(COUNTERS, 0))
        self.display_names: Dict[str, str] = {}
        self.last_topic: Optional[Tuple[str, str, str]] = None  # (time, nick, topic)
        self.skipped_lines = 0

    def _bump(self, nick: Optional[str], counter: str):
        if not nick:
            return
        key = nick.lower()
        self.display_names.setdefault(key, nick)
        self.counts[key][counter] += 1

    def set_normal(self, time, nick, line):
        self._bump(nick, 'lines')

    def set_action(self, time, nick_performing, line):
        self._bump(nick_performing, 'actions')

    def set_slap(self, time, nick_performing, nick_undergoing):
        self._bump(nick_performing, 'slaps_given')
        # The parser passes the slap target verbatim
        if nick_undergoing:
            self._bump(strip_sigil(nick_undergoing), 'slaps_received')

    def set_nickchange(self, time, nick_performing, nick_undergoing):
        self._bump(nick_performing, 'nickchanges')

    def set_join(self, time, nick):
        self._bump(nick, 'joins')

    def set_part(self, time, nick):
        self._bump(nick, 'parts')

    def set_quit(self, time, nick):
        self._bump(nick, 'quits')

    def set_mode(self, time, nick_performing, nick_undergoing, mode):
        counter = MODE_COUNTERS.get(mode)
        if counter is None:
            logger.debug(f"Ignoring mode {mode} on {nick_undergoing}")
            return
        self._bump(nick_performing, counter)

    def set_topic(self, time, nick, line):
        self._bump(nick, 'topics')
        self.last_topic = (time, nick, line)

    def set_kick(self, time, nick_performing, nick_undergoing, line):
        self._bump(nick_performing, 'kicks_given')
        self._bump(nick_undergoing, 'kicks_received')

    def output(self, level, message):
        self.skipped_lines += 1
        super().output(level, message)

    def top(self, n: int = 10, key: str = 'lines') -> List[Tuple[str, int]]:
        """Return the n nicks with the highest value for a counter."""
        if key not in COUNTERS:
            raise KeyError(f"Unknown counter: {key}")

        ranked = sorted(
            ((self.display_names[k], c[key]) for k, c in self.counts.items() if c[key] > 0),
            key=lambda x: (-x[1], x[0].lower())
        )
        return ranked[:n]

    def as_dict(self) -> dict:
        return {
            'nicks': {self.display_names[k]: dict(c) for k, c in self.counts.items()},
            'last_topic': list(self.last_topic) if self.last_topic else None,
            'skipped_lines': self.skipped_lines,
        }
