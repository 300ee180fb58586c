from typing import List, NamedTuple, Sequence

MODE_SIGNS = '+-'

class MalformedModeError(ValueError):
    """Raised when a mode flag string can't be paired with its targets."""


class ModeChange(NamedTuple):
    sign: str                     # '+' or '-'
    letter: str                   # 'o', 'v', ...
    target: str                   # Nick undergoing the change

    @property
    def mode(self) -> str:
        return self.sign + self.letter


def expand_modes(flags: str, targets: Sequence[str]) -> List[ModeChange]:
    """
    Expand a compact flag string such as "+o-v" against its target nicks.

    A sign applies to every letter that follows it until the next sign,
    and each letter consumes the next target in order. The whole string
    is decoded before anything is returned, so a malformed string never
    yields a partial result.

    Raises:
        MalformedModeError: flags don't start with a sign, or there are
            more letters than targets.
    """
    if not flags or flags[0] not in MODE_SIGNS:
        raise MalformedModeError(f"mode string must start with a sign: '{flags}'")

    changes = []
    sign = flags[0]

    for char in flags:
        if char in MODE_SIGNS:
            sign = char
            continue

        if len(changes) >= len(targets):
            raise MalformedModeError(
                f"mode string '{flags}' has more letters than targets ({len(targets)})"
            )

        changes.append(ModeChange(sign, char, targets[len(changes)]))

    return changes
