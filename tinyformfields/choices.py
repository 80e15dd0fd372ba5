"""Choice string parsing.

Choices are written in a schema as plain strings. A choice may carry a display
label distinct from its submitted value by separating the two with a pipe:

    >>> parse_choice("Maybe | I might want to go!")
    Choice(value='Maybe', label='I might want to go!')
    >>> parse_choice("Red")
    Choice(value='Red', label='Red')

Only the first pipe splits; anything after it belongs to the label.
"""

from typing import Iterable, List, Tuple

from tinyformfields.types import Choice

SEPARATOR = "|"


def parse_choice(raw: str) -> Choice:
    """Split a raw choice string into its value and label.

    Any string is a valid choice specification, so this never raises.
    """
    value, sep, label = raw.partition(SEPARATOR)
    if not sep:
        value = raw.strip()
        return Choice(value=value, label=value)
    return Choice(value=value.strip(), label=label.strip())


def parse_choices(raws: Iterable[str]) -> Tuple[Choice, ...]:
    """Parse every raw choice string, keeping schema order."""
    return tuple(parse_choice(raw) for raw in raws)


def choice_values(choices: Iterable[Choice]) -> List[str]:
    """Return the submittable values of the given choices in order."""
    return [choice.value for choice in choices]


__all__ = [
    "SEPARATOR",
    "parse_choice",
    "parse_choices",
    "choice_values",
]
