r"""
adept command-line options.

Overview
- Option: one fixed-arity flag (e.g. -r/--repo <url>) with defaults and the
  values captured from the command line.
- Match: result of scanning a token stream for one option (values, remaining
  tokens, and a fault when the stream ran out mid-option).
- OptionTable: ordered collection of options; parses a whole token stream and
  hands back the tokens no option claimed (the positional arguments).

Matching rules
- The whole stream is scanned, not only up to the first occurrence.
- On each occurrence the label is dropped, the option becomes bound, previously
  collected values are discarded and exactly `arity` following tokens are taken
  (whatever they look like, even other flags).
- An option given twice keeps the values of its last occurrence.
- If fewer than `arity` tokens follow, the match carries a MalformedOptionError.

Matching never mutates its input; every pass returns a new tuple of remaining tokens.
Committing values to an option is a separate step (Option.bind), which lets the
table keep every option untouched when any of them is malformed.

Quick example:
    >>> table = OptionTable(
    ...     Option("-h", "--help", 0, "Displays this help menu."),
    ...     Option("-r", "--repo", 1, "Current default: %0", default=["maven.google.com"], metavars=["url"]),
    ... )
    >>> table.parse(["-r", "custom.repo", "com.example:1.0"])
    ('com.example:1.0',)
    >>> table["--repo"][0]
    'custom.repo'
"""
import functools
from collections.abc import Iterable
from typing import NamedTuple

from .faults import MalformedOptionError, OptionIndexError, trigger
from .formatting import render
from .utils import Unset, coalesce, mirror


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _strings(cls, name, object, /):
    """
    Internal: validate an iterable of non-empty strings and freeze it into a tuple.
    """
    if isinstance(object, str) or not isinstance(object, Iterable):
        raise TypeError(f"{cls.__name__.lower()} {name!r} must be an iterable of strings")
    object = tuple(object)
    for item in object:
        if not isinstance(item, str):
            raise TypeError(f"{cls.__name__.lower()} {name!r} must only contain strings")
    return object


class Match(NamedTuple):
    """
    Outcome of Option.match().

    - bound: True when the option occurred at least once (or was already bound).
    - values: the values the option holds after the match (defaults if not matched).
    - remaining: the tokens left once the option and its values were removed.
    - fault: None on success, otherwise a MalformedOptionError to be triggered.
    """
    bound: bool
    values: tuple
    remaining: tuple
    fault: MalformedOptionError | None = None


class Option:
    """
    Named, fixed-arity command-line option.

    Parameters
    - short, long: labels matched verbatim against tokens (at least one required).
    - arity: exact number of tokens consumed after the label (>= 0).
    - descr: help template; "%<index>" placeholders are replaced by values.
    - default: values held until the option is matched.
    - metavars: argument labels shown in help as "<label>".

    Read-only properties mirror the backing fields; `values` and `bound` only
    change through bind()/consume() (or OptionTable.parse()).
    """

    short = mirror("short")
    long = mirror("long")
    arity = mirror("arity")
    descr = mirror("descr")
    defaults = mirror("defaults")
    metavars = mirror("metavars")
    values = mirror("values")
    bound = mirror("bound")

    __displayable__ = ("short", "long", "arity", "values", "bound")

    def __init__(self, short=Unset, long=Unset, arity=0, descr=Unset, /, *, default=(), metavars=()):
        for name, label in (("short", short), ("long", long)):
            if not isinstance(label, str | Unset):
                raise TypeError(f"option {name!r} label must be a string")
            if isinstance(label, str) and (label != label.strip() or len(label.split()) > 1):
                raise ValueError(f"option {name!r} label must be a single word")
        if not short and not long:
            raise TypeError("option must specify at least one label")
        if short and short == long:
            raise ValueError("option labels cannot be duplicates")

        if isinstance(arity, bool) or not isinstance(arity, int):
            raise TypeError("option 'arity' must be an integer")
        if arity < 0:
            raise ValueError("option 'arity' cannot be negative")

        if not isinstance(descr, str | Unset):
            raise TypeError("option 'descr' must be a string")

        self._short = coalesce(short, "")
        self._long = coalesce(long, "")
        self._arity = arity
        self._descr = coalesce(descr, "")
        self._defaults = _strings(type(self), "default", default)
        self._metavars = _strings(type(self), "metavars", metavars)
        self._values = self._defaults
        self._bound = False

    @property
    def labels(self):
        """The non-empty labels of this option, short first."""
        return tuple(label for label in (self._short, self._long) if label)

    @property
    def name(self):
        """Preferred label for messages (the long one when available)."""
        return self._long or self._short

    def match(self, tokens, /):
        """
        Scan tokens for this option without changing the option.

        Returns
        - Match: see Match; on a malformed occurrence the fault is set, values and
          remaining describe the state up to the failing label.
        """
        tokens = tuple(tokens)
        labels = self.labels
        remaining = []
        bound = self._bound
        values = self._values

        index = 0
        while index < len(tokens):
            if tokens[index] not in labels:
                remaining.append(tokens[index])
                index += 1
                continue

            bound = True
            available = len(tokens) - index - 1
            if available < self._arity:
                fault = MalformedOptionError(
                    "option %r at %s position expects %d value%s but %s left" % (
                        tokens[index],
                        _ordinal(index + 1),
                        self._arity,
                        "s" * (self._arity != 1),
                        "only %d %s" % (available, "is" if available == 1 else "are") if available else "none are",
                    ),
                    title="malformed option",
                    hint="pass %s right after %r" % (
                        " ".join("<%s>" % label for label in self._metavars) or "%d value(s)" % self._arity,
                        tokens[index],
                    ),
                    option=self,
                    token=tokens[index],
                    index=index + 1,
                )
                return Match(bound, (), tuple(remaining) + tokens[index + 1:], fault)

            values = tokens[index + 1:index + 1 + self._arity]
            index += 1 + self._arity

        return Match(bound, values, tuple(remaining))

    def bind(self, match, /):
        """
        Commit a successful match (values and bound state) to this option.
        """
        if not isinstance(match, Match):
            raise TypeError("bind() argument must be a match")
        if match.fault is not None:
            raise ValueError("bind() cannot commit a faulty match")
        self._bound = self._bound or match.bound
        self._values = tuple(match.values)

    def consume(self, tokens, /, **options):
        """
        Match and commit in one step.

        Returns the remaining tokens. A malformed occurrence is surfaced through
        trigger(fault, **options) and leaves the option unchanged.
        """
        match = self.match(tokens)
        if match.fault is not None:
            trigger(match.fault, **options)
            return match.remaining
        self.bind(match)
        return match.remaining

    def value(self, index, /):
        """
        Return the bound-or-default value at index (strict bounds).

        Raises
        - OptionIndexError (an IndexError) when index >= len(values) or index < 0.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError("option indices must be integers")
        if not 0 <= index < len(self._values):
            raise OptionIndexError(
                "attempt to access element %d of option %r, which holds %d value%s" % (
                    index, self.name, len(self._values), "s" * (len(self._values) != 1)
                ),
                title="option index out of range",
                option=self,
                index=index,
            )
        return self._values[index]

    __getitem__ = value

    def help(self, start_indent=0, text_indent=25, wrap_column=100, /):
        """
        Formatted help text for this option (see adept.formatting.render).
        """
        return render(self, start_indent, text_indent, wrap_column)

    def __bool__(self):
        return self._bound

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class OptionTable:
    """
    Ordered collection of options (declaration order is also help order).

    Options are reachable by position (iteration) or by any of their labels
    (table["-r"], table["--repo"]).
    """

    def __init__(self, *options):
        self._options = []
        self._labels = {}
        for option in options:
            self.add(option)

    def add(self, option, /):
        """
        Register an option at the end of the table.

        Raises
        - TypeError: option is not an Option.
        - ValueError: one of its labels is already registered.
        """
        if not isinstance(option, Option):
            raise TypeError("add() argument must be an option")
        for label in option.labels:
            if label in self._labels:
                raise ValueError(f"option label {label!r} is already in use")
        self._options.append(option)
        self._labels.update(dict.fromkeys(option.labels, option))
        return option

    def parse(self, tokens, /, **options):
        """
        Parse a token stream against every option.

        Each option scans the whole stream left over by the previous one (one pass
        per option). Values are committed only when every option matched cleanly;
        otherwise the first fault is surfaced via trigger(fault, **options) and no
        option changes.

        Returns
        - tuple[str, ...]: tokens no option claimed, in their original order.
        """
        remaining = tuple(tokens)
        for token in remaining:
            if not isinstance(token, str):
                raise TypeError("parse() tokens must be strings")

        matches = []
        for option in self._options:
            match = option.match(remaining)
            if match.fault is not None:
                trigger(match.fault, **options)
                return tuple(tokens)
            matches.append((option, match))
            remaining = match.remaining

        for option, match in matches:
            option.bind(match)
        return remaining

    def help(self, start_indent=0, text_indent=25, wrap_column=100, /):
        """
        Help text of every option, one rendered block per option.
        """
        return [option.help(start_indent, text_indent, wrap_column) for option in self._options]

    def __getitem__(self, label):
        return self._labels[label]

    def __contains__(self, label):
        return label in self._labels

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return "option-table(%s)" % ", ".join(option.name for option in self._options)


__all__ = (
    "Match",
    "Option",
    "OptionTable",
)
