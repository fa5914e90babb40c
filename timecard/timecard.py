"""
Library for reading a timecard and totaling its hours.


Timecards
---------

A timecard is a quick, hand-written record of when work happened.  It
is a sequence of lines, each of which is a date, a time range, or
blank.  A date starts a new day, and the time ranges that follow it are
the intervals worked on that day.  For example, the following timecard
records two days of work.

```
1/3
9:00-11:30
12:15-4:45

1/4
8:45 - 12:00
```

Dates are written as month and day separated by a slash.  Times are
written as hours and minutes on a 12-hour clock, and a time range is
two times separated by a dash.  Spaces are allowed around the slash and
the dash.  There is no AM or PM, so a time range that ends at a smaller
clock time than it starts (such as "11:30-1:15") is taken to have
crossed noon or midnight.  Consequently, a single time range can cover
at most 12 hours.

Reading a timecard produces a sequence of entries (`Date` and
`TimeRange` objects) in the order they appear.  Totaling the entries
produces the hours worked on each day and in total.


Grammar
-------

```
<line> ::=
    <whitespace>* (<date> | <time-range> | "") <whitespace>*

# Month and day.  Month is in [1, 12] and day is in [1, 31] for every
# month.
<date> ::=
    <digit>{1,2} <whitespace>* "/" <whitespace>* <digit>{1,2}

# Hours and minutes.  Hours are in [1, 12] and minutes are in [0, 59].
<time> ::=
    <digit>{1,2} ":" <digit>{1,2}

<time-range> ::=
    <time> <whitespace>* "-" <whitespace>* <time>
```

A line that is not blank and is neither a date nor a time range is an
error, as is a date or time with a field out of range.  Errors are
fatal: reading stops at the first one.
"""


# Copyright (c) 2020 Aubrey Barnard.
#
# This is free software released under the MIT License
# (https://choosealicense.com/licenses/mit/).


import re

from barnapy import logging


# Errors


class ParseError(Exception):

    def __init__(
            self,
            filename=None,
            line=None,
            text=None,
            message=None,
    ):
        self.filename = filename
        self.line = line
        self.text = text
        self.message = message

    def __str__(self):
        pieces = []
        if self.filename is not None:
            pieces.append(f'{self.filename}: ')
        if self.line is not None:
            pieces.append(f'Line {self.line}: ')
        if self.text is not None:
            pieces.append(f'"{self.text}": ')
        pieces.append(self.message
                      if self.message is not None
                      else 'Parse error')
        return ''.join(pieces)


# Values


class Value:

    def _fields(self):
        raise NotImplementedError()

    def __eq__(self, other):
        return (type(self) is type(other)
                and self._fields() == other._fields())

    def __hash__(self):
        return hash((type(self).__name__, self._fields()))

    def __repr__(self):
        return '{}({})'.format(
            type(self).__name__,
            ', '.join(repr(f) for f in self._fields()))


class Date(Value):
    """A day marker: month in [1, 12] and day in [1, 31]."""

    pattern = re.compile(r'(\d{1,2})\s*/\s*(\d{1,2})')

    def __init__(self, month, day):
        if not (1 <= month <= 12 and 1 <= day <= 31):
            raise ValueError(f'invalid date "{month}/{day}"')
        self._month = month
        self._day = day

    @property
    def month(self):
        return self._month

    @property
    def day(self):
        return self._day

    def _fields(self):
        return (self._month, self._day)

    def __str__(self):
        return f'{self._month}/{self._day}'

    @staticmethod
    def from_match(match):
        return Date(*(int(g) for g in match.group(1, 2)))


class Time(Value):
    """A time on a 12-hour clock with no AM or PM."""

    minutes_per_cycle = 12 * 60

    def __init__(self, hours, minutes):
        if not (1 <= hours <= 12 and 0 <= minutes <= 59):
            raise ValueError(f'invalid time "{hours}:{minutes}"')
        self._hours = hours
        self._minutes = minutes

    @property
    def hours(self):
        return self._hours

    @property
    def minutes(self):
        return self._minutes

    def _fields(self):
        return (self._hours, self._minutes)

    def __str__(self):
        return f'{self._hours}:{self._minutes:02}'

    def in_minutes(self):
        """
        Return the number of minutes since the start of the 12-hour
        cycle, where 12:00 is the start.

        12:00 -> 0, 12:59 -> 59, 1:00 -> 60, 11:59 -> 719
        """
        if self._hours == 12:
            return self._minutes
        return self._hours * 60 + self._minutes


class TimeRange(Value):
    """An interval worked, e.g. 1:15-2:45."""

    pattern = re.compile(
        r'(\d{1,2}):(\d{1,2})\s*-\s*(\d{1,2}):(\d{1,2})')

    def __init__(self, start_hours, start_minutes, end_hours, end_minutes):
        # Start is validated first so its error is the one reported
        self._start = Time(start_hours, start_minutes)
        self._end = Time(end_hours, end_minutes)

    @property
    def start(self):
        return self._start

    @property
    def end(self):
        return self._end

    def _fields(self):
        return (self._start, self._end)

    def __repr__(self):
        return 'TimeRange({}, {}, {}, {})'.format(
            self._start.hours, self._start.minutes,
            self._end.hours, self._end.minutes)

    def __str__(self):
        return f'{self._start}-{self._end}'

    def minutes(self):
        """
        Return the number of minutes between the start and the end.

        If the end is earlier on the clock than the start, the range is
        taken to have rolled over the 12-hour clock (e.g. 12:45-1:15 is
        30 minutes).  Equal start and end is 0 minutes, not 12 hours.
        """
        beg = self._start.in_minutes()
        end = self._end.in_minutes()
        if beg < end:
            return end - beg
        elif beg > end:
            return (Time.minutes_per_cycle - beg) + end
        else:
            return 0

    @staticmethod
    def from_match(match):
        return TimeRange(*(int(g) for g in match.group(1, 2, 3, 4)))


# Parsing


_blank_pattern = re.compile('')


class LineClassifier:
    """
    Classifies each line of input by the first of a sequence of patterns
    that matches the whole (stripped) line and constructs an entry from
    the match.

    Each pattern is paired with a constructor that takes the match and
    returns an entry.  A constructor of `None` accepts the line without
    producing an entry.  A constructor that raises `ValueError` makes
    the line an error.  Lines that match no pattern are handled by the
    no match action.
    """

    class NoMatchAction:

        @staticmethod
        def raise_error(text, filename, line):
            raise ParseError(filename, line, text,
                             "Doesn't look like date or time range")

    def __init__(
            self,
            *pattern_constructor_pairs,
            no_match=NoMatchAction.raise_error,
    ):
        self._patterns = list(pattern_constructor_pairs)
        if not callable(no_match):
            raise TypeError('`no_match` is not a callable: '
                            f'{no_match!r}')
        self._no_match = no_match

    def classify(self, text, filename=None, line=None):
        """
        Return the entry for the given line, or `None` if the line
        produces no entry.  Raise `ParseError` if the line is invalid.
        """
        text = text.strip()
        for pattern, constructor in self._patterns:
            match = pattern.fullmatch(text)
            if match is None:
                continue
            if constructor is None:
                return None
            try:
                return constructor(match)
            except ValueError as e:
                raise ParseError(filename, line, text, str(e)) from e
        return self._no_match(text, filename, line)

    def entries(self, file, filename=None):
        """
        Generate the entries in the given file, which is a string or an
        iterable of lines.
        """
        logger = logging.getLogger('timecard')
        # Make sure `file` is an iterable of strings.  Only "\n" ends a
        # line; a trailing "\r" is stripped with the other whitespace.
        if isinstance(file, str):
            file = file.split('\n')
        n_lines = 0
        n_entries = 0
        for text in file:
            n_lines += 1
            entry = self.classify(text, filename, n_lines)
            if entry is not None:
                n_entries += 1
                yield entry
        logger.debug('Read {} lines, {} entries from {}',
                      n_lines, n_entries,
                      filename if filename is not None else '<input>')


_classifier = LineClassifier(
    (Date.pattern, Date.from_match),
    (TimeRange.pattern, TimeRange.from_match),
    (_blank_pattern, None),
)


def entries(file, filename=None):
    return _classifier.entries(file, filename)


def read(file, filename=None):
    """
    Read all the entries in the given file.

    Every line is parsed before anything is returned, so a `ParseError`
    means no entries at all.
    """
    return list(entries(file, filename))


# Totaling


DATE = 'date'
DAY = 'day'
TOTAL = 'total'


def accumulate(entries):
    """
    Generate report events for the given entries.

    Events are `(kind, value)` pairs in report order:

    * `(DATE, date)` for each date
    * `(DAY, minutes)` when a day with recorded minutes ends, which is
      at the next date or at the end of the entries
    * `(TOTAL, minutes)` once, last

    Days with no recorded minutes produce no `DAY` event.  Time ranges
    before the first date count towards an unlabeled day.
    """
    day_minutes = 0
    total_minutes = 0
    for entry in entries:
        if isinstance(entry, Date):
            if day_minutes > 0:
                yield DAY, day_minutes
                total_minutes += day_minutes
                day_minutes = 0
            yield DATE, entry
        elif isinstance(entry, TimeRange):
            day_minutes += entry.minutes()
        else:
            raise TypeError(f'Not a timecard entry: {entry!r}')
    # Finish the last day, which has no following date
    if day_minutes > 0:
        yield DAY, day_minutes
        total_minutes += day_minutes
    yield TOTAL, total_minutes


# Formatting


def format_minutes(minutes):
    """Format a number of minutes as hours, e.g. 90 -> '1.50 hrs'."""
    return f'{minutes / 60:.2f} hrs'
