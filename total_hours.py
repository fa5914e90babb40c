"""Totals the hours per day and overall on a timecard"""

# Copyright (c) 2020 Aubrey Barnard.  This is free software released
# under the MIT License.  See `LICENSE.txt` for details.


from enum import Enum
import os
import pprint
import sys

from barnapy import arguments
from barnapy import files
from barnapy import logging
from barnapy import parse

from timecard import __version__
from timecard import timecard as tc


_divider = '-' * 25

_prompt = 'Paste in timecard data, then <Enter>, then <CTRL-D>'

_empty_message = 'Input empty! ¯\\_(ツ)_/¯'


# Output


def print_divider(file=sys.stdout):
    print(_divider, file=file)


def print_prompt(file=sys.stdout):
    print_divider(file=file)
    print(_prompt, file=file)
    print_divider(file=file)


def print_report(entries, file=sys.stdout):
    """
    Print the hours for each day and the total hours.  Return the total
    number of minutes.
    """
    total_minutes = 0
    print_divider(file=file)
    for kind, value in tc.accumulate(entries):
        if kind == tc.DATE:
            # The day's hours finish the line once they are known
            print(f'{str(value):>5}: ', end='', file=file)
        elif kind == tc.DAY:
            print(tc.format_minutes(value), file=file)
        else:
            total_minutes = value
            print_divider(file=file)
            print('Total:', tc.format_minutes(value), file=file)
            print_divider(file=file)
    return total_minutes


def print_parse_error(error, file=sys.stdout):
    print_divider(file=file)
    print(error, file=file)




# Input


def read_entries(paths=(), input=sys.stdin):
    """
    Read the entries from the given timecard files, in order, or from
    `input` if there are no files.
    """
    logger = logging.getLogger('total_hours')
    if not paths:
        logger.info('Reading standard input')
        return tc.read(input.read())
    entries = []
    for path in paths:
        logger.info('Reading `{}`', path)
        # Keep a lone "\r" inside its line, as for standard input
        with open(path, encoding='utf-8', newline='') as file:
            entries.extend(tc.read(file.read(), path))
    return entries


# Main


def main_api(
        paths=[],
        verbosity=logging.WARNING,
        input=None,
        output=None,
):
    # Get the arguments of this function as a dictionary
    args = locals()
    if input is None:
        input = sys.stdin
    if output is None:
        output = sys.stdout
    # Start logging and log runtime environment
    logging.default_config(level=verbosity)
    logger = logging.getLogger(__name__)
    logger.info('total_hours.py {}', __version__)
    logger.info('Python {}', sys.version.replace('\n', ' '))
    logger.info('argv: {}', sys.argv)
    logger.info('cwd: {}', os.getcwd())
    logger.info('options:\n{}', pprint.pformat(args))
    # Only prompt for input when there is no file to read
    if not paths:
        print_prompt(file=output)
    # Parse everything before reporting anything
    entries = read_entries(paths, input)
    logger.info('Parsed {} entries', len(entries))
    if not entries:
        print(_empty_message, file=output)
        print_divider(file=output)
    else:
        total_minutes = print_report(entries, file=output)
        logger.info('Total minutes: {}', total_minutes)
    logger.info('Done')


# Command line


_usage = """
Usage: {prog} [--verbosity=<level>] [<timecard-file> ...]
       {prog} --help | --version

Totals the hours on the given timecard files, in order, or on the
timecard pasted into standard input if no files are given.
""".strip()

_options = ('help', 'verbosity', 'version')


class CommandLineError(Exception):

    def __init__(self, message, show_usage=True):
        super().__init__(message)
        self.show_usage = show_usage


def print_usage(file=sys.stdout):
    print(_usage.format(prog=os.path.basename(sys.argv[0])), file=file)


def print_version(file=sys.stdout):
    print('total_hours.py', __version__, file=file)


def verbosity_level(values):
    """Return the logging level named by the last `--verbosity`."""
    level = values[-1] if values else None
    if level is None:
        raise CommandLineError('--verbosity: No level given')
    if parse.is_int(level):
        return int(level)
    if level.lower() in logging.levels:
        return logging.levels[level.lower()]
    raise CommandLineError(
        f'--verbosity: Unrecognized level: {level}\n'
        f'    Recognized levels: {" ".join(logging.levels)}')


def timecard_paths(paths):
    """Check that every timecard file can be read before reading any."""
    for path in paths:
        file = files.new(path)
        if not (file.exists() and file.is_readable()):
            raise CommandLineError(
                f'Cannot read timecard: {path!r}', show_usage=False)
    return list(paths)


def main_args(args):
    options, paths = arguments.parse(args)
    unknown = sorted(options.keys() - set(_options))
    if unknown:
        raise CommandLineError(f'Unrecognized option: --{unknown[0]}')
    if 'help' in options:
        print_usage(file=sys.stdout)
    elif 'version' in options:
        print_version(file=sys.stdout)
    else:
        # No paths means the timecard comes from standard input
        kwargs = {'paths': timecard_paths(paths)}
        if 'verbosity' in options:
            kwargs['verbosity'] = verbosity_level(options['verbosity'])
        main_api(**kwargs)


class ExitStatus(Enum):
    ok = 0
    bad_timecard = 1
    bad_command_line = 2


def main_cli():
    try:
        main_args(sys.argv[1:])
    except tc.ParseError as e:
        print_parse_error(e, file=sys.stdout)
        sys.exit(ExitStatus.bad_timecard.value)
    except CommandLineError as e:
        print('Error:', e, file=sys.stderr)
        if e.show_usage:
            print_usage(file=sys.stderr)
        sys.exit(ExitStatus.bad_command_line.value)
    sys.exit(ExitStatus.ok.value)


if __name__ == '__main__':
    main_cli()
