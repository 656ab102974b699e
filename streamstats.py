"""Streamstats: statistics of a list of numbers piped in on stdin.

This tool is meant for use with large files, so it computes its
statistics in a streaming fashion. Quartiles are approximate, but they
should be good enough on large datasets to get an idea of the data.
"""

import argparse
import logging
import re
import sys
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np
from rich.console import Console
from rich.live import Live
from rich.text import Text

from summary import Snapshot, Summary, to_json, to_text

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

# plain ASCII decimal literal, no whitespace or digit separators
NUMBER = re.compile(r'[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')


class ParseError(ValueError):
    """An input line is not a finite number of the configured precision."""

    def __init__(self, lineno: int, text: str):
        super().__init__(f"Could not parse number on line {lineno}: '{text}'")
        self.lineno = lineno
        self.text = text


class LiveView:
    """Running statistics redrawn in place on a terminal console.

    Redraws happen only when asked for, on the caller's thread. The region
    is transient: it is erased when the view is cleared.
    """

    def __init__(self, console: Console):
        self.console = console
        self.live: Optional[Live] = None

    def show(self, snapshot: Snapshot) -> None:
        self.live = Live(Text(to_text(snapshot)), console=self.console,
                         auto_refresh=False, transient=True)
        self.live.start(refresh=True)

    def redraw(self, snapshot: Snapshot) -> None:
        if self.live is None:
            self.show(snapshot)
        else:
            self.live.update(Text(to_text(snapshot)), refresh=True)

    def clear(self) -> None:
        if self.live is not None:
            self.live.stop()
            self.live = None


class NullView:
    def show(self, snapshot: Snapshot) -> None:
        pass

    def redraw(self, snapshot: Snapshot) -> None:
        pass

    def clear(self) -> None:
        pass


def parse_value(lineno: int, line: str, dtype):
    text = line.rstrip('\r\n')
    if not NUMBER.fullmatch(text):
        raise ParseError(lineno, text)
    try:
        with np.errstate(over='ignore'):
            value = dtype(text)
    except ValueError:
        raise ParseError(lineno, text) from None
    if not np.isfinite(value):
        raise ParseError(lineno, text)
    return value


def read_values(lines: Iterable[str], dtype) -> Iterator[Tuple[int, object]]:
    """Yield ``(lineno, value)`` pairs, numbering lines from 0."""
    for lineno, line in enumerate(lines):
        yield lineno, parse_value(lineno, line, dtype)


def compute_stats(
    lines: Iterable[str],
    dtype=np.float32,
    polling: int = 1000,
    skip_header: bool = False,
    view=None,
) -> Summary:
    """Fold every line of ``lines`` into a new Summary.

    ``view`` is redrawn every ``polling`` observations and cleared at the
    end of the stream. A ParseError aborts the whole run.
    """
    if polling < 1:
        raise ValueError(f'polling interval must be positive, got {polling}')
    view = view or NullView()
    lines = iter(lines)
    if skip_header:
        # before the view is drawn, so the record lands above it
        header = next(lines, None)
        logger.info('skipped header %r', header)
    summary = Summary(dtype)
    view.show(summary.snapshot())
    try:
        for lineno, value in read_values(lines, dtype):
            if lineno % polling == 0:
                logger.debug('redraw at line %d', lineno)
                view.redraw(summary.snapshot())
            summary.update(value)
    finally:
        view.clear()
    logger.info('processed %d observations', summary.count)
    return summary


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f'must be a positive integer: {text}')
    return value


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='streamstats',
        description='Compute statistics from a list of numbers by piping in stdin.',
    )
    parser.add_argument('-u', '--use-doubles', action='store_true',
                        help='use 64 bit instead of 32 bit floats')
    parser.add_argument('-j', '--json', action='store_true',
                        help='print results as parsable json')
    parser.add_argument('-n', '--hide-running', action='store_true',
                        help='hide running values of the statistics')
    parser.add_argument('-p', '--polling', type=positive_int, default=1000,
                        help='observations between redraws of the running values')
    parser.add_argument('-s', '--skip-header', action='store_true',
                        help='skip the first line, e.g. the header of a csv file')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log progress to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        format='%(asctime)s %(module)s %(levelname)s %(message)s',
        level=logging.INFO if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )
    dtype = np.float64 if args.use_doubles else np.float32
    logger.info('precision: %s', np.dtype(dtype).name)
    view = NullView() if args.hide_running else LiveView(Console(file=sys.stderr))

    try:
        summary = compute_stats(sys.stdin, dtype, args.polling, args.skip_header, view)
    except ParseError as e:
        logger.error('%s', e)
        return 1

    snapshot = summary.snapshot()
    if args.json:
        print(to_json(snapshot))
    else:
        print(to_text(snapshot))
    return 0


if __name__ == '__main__':
    sys.exit(main())
