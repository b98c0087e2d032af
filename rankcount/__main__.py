"""A commandline tool for quick evaluation of ranked-ballot elections.

Reads a form response table (CSV with a timestamp column, a voter column and
one rank column per candidate) and evaluates it by instant runoff and the
Condorcet-family methods.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import List, Optional, Union

import rankcount.io.responses
import rankcount.report
import rankcount.system
from rankcount.evaluate.core import ResolverResult
from rankcount.evaluate.runoff import RunoffResult
from rankcount.trace import ListTrace

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the response table from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the response table from standard input',
)
argparser.add_argument(
    '-m', '--method',
    nargs='*',
    help=(
        'evaluation methods to use; available: '
        + ', '.join(rankcount.system.METHODS) + '; default (None) uses all'
    ),
)
argparser.add_argument(
    '--no-timestamp',
    action='store_true',
    help='the response table has no leading timestamp column',
)
argparser.add_argument(
    '-t', '--show-trace',
    action='store_true',
    help='show the round-by-round processing log of the instant runoff',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all evaluator log messages and other info',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any evaluator log messages or other info',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         method: Optional[List[str]] = None,
         no_timestamp: bool = False,
         show_trace: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    data = rankcount.io.responses.load(
        input_file, has_timestamp=not no_timestamp
    )
    if not data.ballots:
        warnings.warn('empty response table: cannot evaluate, terminating')
        return
    methods = select_methods(method)
    election = rankcount.system.Election(data.candidates, data.ballots)
    print(f'Received {len(election.ballots)} ballots'
          f' for {len(election.candidates)} candidates')
    trace = ListTrace()
    results = election.evaluate_all(methods, trace=trace)
    for name, result in results.items():
        print()
        show_result(name, result)
    if show_trace and rankcount.system.RUNOFF_METHOD in results:
        print()
        show_rows(rankcount.report.trace_rows(trace))


def select_methods(selected: Optional[List[str]] = None) -> List[str]:
    """Validate the selected method names; all methods if none selected."""
    if not selected:
        return list(rankcount.system.METHODS)
    unknown = [name for name in selected
               if name not in rankcount.system.METHODS]
    if unknown:
        raise ValueError(f'unknown method {unknown[0]}, available: '
                         + ', '.join(rankcount.system.METHODS))
    return selected


def show_result(name: str,
                result: Union[RunoffResult, ResolverResult],
                ) -> None:
    """Show the full result of a single method."""
    print(f'=== {name} ===')
    if result.winner is not None:
        print(f'Winner: {result.winner}')
    elif isinstance(result, RunoffResult):
        print('Tie after all eliminations: ' + ', '.join(result.tie))
    else:
        print('No winner (tie or cycle)')
    if isinstance(result, RunoffResult):
        show_rows(rankcount.report.summary_rows(result.summary))
    else:
        show_rows(rankcount.report.pairwise_rows([result])[1:])


def show_rows(rows: List[list]) -> None:
    widths = {}
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths.get(i, 0), len(str(cell)))
    for row in rows:
        print('  '.join(
            str(cell).ljust(widths[i]) for i, cell in enumerate(row)
        ).rstrip())


def run() -> None:
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))


if __name__ == '__main__':
    run()
