"""Form response tables in CSV.

A response table has a header row followed by one row per submitted ballot,
in submission order::

    Timestamp,Name,Alice,Bob,Carol
    2024-05-01 10:00:00,Ann,1,2,3
    2024-05-01 10:02:13,Ben,2,,1

The first column holds the submission timestamp (it can be omitted with
``has_timestamp=False``; the timestamp is not used, the row order is), the
next one the voter identifier, and each remaining column the voter's rank
for one candidate. Candidate names are taken from the header; grid question
headers of the form ``Rank the candidates below [Alice]`` are reduced to the
bracketed name.

Rank cells are passed on unchanged; normalization
(:func:`rankcount.ballot.normalize_ballots`) decides which of them are
valid ranks.
"""

import io
import re
import csv
from typing import Iterable, List

import rankcount.io.core
from rankcount.ballot import RawBallot
from rankcount.io.core import ElectionData
from rankcount.report import summary_rows
from rankcount.evaluate.runoff import RunoffResult

GRID_HEADER_RE = re.compile(r'\[(?P<name>[^\]]+)\]\s*$')


class ResponseParseError(rankcount.io.core.ParseError):
    pass


def load_lines(lines: Iterable[str],
               has_timestamp: bool = True,
               delimiter: str = ',',
               ) -> ElectionData:
    reader = csv.reader(lines, delimiter=delimiter)
    try:
        header = next(reader)
    except StopIteration as e:
        raise ResponseParseError('empty response table') from e
    voter_col = 1 if has_timestamp else 0
    first_rank_col = voter_col + 1
    names = _candidate_names(header[first_rank_col:])
    if not names:
        raise ResponseParseError(
            f'no candidate columns in response table header: {header!r}'
        )
    ballots = []
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue    # blank line
        voter_id = row[voter_col].strip() if len(row) > voter_col else ''
        ballots.append(RawBallot(
            voter_id,
            tuple(row[first_rank_col:first_rank_col + len(names)]),
        ))
    return ElectionData(candidates=names, ballots=ballots)


load, loads = rankcount.io.core.loaders(load_lines)


def dump_summary_lines(result: RunoffResult,
                       delimiter: str = ',',
                       ) -> Iterable[str]:
    for row in summary_rows(result.summary):
        buffer = io.StringIO()
        csv.writer(buffer, delimiter=delimiter, lineterminator='\n') \
            .writerow(row)
        yield buffer.getvalue()


dump_summary, dumps_summary = rankcount.io.core.dumpers(dump_summary_lines)


def _candidate_names(header_cells: List[str]) -> List[str]:
    names = []
    for cell in header_cells:
        match = GRID_HEADER_RE.search(cell)
        names.append(match.group('name').strip() if match else cell.strip())
    # spreadsheet exports may pad the header with empty columns
    while names and not names[-1]:
        names.pop()
    return names
