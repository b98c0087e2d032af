'''Tabular summaries of election outcomes.

:func:`summary_table` builds the candidate summary of an instant-runoff
round from the candidate round states. The remaining functions flatten
results and trace records into rows of plain values (lists of strings and
numbers) for a presentation layer to display or write out; they carry no
election logic.
'''

import dataclasses
from typing import Any, Iterable, List, Optional, Sequence

WINNER = 'Winner'
ACTIVE = 'Active'
ELIMINATED = 'Eliminated'
NO_VOTES = 'No Votes'

SUMMARY_HEADER = [
    'Candidate', 'Status', 'Votes', 'Elimination Round', 'Elimination Reason',
]
TRACE_HEADER = ['Round', 'Eliminated Candidate', 'Explanation']
PAIRWISE_HEADER = ['Method', 'Winner', 'Ranking']

TIEBREAK_STEP_LABELS = {
    'fewest_second_choices': 'By rank 2',
    'most_last_places': 'By rank Last',
}
TIEBREAK_FAILED_LABELS = {
    'fewest_second_choices': 'Second choice',
    'most_last_places': 'Most last place',
}


@dataclasses.dataclass(frozen=True)
class SummaryRow:
    '''One candidate's line of a runoff summary.

    :param candidate: Name of the candidate.
    :param status: One of ``Winner``, ``Active``, ``Eliminated`` and
        ``No Votes``.
    :param votes: Current votes, or the votes held when eliminated.
    :param elimination_round: Round of elimination, if eliminated.
    :param elimination_reason: Reason of elimination, if eliminated.
    '''
    candidate: str
    status: str
    votes: int
    elimination_round: Optional[int] = None
    elimination_reason: Optional[str] = None


def summary_table(states: Sequence[Any],
                  winner: Optional[str] = None,
                  ) -> List[SummaryRow]:
    '''Summarize candidate round states.

    Candidates still in the race come first, by votes in descending order,
    followed by the eliminated ones, latest elimination first. Equal
    candidates keep their candidate order.

    :param states: Candidate round states in candidate order (objects with
        ``candidate``, ``votes`` and ``eliminated`` attributes, see
        :class:`rankcount.evaluate.runoff.CandidateRoundState`).
    :param winner: Name of the winner of the round, if there is one.
    '''
    def sort_key(i):
        state = states[i]
        if state.eliminated is None:
            return (0, -state.votes, i)
        else:
            return (1, -state.eliminated.round, i)

    rows = []
    for i in sorted(range(len(states)), key=sort_key):
        state = states[i]
        if state.eliminated is not None:
            rows.append(SummaryRow(
                state.candidate,
                ELIMINATED,
                state.eliminated.votes,
                state.eliminated.round,
                state.eliminated.reason,
            ))
        else:
            if state.candidate == winner:
                status = WINNER
            elif state.votes == 0:
                status = NO_VOTES
            else:
                status = ACTIVE
            rows.append(SummaryRow(state.candidate, status, state.votes))
    return rows


def summary_rows(rows: Iterable[SummaryRow]) -> List[List[Any]]:
    '''Flatten a summary into rows, with a header.'''
    return [SUMMARY_HEADER] + [
        [
            row.candidate,
            row.status,
            row.votes,
            _blank(row.elimination_round),
            _blank(row.elimination_reason),
        ]
        for row in rows
    ]


def pairwise_rows(results: Iterable[Any]) -> List[List[Any]]:
    '''Flatten resolver results into one row per method, with a header.

    :param results: :class:`rankcount.evaluate.core.ResolverResult`
        objects.
    '''
    return [PAIRWISE_HEADER] + [
        [
            result.method,
            result.winner if result.winner is not None else '(none)',
            ', '.join(f'{item.candidate} ({item.score})'
                      for item in result.ranked),
        ]
        for result in results
    ]


def trace_rows(records: Iterable[Any]) -> List[List[Any]]:
    '''Flatten runoff trace records into rows of a processing log.

    The layout has three main columns (round, candidate and explanation),
    interleaved with ballot and summary tables.

    :param records: Records from :mod:`rankcount.trace`, in order.
    '''
    rows = [TRACE_HEADER]
    for record in records:
        if record.kind == 'ballots':
            rows.append(['', record.title])
            rows.append(['Voter'] + list(record.candidates))
            for label, ranks in record.ballots:
                rows.append([label] + [_blank(rank) for rank in ranks])
        elif record.kind == 'summary':
            rows.append(['', 'Candidate Summary'])
            rows.extend(summary_rows(record.rows))
        elif record.kind == 'tiebreak':
            label = TIEBREAK_STEP_LABELS.get(record.step, record.step)
            counts = ', '.join(f'{name}: {n}' for name, n in record.counts)
            rows.append(['', '', f'{label}: {counts}'])
            if len(record.survivors) > 1:
                rows.append([
                    '', '',
                    TIEBREAK_FAILED_LABELS.get(record.step, record.step)
                    + ' failed, tie remains: '
                    + ', '.join(record.survivors)
                ])
        elif record.event == 'winner':
            rows.append([record.round, record.candidates[0],
                         f'Wins - {record.reason}'])
        elif record.event == 'eliminated':
            rows.append([
                record.round, record.candidates[0],
                f'Eliminated - {record.reason}, votes are redistributed'
            ])
        else:
            rows.append([
                '', '',
                'Tie remains after all tie-breakers: '
                + ', '.join(record.candidates)
                + '. Manual review required for runoff.'
            ])
    return rows


def _blank(value: Any) -> Any:
    return '' if value is None else value
