import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import rankcount.report
from rankcount.ballot import RawBallot
from rankcount.evaluate.runoff import CandidateRoundState, Elimination
from rankcount.report import SummaryRow
from rankcount.system import Election
from rankcount.trace import ListTrace


def run_traced(candidates, rows):
    election = Election(candidates, [
        RawBallot(f'v{i}', tuple(row)) for i, row in enumerate(rows)
    ])
    trace = ListTrace()
    return election.run_runoff(trace=trace), trace


def test_summary_table_order():
    states = [
        CandidateRoundState('A', 0, Elimination(1, 'fewest votes', 1)),
        CandidateRoundState('B', 3),
        CandidateRoundState('C', 0, Elimination(2, 'fewest votes', 2)),
        CandidateRoundState('D', 5),
        CandidateRoundState('E', 3),
        CandidateRoundState('F', 0),
    ]
    assert rankcount.report.summary_table(states, winner='D') == [
        SummaryRow('D', 'Winner', 5),
        SummaryRow('B', 'Active', 3),
        SummaryRow('E', 'Active', 3),
        SummaryRow('F', 'No Votes', 0),
        SummaryRow('C', 'Eliminated', 2, 2, 'fewest votes'),
        SummaryRow('A', 'Eliminated', 1, 1, 'fewest votes'),
    ]


def test_summary_rows():
    rows = rankcount.report.summary_rows([
        SummaryRow('B', 'Winner', 4),
        SummaryRow('C', 'Eliminated', 1, 1, 'fewest votes'),
    ])
    assert rows == [
        rankcount.report.SUMMARY_HEADER,
        ['B', 'Winner', 4, '', ''],
        ['C', 'Eliminated', 1, 1, 'fewest votes'],
    ]


def test_pairwise_rows():
    election = Election(['A', 'B'], [
        RawBallot('1', (1, 2)), RawBallot('2', (1, 2)), RawBallot('3', (2, 1)),
    ])
    rows = rankcount.report.pairwise_rows([
        election.run_pairwise('condorcet'),
        election.run_pairwise('minimax'),
    ])
    assert rows == [
        ['Method', 'Winner', 'Ranking'],
        ['condorcet', 'A', 'A (1), B (0)'],
        ['minimax', 'A', 'A (1), B (2)'],
    ]


def test_pairwise_rows_no_winner():
    election = Election(['A', 'B'], [
        RawBallot('1', (1, 2)), RawBallot('2', (2, 1)),
    ])
    rows = rankcount.report.pairwise_rows([election.run_pairwise('schulze')])
    assert rows[1][:2] == ['schulze', '(none)']


def test_trace_rows():
    result, trace = run_traced(['Alice', 'Bob', 'Carol'], [
        [1, 2, 3], [1, 2, 3], [2, 1, 3], [2, 1, 3], [3, 1, 2], [3, 2, 1],
    ])
    rows = rankcount.report.trace_rows(trace)
    assert rows[0] == rankcount.report.TRACE_HEADER
    assert rows[1] == ['', 'Initial ballots']
    assert rows[2] == ['Voter', 'Alice', 'Bob', 'Carol']
    assert rows[3] == ['Voter 1', 1, 2, 3]
    assert rows[9] == ['', 'Candidate Summary']
    assert rows[11] == ['Bob', 'Active', 3, '', '']
    assert [
        1, 'Carol', 'Eliminated - fewest votes, votes are redistributed'
    ] in rows
    assert ['', 'Redistributed ballots in round 2'] in rows
    assert ['Voter 6', 2, 1] in rows
    assert ['Carol', 'Eliminated', 1, 1, 'fewest votes'] in rows
    assert rows[-1] == [2, 'Bob', 'Wins - more than 50% of the votes']


def test_trace_rows_tiebreak():
    result, trace = run_traced(['Alice', 'Bob', 'Carol', 'Dave'], [
        [1, 2, 3, 4], [2, 1, 3, 4], [3, 2, 1, 4],
        [4, 3, 2, 1], [4, 1, 2, 3], [1, 4, 3, 2],
    ])
    rows = rankcount.report.trace_rows(trace)
    assert ['', '', 'By rank 2: Carol: 2, Dave: 1'] in rows
    start = rows.index(['', '', 'By rank 2: Bob: 2, Carol: 2'])
    assert rows[start + 1] == [
        '', '', 'Second choice failed, tie remains: Bob, Carol'
    ]
    assert rows[start + 2] == ['', '', 'By rank Last: Bob: 1, Carol: 0']
    assert rows[start + 3] == [
        3, 'Bob',
        'Eliminated - most last-place votes, votes are redistributed',
    ]


def test_trace_rows_unresolved():
    result, trace = run_traced(['Alice', 'Bob', 'Carol'], [
        [1, 2, 3], [1, 3, 2], [2, 1, 3], [3, 1, 2], [2, 3, 1], [3, 2, 1],
    ])
    rows = rankcount.report.trace_rows(trace)
    assert rows[-1] == [
        '', '',
        'Tie remains after all tie-breakers: Alice, Bob, Carol.'
        ' Manual review required for runoff.'
    ]
    assert rows[-2] == [
        '', '', 'Most last place failed, tie remains: Alice, Bob, Carol'
    ]
    assert rows[-4] == [
        '', '', 'Second choice failed, tie remains: Alice, Bob, Carol'
    ]
