import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import rankcount.evaluate.condorcet
import rankcount.component.pairwin_scorer
from rankcount.ballot import RawBallot, normalize_ballots
from rankcount.candidate import CandidateRegistry, ValidationError
from rankcount.matrix import PreferenceMatrix


VOTES = {
    'schulze': {
        'ACBED': 5,
        'ADECB': 5,
        'BEDAC': 8,
        'CABED': 3,
        'CAEBD': 7,
        'CBADE': 2,
        'DCEBA': 7,
        'EBADC': 8,
    },
    'cycle': {
        'ABC': 4,
        'BCA': 3,
        'CAB': 2,
    },
    'cw': {
        'ABC': 3,
        'BCA': 2,
    },
    'tennessee': {
        'MNCK': 42,
        'NCKM': 26,
        'CKNM': 15,
        'KCNM': 17,
    },
    'partial': {
        'A': 3,
        'BA': 2,
        'BC': 2,
    },
}

CANDIDATES = {
    'schulze': 'ABCDE',
    'cycle': 'ABC',
    'cw': 'ABC',
    'tennessee': 'MNCK',
    'partial': 'ABC',
}


def build(name):
    candidates = CandidateRegistry(CANDIDATES[name])
    raw = []
    for order, count in VOTES[name].items():
        for k in range(count):
            ranks = [None] * len(candidates)
            for rank, cand_name in enumerate(order, start=1):
                ranks[candidates.index_of(cand_name)] = rank
            raw.append(RawBallot(f'{order}-{k}', tuple(ranks)))
    ballots = normalize_ballots(raw, len(candidates))
    matrix = PreferenceMatrix.from_ballots(ballots, len(candidates))
    return matrix, list(candidates)


CONDORCET_WINNERS = {
    'cw': 'A',
    'tennessee': 'N',
    'partial': 'B',
}

EXPECTED_WINNERS = {
    ('schulze', 'condorcet'): None,
    ('schulze', 'schulze'): 'E',
    ('schulze', 'ranked_pairs'): 'A',
    ('schulze', 'minimax'): 'E',
    ('cycle', 'condorcet'): None,
    ('cycle', 'schulze'): 'A',
    ('cycle', 'ranked_pairs'): 'A',
    ('cycle', 'minimax'): 'A',
}


@pytest.mark.parametrize('dataset, method', list(EXPECTED_WINNERS.keys()))
def test_winners(dataset, method):
    matrix, candidates = build(dataset)
    result = rankcount.evaluate.condorcet.RESOLVERS[method].evaluate(
        matrix, candidates
    )
    assert result.method == method
    assert result.winner == EXPECTED_WINNERS[dataset, method]
    assert sorted(result.ranking) == sorted(CANDIDATES[dataset])


@pytest.mark.parametrize('dataset', list(CONDORCET_WINNERS.keys()))
@pytest.mark.parametrize('method', list(
    rankcount.evaluate.condorcet.RESOLVERS.keys()
))
def test_condorcet_consistency(dataset, method):
    matrix, candidates = build(dataset)
    result = rankcount.evaluate.condorcet.RESOLVERS[method].evaluate(
        matrix, candidates
    )
    assert result.winner == CONDORCET_WINNERS[dataset]
    assert result.ranking[0] == CONDORCET_WINNERS[dataset]


def test_cycle_details():
    matrix, candidates = build('cycle')
    assert matrix.to_list() == [[0, 6, 4], [3, 0, 7], [5, 2, 0]]
    resolvers = rankcount.evaluate.condorcet.RESOLVERS
    basic = resolvers['condorcet'].evaluate(matrix, candidates)
    assert basic.is_tie
    assert basic.scores == {'A': 1, 'B': 1, 'C': 1}
    assert basic.ranking == ['A', 'B', 'C']
    schulze = resolvers['schulze'].evaluate(matrix, candidates)
    assert schulze.evidence['paths'] == [[0, 6, 6], [5, 0, 7], [5, 5, 0]]
    assert schulze.scores == {'A': 12, 'B': 12, 'C': 10}
    assert schulze.ranking == ['A', 'B', 'C']
    pairs = resolvers['ranked_pairs'].evaluate(matrix, candidates)
    assert pairs.evidence['pairs'] == [
        {'winner': 'B', 'loser': 'C', 'margin': 5, 'locked': True},
        {'winner': 'A', 'loser': 'B', 'margin': 3, 'locked': True},
        {'winner': 'C', 'loser': 'A', 'margin': 1, 'locked': False},
    ]
    assert pairs.ranking == ['A', 'B', 'C']
    assert pairs.scores == {'A': 1, 'B': 0, 'C': -1}
    minimax = resolvers['minimax'].evaluate(matrix, candidates)
    assert minimax.evidence['scores'] == [5, 6, 7]
    assert minimax.ranking == ['A', 'B', 'C']


def test_schulze_paths():
    matrix, candidates = build('schulze')
    result = rankcount.evaluate.condorcet.Schulze().evaluate(
        matrix, candidates
    )
    assert result.evidence['paths'] == [
        [0, 28, 28, 30, 24],
        [25, 0, 28, 33, 24],
        [25, 29, 0, 29, 24],
        [25, 28, 28, 0, 24],
        [25, 28, 28, 31, 0],
    ]


def test_ranked_pairs_ranking():
    matrix, candidates = build('schulze')
    result = rankcount.evaluate.condorcet.RankedPairs().evaluate(
        matrix, candidates
    )
    assert result.ranking == list('ACEBD')
    locked = result.evidence['locked']
    assert not any(locked[i][0] for i in range(5))


def test_minimax_scores():
    matrix, candidates = build('schulze')
    result = rankcount.evaluate.condorcet.Minimax().evaluate(
        matrix, candidates
    )
    assert result.evidence['scores'] == [25, 29, 28, 33, 24]
    assert result.ranking == list('EACBD')


@pytest.mark.parametrize('method', list(
    rankcount.evaluate.condorcet.RESOLVERS.keys()
))
def test_full_tie(method):
    matrix = PreferenceMatrix([[0, 1], [1, 0]])
    candidates = list(CandidateRegistry(['A', 'B']))
    result = rankcount.evaluate.condorcet.RESOLVERS[method].evaluate(
        matrix, candidates
    )
    assert result.winner is None
    assert result.ranking == ['A', 'B']


@pytest.mark.parametrize('method', list(
    rankcount.evaluate.condorcet.RESOLVERS.keys()
))
def test_single_candidate(method):
    matrix = PreferenceMatrix([[0]])
    candidates = list(CandidateRegistry(['A']))
    result = rankcount.evaluate.condorcet.RESOLVERS[method].evaluate(
        matrix, candidates
    )
    assert result.winner == 'A'


def test_minimax_winning_votes():
    matrix, candidates = build('cycle')
    resolver = rankcount.evaluate.condorcet.Minimax(
        pairwin_scoring='winning_votes'
    )
    result = resolver.evaluate(matrix, candidates)
    assert result.evidence['scores'] == [5, 6, 7]
    assert result.winner == 'A'


def test_custom_scorer():
    scorer = rankcount.component.pairwin_scorer.winning_votes
    resolver = rankcount.evaluate.condorcet.RankedPairs(pairwin_scoring=scorer)
    assert resolver.pairwin_scoring is scorer
    with pytest.raises(KeyError):
        rankcount.evaluate.condorcet.RankedPairs(pairwin_scoring='nonsense')


def test_resolvers_stateless():
    resolver = rankcount.evaluate.condorcet.RESOLVERS['ranked_pairs']
    cycle = build('cycle')
    schulze = build('schulze')
    first = resolver.evaluate(*cycle)
    resolver.evaluate(*schulze)
    assert resolver.evaluate(*cycle) == first


@pytest.mark.parametrize('matrix, names', [
    (PreferenceMatrix([]), []),
    (PreferenceMatrix([[0, 1], [1, 0]]), []),
    (PreferenceMatrix([[0, 1], [1, 0]]), ['A', 'B', 'C']),
    (PreferenceMatrix([[0, 1, 2], [1, 0, 2], [0, 0, 0]]), ['A', 'B']),
])
@pytest.mark.parametrize('method', list(
    rankcount.evaluate.condorcet.RESOLVERS.keys()
))
def test_invalid_input(method, matrix, names):
    candidates = list(CandidateRegistry(names)) if names else []
    with pytest.raises(ValidationError):
        rankcount.evaluate.condorcet.RESOLVERS[method].evaluate(
            matrix, candidates
        )
