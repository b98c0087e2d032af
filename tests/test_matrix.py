import sys
import os
import itertools

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from rankcount.ballot import NormalizedBallot
from rankcount.matrix import PreferenceMatrix


def ballots_from_orders(orders):
    ballots = []
    for order, count in orders.items():
        for k in range(count):
            ranks = [None] * 3
            for rank, cand_i in enumerate(order, start=1):
                ranks[cand_i] = rank
            ballots.append(NormalizedBallot(f'{order}-{k}', tuple(ranks)))
    return ballots


CYCLE_BALLOTS = ballots_from_orders({
    (0, 1, 2): 4,
    (1, 2, 0): 3,
    (2, 0, 1): 2,
})


def test_from_ballots():
    matrix = PreferenceMatrix.from_ballots(CYCLE_BALLOTS, 3)
    assert matrix.to_list() == [[0, 6, 4], [3, 0, 7], [5, 2, 0]]
    assert matrix.beats(0, 1)
    assert not matrix.beats(1, 0)
    assert matrix.margin(1, 2) == 5
    assert matrix.margin(2, 1) == -5
    assert matrix.pairwise_wins() == [(0, 1), (1, 2), (2, 0)]


def test_unranked_carry_no_preference():
    ballots = [
        NormalizedBallot('a', (1, None, 2)),
        NormalizedBallot('b', (None, None, None)),
    ]
    matrix = PreferenceMatrix.from_ballots(ballots, 3)
    assert matrix.to_list() == [[0, 0, 1], [0, 0, 0], [0, 0, 0]]


def test_pair_bound():
    matrix = PreferenceMatrix.from_ballots(CYCLE_BALLOTS, 3)
    for i, j in itertools.permutations(range(3), 2):
        assert matrix[i][j] + matrix[j][i] <= len(CYCLE_BALLOTS)
        assert matrix[i][i] == 0


def test_diagonal_ignored():
    matrix = PreferenceMatrix([[5, 1], [2, 7]])
    assert matrix.to_list() == [[0, 1], [2, 0]]
    assert matrix == PreferenceMatrix([[0, 1], [2, 0]])
    assert hash(matrix) == hash(PreferenceMatrix([[0, 1], [2, 0]]))
    assert len(matrix) == matrix.size == 2


def test_non_square():
    with pytest.raises(ValueError):
        PreferenceMatrix([[0, 1], [2]])


def test_pairwise_tie_not_a_win():
    matrix = PreferenceMatrix([[0, 3], [3, 0]])
    assert not matrix.beats(0, 1)
    assert not matrix.beats(1, 0)
    assert matrix.pairwise_wins() == []
