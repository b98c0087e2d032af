'''Functions to score magnitudes of wins between pairs of candidates.

These are used in some Condorcet methods to determine ranking priority:
the ranked pairs resolver sorts pairwise wins by their score and the minimax
resolver measures the worst defeat of a candidate by it.

Every scorer takes a :class:`rankcount.matrix.PreferenceMatrix` and returns
a square list of lists of the same size where entry ``[i][j]`` is the
strength of candidate ``i`` over candidate ``j``.
'''

from typing import Callable, List
from numbers import Number

import rankcount.component.core
from rankcount.matrix import PreferenceMatrix


PAIRWIN_SCORERS = {}

ScoreMatrix = List[List[Number]]

pairwin_scorer_mark, get, construct = \
    rankcount.component.core.register_functions(
        PAIRWIN_SCORERS, 'pairwise win scorer'
    )


@pairwin_scorer_mark
def winning_votes(matrix: PreferenceMatrix) -> ScoreMatrix:
    '''Winning votes pairwise win scorer. Counts wins fully, zero otherwise.

    When the number of ballots preferring one candidate of the pair is larger
    than the opposite, assigns all those ballots as the pairwise win
    strength.
    '''
    return [
        [
            (matrix[i][j] if matrix.beats(i, j) else 0)
            for j in range(len(matrix))
        ]
        for i in range(len(matrix))
    ]


@pairwin_scorer_mark
def margins(matrix: PreferenceMatrix) -> ScoreMatrix:
    '''Margins pairwise win scorer. Takes the difference from reverse option.

    Also called margin of victory or defeat strength. Negative for pairwise
    losses.
    '''
    return [
        [matrix.margin(i, j) for j in range(len(matrix))]
        for i in range(len(matrix))
    ]


@pairwin_scorer_mark
def pairwise_opposition(matrix: PreferenceMatrix) -> ScoreMatrix:
    '''Pairwise opposition win scorer. Returns the counts unchanged.

    This gives the number of ballots preferring the first candidate directly
    as the measure of pairwise win, regardless of the number of ballots
    preferring the opposite.
    '''
    return matrix.to_list()


PairwinScorer = Callable[[PreferenceMatrix], ScoreMatrix]
