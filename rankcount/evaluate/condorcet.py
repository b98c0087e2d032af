'''Condorcet-family resolvers.

These resolvers work by examining pairwise orderings between candidates (how
many voters prefer one candidate to another), collected in a
:class:`rankcount.matrix.PreferenceMatrix`; use
:meth:`rankcount.matrix.PreferenceMatrix.from_ballots` to build it from
normalized ballots.

All of them share the :class:`rankcount.evaluate.core.Resolver` interface
and are pure functions of the matrix, so they can be evaluated in any order
(or in parallel) over the same matrix. Each returns a
:class:`rankcount.evaluate.core.ResolverResult` with the winner (or None),
a full ranking and the intermediate data used to reach it.

Schulze, ranked pairs and minimax select the Condorcet winner whenever there
is one; they differ in how they resolve the elections where there is none.

These resolvers only take few parameters; therefore, a dictionary of their
instances with the default setup is provided in the ``RESOLVERS`` module
variable.
'''

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import rankcount.component.pairwin_scorer
from rankcount.candidate import Candidate
from rankcount.evaluate.core import Resolver, ResolverResult, check_input, \
    rank_by_score
from rankcount.matrix import PreferenceMatrix
from rankcount.persist import simple_serialization

logger = logging.getLogger(__name__)


def beat_counts(matrix: PreferenceMatrix) -> List[int]:
    '''Count the number of candidates each candidate beats pairwise.'''
    n_beats = [0] * len(matrix)
    for winner, loser in matrix.pairwise_wins():
        n_beats[winner] += 1
    return n_beats


def _unbeaten(strengths: Sequence[Sequence[Any]]) -> Optional[int]:
    # index of the candidate stronger than every other one, if any
    size = len(strengths)
    for i in range(size):
        if all(strengths[i][j] > strengths[j][i]
               for j in range(size) if j != i):
            return i
    return None


def _name(candidates: Sequence[Candidate], index: Optional[int]
          ) -> Optional[str]:
    return None if index is None else candidates[index].name


@simple_serialization
class CondorcetWinner(Resolver):
    '''Basic Condorcet resolver.

    Selects a candidate that pairwise beats all other candidates, if there
    is one. At most one such candidate can exist. Candidates are ranked by
    the number of their pairwise wins.
    '''
    name = 'condorcet'

    def evaluate(self,
                 matrix: PreferenceMatrix,
                 candidates: Sequence[Candidate],
                 ) -> ResolverResult:
        '''Select the Condorcet winner.

        :param matrix: Pairwise preference counts.
        :param candidates: Candidates in index order.
        '''
        check_input(matrix, candidates)
        winner = _unbeaten(matrix)
        if winner is None:
            logger.info('no Condorcet winner (cycle or pairwise tie)')
        return ResolverResult(
            method=self.name,
            winner=_name(candidates, winner),
            ranked=rank_by_score(candidates, beat_counts(matrix)),
            evidence={'matrix': matrix.to_list()},
        )


@simple_serialization
class Schulze(Resolver):
    '''Schulze (beatpath) Condorcet resolver.

    Also called Schwartz sequential dropping or path voting. Finds paths
    between pairs of candidates in which each candidate pairwise beats the next
    and then selects the candidate whose strongest paths to all others are
    stronger than the reverse ones. Candidates are ranked by the sum of their
    strongest path strengths.
    '''
    name = 'schulze'

    def evaluate(self,
                 matrix: PreferenceMatrix,
                 candidates: Sequence[Candidate],
                 ) -> ResolverResult:
        '''Select the winner using the Schulze method.

        :param matrix: Pairwise preference counts.
        :param candidates: Candidates in index order.
        '''
        check_input(matrix, candidates)
        paths = self.widest_paths(matrix)
        winner = _unbeaten(paths)
        if winner is None:
            logger.info('no Schulze winner (tied strongest paths)')
        return ResolverResult(
            method=self.name,
            winner=_name(candidates, winner),
            ranked=rank_by_score(candidates, [sum(row) for row in paths]),
            evidence={'matrix': matrix.to_list(), 'paths': paths},
        )

    @staticmethod
    def widest_paths(matrix: PreferenceMatrix) -> List[List[int]]:
        '''Compute the strongest path strengths between all candidates.

        Direct path strength is the number of ballots behind a pairwise win
        (zero for losses and ties). The strength of a longer path is given by
        its weakest link.
        '''
        size = len(matrix)
        paths = [
            [
                (matrix[i][j] if i != j and matrix.beats(i, j) else 0)
                for j in range(size)
            ]
            for i in range(size)
        ]
        # the outer loop index is the intermediate candidate
        for via in range(size):
            for start in range(size):
                if start == via:
                    continue
                for end in range(size):
                    if end not in (via, start):
                        paths[start][end] = max(
                            paths[start][end],
                            min(paths[start][via], paths[via][end]),
                        )
        return paths


@simple_serialization
class RankedPairs(Resolver):
    '''Tideman's ranked pairs Condorcet resolver.

    Ranks pairwise wins by their magnitude and sequentially locks pairs of
    who beats whom in descending order into a graph, discarding pairs that
    would contradict previously locked ones (i.e. create a cycle). The winner
    is the only candidate with no locked defeat. Candidates are ranked by the
    number of their locked wins minus locked defeats.

    Pairs of equal magnitude are locked in row-major matrix order; no other
    tie-breaking takes place.

    :param pairwin_scoring: A pairwise win scorer callable measuring the
        magnitude of pairwise wins. Most common variants are found in the
        :mod:`rankcount.component.pairwin_scorer` module and can be referred
        to by their names.
    '''
    name = 'ranked_pairs'

    def __init__(self,
                 pairwin_scoring: Union[
                     str, rankcount.component.pairwin_scorer.PairwinScorer
                 ] = 'margins',
                 ):
        self.pairwin_scoring = rankcount.component.pairwin_scorer.construct(
            pairwin_scoring
        )

    def evaluate(self,
                 matrix: PreferenceMatrix,
                 candidates: Sequence[Candidate],
                 ) -> ResolverResult:
        '''Select the winner by the ranked pairs method.

        :param matrix: Pairwise preference counts.
        :param candidates: Candidates in index order.
        '''
        check_input(matrix, candidates)
        size = len(matrix)
        strengths = self.pairwin_scoring(matrix)
        pairs = [
            {'winner': winner, 'loser': loser,
             'margin': strengths[winner][loser]}
            for winner, loser in matrix.pairwise_wins()
        ]
        pairs.sort(key=lambda pair: pair['margin'], reverse=True)
        locked = [[False] * size for _ in range(size)]
        for pair in pairs:
            winner, loser = pair['winner'], pair['loser']
            pair['locked'] = not self._is_path(locked, loser, winner)
            if pair['locked']:
                locked[winner][loser] = True
            else:
                logger.debug('skipping %s over %s, would create a cycle',
                             candidates[winner].name, candidates[loser].name)
        sources = self._sources(locked)
        if len(sources) == 1:
            winner = sources[0]
        else:
            logger.info('no ranked pairs winner, %d sources in locked graph',
                        len(sources))
            winner = None
        balance = [
            sum(locked[i]) - sum(locked[j][i] for j in range(size))
            for i in range(size)
        ]
        return ResolverResult(
            method=self.name,
            winner=_name(candidates, winner),
            ranked=rank_by_score(candidates, balance),
            evidence={
                'matrix': matrix.to_list(),
                'locked': locked,
                'pairs': [
                    {
                        'winner': candidates[pair['winner']].name,
                        'loser': candidates[pair['loser']].name,
                        'margin': pair['margin'],
                        'locked': pair['locked'],
                    }
                    for pair in pairs
                ],
            },
        )

    @staticmethod
    def _is_path(locked: List[List[bool]], source: int, sink: int) -> bool:
        # iterative depth-first search over the locked edges
        visited = {source}
        stack = [source]
        while stack:
            node = stack.pop()
            if node == sink:
                return True
            for nxt, is_locked in enumerate(locked[node]):
                if is_locked and nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return False

    @staticmethod
    def _sources(locked: List[List[bool]]) -> List[int]:
        size = len(locked)
        return [
            i for i in range(size)
            if not any(locked[j][i] for j in range(size))
        ]


@simple_serialization
class Minimax(Resolver):
    '''Minimax Condorcet resolver.

    Also known as successive reversal or Simpson-Kramer method.
    Selects as the winner the candidate whose greatest pairwise defeat is
    smaller than the greatest pairwise defeat of any other candidate. If
    several candidates share the smallest greatest defeat, there is no winner.
    Candidates are ranked by their greatest defeat, smallest first.

    :param pairwin_scoring: A pairwise win scorer callable measuring the
        magnitude of the defeats. The default counts all ballots preferring
        the opponent, whether or not the opponent wins the pair. Most common
        variants are found in the :mod:`rankcount.component.pairwin_scorer`
        module and can be referred to by their names.
    '''
    name = 'minimax'

    def __init__(self,
                 pairwin_scoring: Union[
                     str, rankcount.component.pairwin_scorer.PairwinScorer
                 ] = 'pairwise_opposition',
                 ):
        self.pairwin_scoring = rankcount.component.pairwin_scorer.construct(
            pairwin_scoring
        )

    def evaluate(self,
                 matrix: PreferenceMatrix,
                 candidates: Sequence[Candidate],
                 ) -> ResolverResult:
        '''Select the winner by the minimax method.

        :param matrix: Pairwise preference counts.
        :param candidates: Candidates in index order.
        '''
        check_input(matrix, candidates)
        size = len(matrix)
        strengths = self.pairwin_scoring(matrix)
        worst_defeats = [
            max([0] + [strengths[j][i] for j in range(size) if j != i])
            for i in range(size)
        ]
        best = min(worst_defeats)
        leaders = [i for i, score in enumerate(worst_defeats) if score == best]
        if len(leaders) == 1:
            winner = leaders[0]
        else:
            logger.info('no minimax winner, %d candidates tied at %s',
                        len(leaders), best)
            winner = None
        return ResolverResult(
            method=self.name,
            winner=_name(candidates, winner),
            ranked=rank_by_score(candidates, worst_defeats, descending=False),
            evidence={'matrix': matrix.to_list(), 'scores': worst_defeats},
        )


RESOLVERS: Dict[str, Resolver] = {
    resolver.name: resolver
    for resolver in (CondorcetWinner(), Schulze(), RankedPairs(), Minimax())
}
