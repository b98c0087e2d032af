'''General resolver machinery.'''

from __future__ import annotations

import abc
import dataclasses
from typing import Any, Dict, List, Optional, Sequence
from numbers import Number

from rankcount.candidate import Candidate, ValidationError
from rankcount.matrix import PreferenceMatrix


class VotingSystemError(Exception):
    '''A voting system with a valid setup ended up in an unresolvable state.'''
    pass


@dataclasses.dataclass(frozen=True)
class ScoredCandidate:
    '''A candidate's place in a resolver ranking.

    :param candidate: Name of the candidate.
    :param score: Method-specific score the ranking was sorted by.
    '''
    candidate: str
    score: Number


@dataclasses.dataclass(frozen=True)
class ResolverResult:
    '''Outcome of a pairwise resolver.

    A missing winner is a legitimate outcome (a Condorcet cycle, a tie in
    minimax scores...), not an error; the ranking and the evidence are always
    filled so that the outcome can be presented and audited.

    :param method: Name of the method that produced the result.
    :param winner: Name of the winning candidate, or None if the method did
        not find a unique winner.
    :param ranked: All candidates in the order of the method's ranking, with
        their scores.
    :param evidence: Method-specific intermediate data, such as the pairwise
        matrix, the strongest path matrix, the locked edges or the defeat
        scores.
    '''
    method: str
    winner: Optional[str]
    ranked: List[ScoredCandidate]
    evidence: Dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    @property
    def ranking(self) -> List[str]:
        '''Candidate names in ranking order, without scores.'''
        return [item.candidate for item in self.ranked]

    @property
    def scores(self) -> Dict[str, Number]:
        return {item.candidate: item.score for item in self.ranked}


def rank_by_score(candidates: Sequence[Candidate],
                  scores: Sequence[Number],
                  descending: bool = True,
                  ) -> List[ScoredCandidate]:
    '''Order candidates by their scores.

    Candidates with equal scores stay in candidate index order; no other
    tie-breaking takes place.

    :param candidates: Candidates in index order.
    :param scores: Scores of the candidates, indexed like the candidates.
    :param descending: Whether higher scores rank first.
    '''
    order = sorted(
        range(len(candidates)),
        key=scores.__getitem__,
        reverse=descending,
    )
    return [
        ScoredCandidate(candidates[i].name, scores[i]) for i in order
    ]


def check_input(matrix: PreferenceMatrix,
                candidates: Sequence[Candidate],
                ) -> None:
    '''Validate the input of a pairwise resolver.

    :raises ValidationError: If there are no candidates or the matrix size
        does not match their number.
    '''
    if not candidates:
        raise ValidationError('no candidates given')
    if len(matrix) != len(candidates):
        raise ValidationError(
            f'preference matrix of size {len(matrix)} does not match'
            f' {len(candidates)} candidates'
        )


class Resolver(metaclass=abc.ABCMeta):
    '''Determine a winner and a ranking from a pairwise preference matrix.

    A root abstract base class for the Condorcet-family resolvers. Resolvers
    are stateless apart from their configuration, so one instance may
    evaluate any number of matrices, in any order.
    '''
    name: str = NotImplemented

    @abc.abstractmethod
    def evaluate(self,
                 matrix: PreferenceMatrix,
                 candidates: Sequence[Candidate],
                 ) -> ResolverResult:
        '''Resolve the election described by the matrix.

        :param matrix: Pairwise preference counts.
        :param candidates: Candidates in index order, matching the matrix.
        '''
        raise NotImplementedError
