'''Evaluation of a complete election under several methods.

:class:`Election` takes candidate names and raw ballots as delivered by an
intake collaborator, normalizes the ballots and builds the pairwise matrix
once, and evaluates the election under any of the supported methods. All the
derived inputs are immutable, so the instant-runoff count and the pairwise
resolvers can be evaluated from the same election in any order.
'''

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

import rankcount.evaluate.condorcet
from rankcount.ballot import NormalizedBallot, RawBallot, normalize_ballots
from rankcount.candidate import CandidateRegistry
from rankcount.evaluate.core import Resolver, ResolverResult
from rankcount.evaluate.runoff import InstantRunoff, RunoffResult
from rankcount.matrix import PreferenceMatrix
from rankcount.trace import TraceSink

logger = logging.getLogger(__name__)

RUNOFF_METHOD = InstantRunoff.name
METHODS: List[str] = (
    [RUNOFF_METHOD] + list(rankcount.evaluate.condorcet.RESOLVERS.keys())
)


class Election:
    '''A single election: its candidates and normalized ballots.

    :param candidates: Candidate names in ballot column order, or a ready
        candidate registry.
    :param ballots: Raw ballots in ingestion order.
    :param runoff: The instant-runoff engine to use.
    :param resolvers: Pairwise resolvers by method name. Defaults to
        :data:`rankcount.evaluate.condorcet.RESOLVERS`.
    :raises ValidationError: If there are no candidates or no ballots.
    '''
    def __init__(self,
                 candidates: Union[CandidateRegistry, Iterable[str]],
                 ballots: Iterable[RawBallot],
                 runoff: Optional[InstantRunoff] = None,
                 resolvers: Optional[Dict[str, Resolver]] = None,
                 ):
        if not isinstance(candidates, CandidateRegistry):
            candidates = CandidateRegistry(candidates)
        self.candidates = candidates
        self.ballots: Sequence[NormalizedBallot] = tuple(
            normalize_ballots(ballots, len(candidates))
        )
        logger.info('%d ballots for %d candidates after normalization',
                    len(self.ballots), len(self.candidates))
        self.runoff = runoff if runoff is not None else InstantRunoff()
        self.resolvers = (
            resolvers if resolvers is not None
            else rankcount.evaluate.condorcet.RESOLVERS
        )
        self._matrix = None

    @property
    def matrix(self) -> PreferenceMatrix:
        '''The pairwise preference matrix, built on first use.'''
        if self._matrix is None:
            self._matrix = PreferenceMatrix.from_ballots(
                self.ballots, len(self.candidates)
            )
        return self._matrix

    def run_runoff(self, trace: Optional[TraceSink] = None) -> RunoffResult:
        '''Evaluate the election by instant runoff.

        :param trace: Sink for the round trace of this run.
        '''
        return self.runoff.evaluate(self.ballots, self.candidates, trace=trace)

    def run_pairwise(self, method: str) -> ResolverResult:
        '''Evaluate the election by a single pairwise method.

        :param method: Name of the resolver, e.g. ``schulze``.
        '''
        try:
            resolver = self.resolvers[method]
        except KeyError:
            raise KeyError(f'unknown pairwise method: {method}')
        return resolver.evaluate(self.matrix, list(self.candidates))

    def run_all_pairwise(self) -> Dict[str, ResolverResult]:
        '''Evaluate the election by all pairwise methods.'''
        return {method: self.run_pairwise(method) for method in self.resolvers}

    def evaluate_all(self,
                     methods: Optional[Sequence[str]] = None,
                     trace: Optional[TraceSink] = None,
                     ) -> Dict[str, Union[RunoffResult, ResolverResult]]:
        '''Evaluate the election by the given methods (all by default).

        :param methods: Method names; ``rcv`` selects instant runoff, other
            names select pairwise resolvers.
        :param trace: Sink for the instant-runoff round trace.
        '''
        if methods is None:
            methods = [RUNOFF_METHOD] + list(self.resolvers.keys())
        results = {}
        for method in methods:
            if method == RUNOFF_METHOD:
                results[method] = self.run_runoff(trace=trace)
            else:
                results[method] = self.run_pairwise(method)
        return results
