'''Tie-breaking for instant-runoff elimination.

When several candidates share the fewest votes in a runoff round, a
:class:`TieBreakChain` decides which of them to eliminate. The chain applies
its steps in order, each narrowing the tied set to the candidates it selects
for elimination, until a single candidate remains. If the steps are exhausted
first, the tie is left unresolved for manual review. That is a regular
outcome, not an error.

A step is a function taking the tied candidate indices and the normalized
ballots, returning the counts it measured for each tied candidate and the
list of candidates it selects. Steps are registered here by name; the
registered ``reason`` attribute of a step is used as the elimination reason.

Steps look at the normalized ballots as cast, not at the ballots re-ranked
over the candidates remaining in the race.
'''

import logging
import dataclasses
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import rankcount.component.core
from rankcount.ballot import NormalizedBallot
from rankcount.candidate import Candidate
from rankcount.persist import simple_serialization

logger = logging.getLogger(__name__)

TIEBREAK_STEPS = {}

TieBreakStepFunction = Callable[
    [Sequence[int], Sequence[NormalizedBallot]],
    Tuple[Dict[int, int], List[int]]
]

_mark, get, construct = rankcount.component.core.register_functions(
    TIEBREAK_STEPS, 'tie-breaking step'
)


def tiebreak_step(reason: str) -> Callable[[Callable], Callable]:
    '''Register a tie-breaking step with the given elimination reason.'''
    def decorator(func):
        func.reason = reason
        return _mark(func)
    return decorator


def count_at_position(tied: Sequence[int],
                      ballots: Sequence[NormalizedBallot],
                      position: int,
                      ) -> Dict[int, int]:
    '''Count ballots giving the given preference position to tied candidates.

    :param tied: Indices of the tied candidates.
    :param ballots: Normalized ballots.
    :param position: 1-based preference position; -1 for the last ranked
        candidate of each ballot.
    '''
    counts = {cand_i: 0 for cand_i in tied}
    for ballot in ballots:
        chosen = ballot.choice(position)
        if chosen in counts:
            counts[chosen] += 1
    return counts


@tiebreak_step('fewest second choice votes')
def fewest_second_choices(tied: Sequence[int],
                          ballots: Sequence[NormalizedBallot],
                          ) -> Tuple[Dict[int, int], List[int]]:
    '''Select the tied candidates ranked second on the fewest ballots.'''
    counts = count_at_position(tied, ballots, 2)
    least = min(counts.values())
    return counts, [cand_i for cand_i in tied if counts[cand_i] == least]


@tiebreak_step('most last-place votes')
def most_last_places(tied: Sequence[int],
                     ballots: Sequence[NormalizedBallot],
                     ) -> Tuple[Dict[int, int], List[int]]:
    '''Select the tied candidates ranked last on the most ballots.'''
    counts = count_at_position(tied, ballots, -1)
    most = max(counts.values())
    return counts, [cand_i for cand_i in tied if counts[cand_i] == most]


@dataclasses.dataclass(frozen=True)
class TieBreakStep:
    '''Evidence of one applied tie-breaking step.

    :param name: Name of the step function.
    :param counts: Pairs of candidate index and the count measured by the
        step, for each candidate it saw.
    :param survivors: Candidates selected by the step.
    '''
    name: str
    counts: Tuple[Tuple[int, int], ...]
    survivors: Tuple[int, ...]


@dataclasses.dataclass(frozen=True)
class TieBreakOutcome:
    '''Outcome of a tie-breaking chain.

    :param tied: The candidates the chain was applied to.
    :param eliminated: The candidate to eliminate, or None if the tie
        could not be broken.
    :param reason: Elimination reason, or a description of the remaining
        tie.
    :param steps: Evidence of the applied steps, in order.
    '''
    tied: Tuple[int, ...]
    eliminated: Optional[int]
    reason: str
    steps: Tuple[TieBreakStep, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.eliminated is not None

    @property
    def remaining(self) -> Tuple[int, ...]:
        '''Candidates still tied after the last applied step.'''
        if self.eliminated is not None:
            return (self.eliminated, )
        elif self.steps:
            return self.steps[-1].survivors
        else:
            return self.tied


@simple_serialization
class TieBreakChain:
    '''An ordered policy for choosing whom to eliminate among tied candidates.

    The default chain first selects the candidates with the fewest
    second-choice votes, then, among those, the candidates with the most
    last-place votes.

    :param steps: Tie-breaking step functions or their names from the
        register in this module, in the order of application.
    '''
    def __init__(self,
                 steps: Sequence[Union[str, TieBreakStepFunction]] = (
                     'fewest_second_choices', 'most_last_places',
                 ),
                 ):
        self.steps = tuple(construct(step) for step in steps)

    def resolve(self,
                tied: Sequence[int],
                ballots: Sequence[NormalizedBallot],
                candidates: Sequence[Candidate],
                ) -> TieBreakOutcome:
        '''Pick one of the tied candidates to eliminate.

        :param tied: Indices of the candidates sharing the fewest votes.
        :param ballots: Normalized ballots of the election.
        :param candidates: Candidates in index order (for messages).
        '''
        remaining = list(tied)
        applied = []
        for step in self.steps:
            counts, remaining = step(remaining, ballots)
            applied.append(TieBreakStep(
                step.__name__, tuple(counts.items()), tuple(remaining)
            ))
            logger.debug('tie-break %s: %s', step.__name__, {
                candidates[cand_i].name: n for cand_i, n in counts.items()
            })
            if len(remaining) == 1:
                return TieBreakOutcome(
                    tuple(tied),
                    remaining[0],
                    getattr(step, 'reason', step.__name__),
                    tuple(applied),
                )
        names = ', '.join(candidates[cand_i].name for cand_i in remaining)
        logger.info('tie not broken, manual review required: %s', names)
        return TieBreakOutcome(
            tuple(tied),
            None,
            f'unable to eliminate a last place tie between: {names}',
            tuple(applied),
        )
