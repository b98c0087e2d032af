'''Instant-runoff (ranked-choice) evaluation.

The :class:`InstantRunoff` engine works on normalized ballots directly, not
on the pairwise matrix. Every round proceeds as follows:

1.  **Counting**: each ballot gives one vote to its most preferred candidate
    still in the race. Ballots ranking only eliminated candidates are
    exhausted and give no vote.
2.  **Majority check**: a candidate with more than half of the votes of the
    non-exhausted ballots wins and the run ends. If a single candidate
    remains in the race, they win as well.
3.  **Elimination**: the candidate with the fewest votes is eliminated and
    the next round starts. If several candidates share the fewest votes,
    the tie-breaking chain (:mod:`rankcount.component.tiebreak`) selects one
    of them; if it cannot, the run ends with an unresolved tie.

Each round eliminates exactly one candidate or ends the run, so a run over
``N`` candidates has at most ``N`` rounds.

The engine keeps no state between runs. The standings of every round are
recorded as an immutable :class:`RunoffRound` snapshot in the result, and
the events of the run are appended to a trace sink given for the run (see
:mod:`rankcount.trace`).
'''

import logging
import dataclasses
from fractions import Fraction
from typing import Dict, List, Optional, Sequence, Tuple

from rankcount.ballot import NormalizedBallot
from rankcount.candidate import Candidate, ValidationError
from rankcount.component.tiebreak import TieBreakChain, TieBreakOutcome
from rankcount.evaluate.core import VotingSystemError
from rankcount.persist import simple_serialization
from rankcount.report import SummaryRow, summary_table
from rankcount.trace import Announcement, BallotSnapshot, NullTrace, \
    RoundSummary, TieBreakRecord, TraceSink

logger = logging.getLogger(__name__)

WINNER = 'winner'
ELIMINATED = 'eliminated'
UNRESOLVED = 'unresolved'

MAJORITY_REASON = 'more than 50% of the votes'
LAST_REMAINING_REASON = 'last remaining candidate'
FEWEST_VOTES_REASON = 'fewest votes'


@dataclasses.dataclass(frozen=True)
class Elimination:
    '''When and why a candidate was eliminated.

    :param round: Round of the elimination.
    :param reason: Reason of the elimination.
    :param votes: Votes the candidate held in that round.
    '''
    round: int
    reason: str
    votes: int


@dataclasses.dataclass(frozen=True)
class CandidateRoundState:
    '''Standing of a candidate in one round.

    :param candidate: Name of the candidate.
    :param votes: Votes counted for the candidate in the round (zero once
        eliminated).
    :param eliminated: Elimination record, if the candidate was eliminated
        in an earlier round.
    '''
    candidate: str
    votes: int
    eliminated: Optional[Elimination] = None

    @property
    def is_active(self) -> bool:
        return self.eliminated is None


@dataclasses.dataclass(frozen=True)
class RunoffRound:
    '''Snapshot of a single round.

    :param number: Round number, starting at 1.
    :param states: Candidate states after counting, in candidate order.
    :param n_active_ballots: Number of ballots that were not exhausted.
    :param n_exhausted_ballots: Number of exhausted ballots.
    :param outcome: ``winner``, ``eliminated`` or ``unresolved``.
    :param candidate: The winner or the eliminated candidate of the round.
    :param reason: Why the candidate won or was eliminated, or which
        candidates remained tied.
    :param tie_break: Outcome of the tie-breaking chain, if it was invoked.
    '''
    number: int
    states: Tuple[CandidateRoundState, ...]
    n_active_ballots: int
    n_exhausted_ballots: int
    outcome: str
    candidate: Optional[str] = None
    reason: Optional[str] = None
    tie_break: Optional[TieBreakOutcome] = None

    @property
    def threshold(self) -> Fraction:
        '''Half of the non-exhausted ballots; a majority must exceed it.'''
        return Fraction(self.n_active_ballots, 2)

    @property
    def active(self) -> List[str]:
        '''Candidates in the race during the round.'''
        return [state.candidate for state in self.states if state.is_active]

    @property
    def votes(self) -> Dict[str, int]:
        return {
            state.candidate: state.votes
            for state in self.states if state.is_active
        }


@dataclasses.dataclass(frozen=True)
class RunoffResult:
    '''Final result of an instant-runoff run.

    :param winner: Name of the winner, or None if the run ended in an
        unresolved tie.
    :param tie: Names of the candidates tied for elimination when the run
        ended unresolved, or None if there is a winner.
    :param summary: Final standings of all candidates.
    :param rounds: Snapshots of all rounds, in order.
    '''
    winner: Optional[str]
    tie: Optional[List[str]]
    summary: List[SummaryRow]
    rounds: Tuple[RunoffRound, ...]

    @property
    def n_rounds(self) -> int:
        return len(self.rounds)

    @property
    def eliminated(self) -> List[str]:
        '''Eliminated candidates in the order of elimination.'''
        return [
            rnd.candidate for rnd in self.rounds if rnd.outcome == ELIMINATED
        ]

    def round(self, number: int) -> RunoffRound:
        '''Return the snapshot of the given (1-based) round.'''
        if not 1 <= number <= len(self.rounds):
            raise IndexError(f'no round {number} in a {len(self.rounds)}'
                             '-round runoff')
        return self.rounds[number - 1]


@simple_serialization
class InstantRunoff:
    '''Instant-runoff (ranked-choice) voting engine.

    :param tiebreaker: The chain deciding eliminations among candidates tied
        for the fewest votes. The default uses the fewest second choices and
        then the most last places.
    '''
    name = 'rcv'

    def __init__(self, tiebreaker: Optional[TieBreakChain] = None):
        self.tiebreaker = (
            tiebreaker if tiebreaker is not None else TieBreakChain()
        )

    def evaluate(self,
                 ballots: Sequence[NormalizedBallot],
                 candidates: Sequence[Candidate],
                 trace: Optional[TraceSink] = None,
                 ) -> RunoffResult:
        '''Run the instant-runoff count to its end.

        :param ballots: Normalized ballots; see
            :func:`rankcount.ballot.normalize_ballots`.
        :param candidates: Candidates in index order, matching the ballot
            rank positions.
        :param trace: Sink for the round trace of this run. Discarded if not
            given.
        :raises ValidationError: If there are no candidates or no ballots.
        '''
        if not candidates:
            raise ValidationError('no candidates given')
        ballots = list(ballots)
        if not ballots:
            raise ValidationError('no ballots given')
        if trace is None:
            trace = NullTrace()
        n_cands = len(candidates)
        eliminations: Dict[int, Elimination] = {}
        rounds: List[RunoffRound] = []
        for number in range(1, n_cands + 1):
            logger.info('proceeding to round %d', number)
            trace.append(self.snapshot(number, ballots, candidates,
                                       eliminations))
            votes, n_active = self.count_votes(ballots, n_cands, eliminations)
            logger.debug('round %d vote totals: %s', number, {
                cand.name: votes[cand.index] for cand in candidates
                if cand.index not in eliminations
            })
            states = tuple(
                CandidateRoundState(
                    cand.name, votes[cand.index], eliminations.get(cand.index)
                )
                for cand in candidates
            )
            common = dict(
                number=number,
                states=states,
                n_active_ballots=n_active,
                n_exhausted_ballots=len(ballots) - n_active,
            )
            remaining = [i for i in range(n_cands) if i not in eliminations]
            winner, reason = self._find_winner(remaining, votes, n_active)
            winner_name = None if winner is None else candidates[winner].name
            trace.append(RoundSummary(
                number, tuple(summary_table(states, winner_name))
            ))
            if winner is not None:
                logger.info('%s elected in round %d: %s',
                            winner_name, number, reason)
                rounds.append(RunoffRound(
                    outcome=WINNER, candidate=winner_name, reason=reason,
                    **common
                ))
                trace.append(Announcement(
                    number, WINNER, (winner_name, ), reason
                ))
                return self._result(winner_name, None, states, rounds)
            min_votes = min(votes[i] for i in remaining)
            lowest = [i for i in remaining if votes[i] == min_votes]
            tie_break = None
            if len(lowest) == 1:
                loser, reason = lowest[0], FEWEST_VOTES_REASON
            else:
                logger.info('round %d: %d candidates tied at %d votes',
                            number, len(lowest), min_votes)
                tie_break = self.tiebreaker.resolve(
                    lowest, ballots, candidates
                )
                for step in tie_break.steps:
                    trace.append(TieBreakRecord(
                        number,
                        step.name,
                        tuple(
                            (candidates[cand_i].name, n)
                            for cand_i, n in step.counts
                        ),
                        tuple(candidates[i].name for i in step.survivors),
                    ))
                if not tie_break.resolved:
                    tied_names = [candidates[i].name for i in lowest]
                    rounds.append(RunoffRound(
                        outcome=UNRESOLVED, reason=tie_break.reason,
                        tie_break=tie_break, **common
                    ))
                    trace.append(Announcement(
                        number, UNRESOLVED,
                        tuple(candidates[i].name
                              for i in tie_break.remaining),
                        tie_break.reason,
                    ))
                    return self._result(None, tied_names, states, rounds)
                loser, reason = tie_break.eliminated, tie_break.reason
            loser_name = candidates[loser].name
            logger.info('eliminating %s: %s', loser_name, reason)
            eliminations[loser] = Elimination(number, reason, min_votes)
            rounds.append(RunoffRound(
                outcome=ELIMINATED, candidate=loser_name, reason=reason,
                tie_break=tie_break, **common
            ))
            trace.append(Announcement(
                number, ELIMINATED, (loser_name, ), reason
            ))
        raise VotingSystemError(
            f'instant runoff not finished after {n_cands} rounds'
        )

    @staticmethod
    def count_votes(ballots: Sequence[NormalizedBallot],
                    n_candidates: int,
                    eliminated: Dict[int, Elimination],
                    ) -> Tuple[List[int], int]:
        '''Count the votes of a round.

        :returns: A 2-tuple of the votes per candidate index and the number
            of ballots that were not exhausted.
        '''
        votes = [0] * n_candidates
        n_active = 0
        for ballot in ballots:
            choice = ballot.first_active(eliminated)
            if choice is not None:
                votes[choice] += 1
                n_active += 1
        return votes, n_active

    @staticmethod
    def snapshot(number: int,
                 ballots: Sequence[NormalizedBallot],
                 candidates: Sequence[Candidate],
                 eliminated: Dict[int, Elimination],
                 ) -> BallotSnapshot:
        '''Re-rank all ballots over the candidates remaining in the race.'''
        active = [cand for cand in candidates if cand.index not in eliminated]
        rows = []
        for i, ballot in enumerate(ballots):
            new_ranks = {
                cand_i: new_rank
                for new_rank, cand_i in enumerate(
                    (c for c in ballot.preferences if c not in eliminated),
                    start=1,
                )
            }
            rows.append((
                f'Voter {i + 1}',
                tuple(new_ranks.get(cand.index) for cand in active),
            ))
        return BallotSnapshot(
            number,
            'Initial ballots' if number == 1
            else f'Redistributed ballots in round {number}',
            tuple(cand.name for cand in active),
            tuple(rows),
        )

    @staticmethod
    def _find_winner(remaining: List[int],
                     votes: List[int],
                     n_active: int,
                     ) -> Tuple[Optional[int], Optional[str]]:
        for cand_i in remaining:
            if 2 * votes[cand_i] > n_active:
                return cand_i, MAJORITY_REASON
        if len(remaining) == 1:
            return remaining[0], LAST_REMAINING_REASON
        return None, None

    @staticmethod
    def _result(winner: Optional[str],
                tie: Optional[List[str]],
                final_states: Sequence[CandidateRoundState],
                rounds: List[RunoffRound],
                ) -> RunoffResult:
        return RunoffResult(
            winner=winner,
            tie=tie,
            summary=summary_table(final_states, winner),
            rounds=tuple(rounds),
        )
