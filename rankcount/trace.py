'''Round trace of the instant-runoff engine.

The engine reports every logical event of a run as a structured record
appended, in order, to a trace sink passed to it for that run only. Each
round starts with the effective ballots and the candidate summary after
counting, followed by any tie-breaking steps and the announcement of the
winner or the eliminated candidate.

The records carry data, not presentation; :func:`rankcount.report.trace_rows`
flattens them into table rows for display. Every record type has a ``kind``
tag that presentation code can dispatch on.
'''

import abc
import logging
import dataclasses
from typing import ClassVar, Iterator, List, Optional, Tuple

from rankcount.report import SummaryRow


@dataclasses.dataclass(frozen=True)
class TraceRecord:
    '''A single event in a runoff run.

    :param round: Number of the round (1-based) the event belongs to.
    '''
    kind: ClassVar[str] = NotImplemented
    round: int


@dataclasses.dataclass(frozen=True)
class BallotSnapshot(TraceRecord):
    '''Ballots as they stand at the start of a round.

    Each ballot is re-ranked over the candidates still in the race.

    :param title: Caption of the snapshot.
    :param candidates: Names of the candidates still in the race, in
        candidate order.
    :param ballots: Pairs of a voter label and the ballot's current ranks
        for the candidates listed (None where unranked).
    '''
    kind: ClassVar[str] = 'ballots'
    title: str
    candidates: Tuple[str, ...]
    ballots: Tuple[Tuple[str, Tuple[Optional[int], ...]], ...]


@dataclasses.dataclass(frozen=True)
class RoundSummary(TraceRecord):
    '''Candidate standings after the votes of a round are counted.'''
    kind: ClassVar[str] = 'summary'
    rows: Tuple[SummaryRow, ...]


@dataclasses.dataclass(frozen=True)
class TieBreakRecord(TraceRecord):
    '''Result of one tie-breaking step.

    :param step: Name of the step.
    :param counts: Pairs of candidate name and the count the step measured.
    :param survivors: Names of the candidates the step selected for
        elimination.
    '''
    kind: ClassVar[str] = 'tiebreak'
    step: str
    counts: Tuple[Tuple[str, int], ...]
    survivors: Tuple[str, ...]


@dataclasses.dataclass(frozen=True)
class Announcement(TraceRecord):
    '''The outcome of a round.

    :param event: One of ``winner``, ``eliminated`` and ``unresolved``.
    :param candidates: The winner, the eliminated candidate, or all
        candidates remaining tied.
    :param reason: Explanation of the outcome.
    '''
    kind: ClassVar[str] = 'announcement'
    event: str
    candidates: Tuple[str, ...]
    reason: str


class TraceSink(metaclass=abc.ABCMeta):
    '''A destination for trace records. Scoped to a single run.'''

    @abc.abstractmethod
    def append(self, record: TraceRecord) -> None:
        raise NotImplementedError


class NullTrace(TraceSink):
    '''Discard all records.'''

    def append(self, record: TraceRecord) -> None:
        pass


class ListTrace(TraceSink):
    '''Collect records in memory, in the order they were appended.'''

    def __init__(self):
        self.records: List[TraceRecord] = []

    def append(self, record: TraceRecord) -> None:
        self.records.append(record)

    def __iter__(self) -> Iterator[TraceRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def of_kind(self, kind: str) -> List[TraceRecord]:
        return [record for record in self.records if record.kind == kind]

    def in_round(self, number: int) -> List[TraceRecord]:
        return [record for record in self.records if record.round == number]


class LoggingTrace(TraceSink):
    '''Emit a one-line description of every record to a logger.

    :param logger: Logger to write to; the module logger by default.
    :param level: Logging level of the messages.
    '''
    def __init__(self,
                 logger: Optional[logging.Logger] = None,
                 level: int = logging.INFO,
                 ):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def append(self, record: TraceRecord) -> None:
        if record.kind == 'ballots':
            self.logger.log(self.level, 'round %d: %s (%d ballots)',
                            record.round, record.title, len(record.ballots))
        elif record.kind == 'summary':
            self.logger.log(self.level, 'round %d: %s', record.round, ', '.join(
                f'{row.candidate} {row.votes} ({row.status})'
                for row in record.rows
            ))
        elif record.kind == 'tiebreak':
            self.logger.log(self.level, 'round %d: tie-break %s: %s',
                            record.round, record.step, dict(record.counts))
        else:
            self.logger.log(self.level, 'round %d: %s %s - %s',
                            record.round, record.event,
                            ', '.join(record.candidates), record.reason)
