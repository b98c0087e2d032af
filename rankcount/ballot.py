'''Ballot records and their normalization.

Ballots arrive as :class:`RawBallot` records: a voter identifier and one
raw rank cell per candidate, in candidate (column) order. A raw cell may be
empty, non-numeric or out of range; such cells are treated as unranked for
that candidate and never invalidate the whole ballot.

Before any evaluation, raw ballots are normalized by
:func:`normalize_ballots`:

-   Ballots are deduplicated by voter identifier. A later ballot for the same
    voter fully replaces the earlier one (no merging).
-   Ranks are compressed so that the filled positions of each ballot carry
    consecutive ranks starting at 1, e.g. ``(1, 2, 3, None, 5)`` becomes
    ``(1, 2, 3, None, 4)``. Candidate positions are preserved and unranked
    candidates stay unranked.

Equal raw ranks on a single ballot are not an error: compression orders such
candidates by their column (candidate index) order, which makes the earlier
candidate the preferred one. This is the only tie rule applied to ballots.
'''

import math
import logging
import dataclasses
from numbers import Real
from typing import Any, Collection, Dict, Iterable, List, Optional, \
                   Sequence, Tuple

from rankcount.candidate import ValidationError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RawBallot:
    '''A ballot as submitted, before normalization.

    :param voter_id: Identifier of the voter. Ballots sharing the identifier
        are considered resubmissions.
    :param ranks: Raw rank cells, one per candidate in candidate order. Any
        value is accepted; see :func:`parse_rank` for what counts as a rank.
    '''
    voter_id: str
    ranks: Tuple[Any, ...]


@dataclasses.dataclass(frozen=True)
class NormalizedBallot:
    '''A deduplicated ballot with compressed ranks.

    :param voter_id: Identifier of the voter.
    :param ranks: Compressed ranks, one per candidate in candidate order;
        None for unranked candidates. The filled values are exactly
        ``1..k`` for a ballot ranking ``k`` candidates.
    :param order: Ingestion order (0-based) of the raw ballot this one was
        built from.
    '''
    voter_id: str
    ranks: Tuple[Optional[int], ...]
    order: int = 0

    @property
    def preferences(self) -> Tuple[int, ...]:
        '''Ranked candidate indices, most preferred first.'''
        return tuple(sorted(
            (i for i, rank in enumerate(self.ranks) if rank is not None),
            key=self.ranks.__getitem__,
        ))

    @property
    def n_ranked(self) -> int:
        return sum(1 for rank in self.ranks if rank is not None)

    def choice(self, position: int) -> Optional[int]:
        '''Return the candidate index at the given 1-based preference.

        Negative positions count from the last ranked candidate (-1 is the
        last filled rank). Returns None if the ballot ranks fewer candidates.
        '''
        prefs = self.preferences
        if position > 0 and position <= len(prefs):
            return prefs[position - 1]
        elif position < 0 and -position <= len(prefs):
            return prefs[position]
        else:
            return None

    def first_active(self, eliminated: Collection[int]) -> Optional[int]:
        '''Return the most preferred candidate that is not eliminated.

        :param eliminated: Indices of eliminated candidates.
        :returns: A candidate index, or None if the ballot is exhausted.
        '''
        for cand_i in self.preferences:
            if cand_i not in eliminated:
                return cand_i
        return None

    def is_exhausted(self, eliminated: Collection[int]) -> bool:
        return self.first_active(eliminated) is None


def parse_rank(cell: Any, n_candidates: int) -> Optional[int]:
    '''Interpret a raw rank cell.

    Integers, integral floats and strings holding either are accepted. The
    rank must lie between 1 and the number of candidates.

    :param cell: The raw cell value.
    :param n_candidates: Number of candidates in the election.
    :returns: The rank, or None if the cell is empty or malformed.
    '''
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, str):
        cell = cell.strip()
        if not cell:
            return None
        try:
            cell = int(cell)
        except ValueError:
            try:
                cell = float(cell)
            except ValueError:
                return None
    if not isinstance(cell, Real):
        return None
    if isinstance(cell, float) and (math.isnan(cell) or math.isinf(cell)):
        return None
    if int(cell) != cell:
        return None
    rank = int(cell)
    if 1 <= rank <= n_candidates:
        return rank
    return None


def compress_ranks(ranks: Sequence[Optional[int]]
                   ) -> Tuple[Optional[int], ...]:
    '''Reassign the filled ranks to consecutive integers starting at 1.

    The sort is stable over candidate positions, so equal ranks are resolved
    in favour of the candidate listed first.
    '''
    filled = sorted(
        (i for i, rank in enumerate(ranks) if rank is not None),
        key=ranks.__getitem__,
    )
    compressed: List[Optional[int]] = [None] * len(ranks)
    for new_rank, cand_i in enumerate(filled, start=1):
        compressed[cand_i] = new_rank
    return tuple(compressed)


def deduplicate(ballots: Iterable[RawBallot]) -> List[Tuple[int, RawBallot]]:
    '''Keep only the latest ballot of every voter.

    :param ballots: Raw ballots in ingestion order.
    :returns: Pairs of ingestion order and ballot. Each voter keeps the
        position of their first ballot in the output but the contents of
        their last one.
    '''
    kept: Dict[str, Tuple[int, RawBallot]] = {}
    for order, ballot in enumerate(ballots):
        if ballot.voter_id in kept:
            logger.info('replacing earlier ballot of voter %r',
                        ballot.voter_id)
        kept[ballot.voter_id] = (order, ballot)
    return list(kept.values())


def normalize_ballots(ballots: Iterable[RawBallot],
                      n_candidates: int,
                      ) -> List[NormalizedBallot]:
    '''Deduplicate raw ballots and compress their ranks.

    :param ballots: Raw ballots in ingestion order.
    :param n_candidates: Number of candidates in the election. Ballots with
        fewer cells are treated as leaving the remaining candidates unranked.
    :raises ValidationError: If there are no candidates, no ballots, or a
        ballot has more cells than there are candidates.
    '''
    if n_candidates <= 0:
        raise ValidationError('no candidates given')
    ballots = list(ballots)
    if not ballots:
        raise ValidationError('no ballots given')
    normalized = []
    for order, ballot in deduplicate(ballots):
        cells = tuple(ballot.ranks)
        if len(cells) > n_candidates:
            raise ValidationError(
                f'ballot of voter {ballot.voter_id!r} has {len(cells)}'
                f' rank cells for {n_candidates} candidates'
            )
        cells += (None, ) * (n_candidates - len(cells))
        ranks = [parse_rank(cell, n_candidates) for cell in cells]
        for cell, rank in zip(cells, ranks):
            if rank is None and cell not in (None, ''):
                logger.debug('voter %r: treating cell %r as unranked',
                             ballot.voter_id, cell)
        normalized.append(NormalizedBallot(
            voter_id=ballot.voter_id,
            ranks=compress_ranks(ranks),
            order=order,
        ))
    return normalized
