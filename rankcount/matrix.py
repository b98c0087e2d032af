'''The pairwise preference matrix.

The matrix is the common input of all pairwise (Condorcet-family) resolvers
in :mod:`rankcount.evaluate.condorcet`. Entry ``[i][j]`` counts the ballots
that rank both candidates ``i`` and ``j`` and prefer ``i``. Candidates left
unranked on a ballot carry no preference information on that ballot (they
are not assumed to be ranked at the bottom).
'''

from typing import Iterable, Iterator, List, Sequence, Tuple

from rankcount.ballot import NormalizedBallot


class PreferenceMatrix:
    '''An immutable square matrix of head-to-head preference counts.

    :param counts: Rows of counts; ``counts[i][j]`` is the number of ballots
        preferring candidate ``i`` to candidate ``j``. The diagonal is
        ignored and stored as zero.
    '''
    def __init__(self, counts: Sequence[Sequence[int]]):
        size = len(counts)
        rows = []
        for i, row in enumerate(counts):
            if len(row) != size:
                raise ValueError(
                    f'preference matrix row {i} has {len(row)} entries,'
                    f' expected {size}'
                )
            rows.append(tuple(0 if i == j else row[j] for j in range(size)))
        self._rows: Tuple[Tuple[int, ...], ...] = tuple(rows)

    @classmethod
    def from_ballots(cls,
                     ballots: Iterable[NormalizedBallot],
                     n_candidates: int,
                     ) -> 'PreferenceMatrix':
        '''Count pairwise preferences on normalized ballots.

        For every ballot and every ordered pair of candidates it ranks, adds
        one to the count of the preferred candidate over the other.
        '''
        counts = [[0] * n_candidates for _ in range(n_candidates)]
        for ballot in ballots:
            ranks = ballot.ranks
            for i in range(n_candidates):
                rank_i = ranks[i]
                if rank_i is None:
                    continue
                for j in range(n_candidates):
                    if i == j:
                        continue
                    rank_j = ranks[j]
                    if rank_j is not None and rank_i < rank_j:
                        counts[i][j] += 1
        return cls(counts)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, i: int) -> Tuple[int, ...]:
        return self._rows[i]

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        return iter(self._rows)

    def __eq__(self, other) -> bool:
        if isinstance(other, PreferenceMatrix):
            return self._rows == other._rows
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f'PreferenceMatrix({self.to_list()!r})'

    @property
    def size(self) -> int:
        return len(self._rows)

    def beats(self, i: int, j: int) -> bool:
        '''Return True if more ballots prefer i to j than j to i.'''
        return self._rows[i][j] > self._rows[j][i]

    def margin(self, i: int, j: int) -> int:
        return self._rows[i][j] - self._rows[j][i]

    def pairwise_wins(self) -> List[Tuple[int, int]]:
        '''Select ordered pairs of candidates where the first beats the second.

        The pairs are listed in row-major order of the matrix.
        '''
        return [
            (i, j)
            for i in range(self.size) for j in range(self.size)
            if i != j and self.beats(i, j)
        ]

    def to_list(self) -> List[List[int]]:
        return [list(row) for row in self._rows]
