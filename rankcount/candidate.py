'''Candidate specifications and the candidate registry.

Candidates are identified by their position in the registry. The index is
the stable key used by every rank array, pairwise matrix and round state in
Rankcount, so a registry is built once per election and never changes.
'''

import dataclasses
from typing import Iterable, Iterator, List, Tuple, Union

from rankcount.persist import simple_serialization


class ValidationError(Exception):
    '''The election input is invalid and cannot be evaluated.

    E.g. an empty candidate list, duplicate candidate names or no ballots.
    '''
    pass


@dataclasses.dataclass(frozen=True)
class Candidate:
    '''A candidate standing for the election.

    :param index: Position of the candidate in the registry (0-based). This
        is also the position of the candidate's rank on every ballot.
    :param name: Unique name of the candidate.
    '''
    index: int
    name: str

    def __str__(self) -> str:
        return self.name


@simple_serialization
class CandidateRegistry:
    '''An ordered, indexed and immutable list of candidates.

    :param names: Candidate names in ballot column order.
    :raises ValidationError: If there are no candidates or some names are
        blank or repeated.
    '''
    def __init__(self, names: Iterable[str]):
        names = [str(name).strip() for name in names]
        if not names:
            raise ValidationError('no candidates given')
        blank = [i for i, name in enumerate(names) if not name]
        if blank:
            raise ValidationError(f'blank candidate names at columns {blank}')
        seen = set()
        for name in names:
            if name in seen:
                raise ValidationError(f'duplicate candidate name: {name}')
            seen.add(name)
        self._candidates: Tuple[Candidate, ...] = tuple(
            Candidate(i, name) for i, name in enumerate(names)
        )
        self._by_name = {cand.name: cand for cand in self._candidates}

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self._candidates[index]

    def __contains__(self, item: Union[str, Candidate]) -> bool:
        if isinstance(item, Candidate):
            return self._by_name.get(item.name) == item
        return item in self._by_name

    def __repr__(self) -> str:
        return f'CandidateRegistry({self.names!r})'

    @property
    def names(self) -> List[str]:
        '''Candidate names in index order.'''
        return [cand.name for cand in self._candidates]

    def by_name(self, name: str) -> Candidate:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f'unknown candidate: {name}')

    def index_of(self, name: str) -> int:
        return self.by_name(name).index
