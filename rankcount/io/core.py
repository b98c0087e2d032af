"""Shared functionality for election file I/O. Internal."""

from __future__ import annotations

import dataclasses
import typing
from typing import Any, List, Tuple, Callable, Iterable, TextIO

from rankcount.ballot import RawBallot


class ParseError(Exception):
    """An input that is invalid according to the given format was detected."""
    pass


@dataclasses.dataclass
class ElectionData:
    """A container for data returnable from an election file."""
    candidates: List[str]
    ballots: List[RawBallot]


def loaders(line_loader: Callable[..., ElectionData]
            ) -> Tuple[Callable[..., ElectionData],
                       Callable[..., ElectionData]]:
    """Create load() and loads() functions from an iterating function."""
    return_annot = typing.get_type_hints(line_loader).get('return')
    if return_annot is None:
        return_annot = Any

    def load(file: TextIO, **kwargs) -> return_annot:
        return line_loader(file, **kwargs)

    def loads(text: str, **kwargs) -> return_annot:
        return line_loader(iter(text.split('\n')), **kwargs)

    return load, loads


def dumpers(line_dumper: Callable[..., Iterable[str]]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a line generator function."""

    def dump(out_file: TextIO, *args, **kwargs) -> None:
        for line in line_dumper(*args, **kwargs):
            if not line.endswith('\n'):
                line += '\n'
            out_file.write(line)

    def dumps(*args, **kwargs) -> str:
        return ''.join(
            line + ('' if line.endswith('\n') else '\n')
            for line in line_dumper(*args, **kwargs)
        )

    return dump, dumps
