import sys
import os
import fractions

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import rankcount.ballot
from rankcount.ballot import NormalizedBallot, RawBallot
from rankcount.candidate import ValidationError


@pytest.mark.parametrize('cell, expected', [
    (1, 1),
    (3, 3),
    ('1', 1),
    (' 2 ', 2),
    ('2.0', 2),
    (2.0, 2),
    (fractions.Fraction(2), 2),
    (2.5, None),
    ('abc', None),
    ('', None),
    ('   ', None),
    (None, None),
    (0, None),
    (4, None),
    (-1, None),
    (True, None),
    (float('nan'), None),
    ('inf', None),
    ([1], None),
])
def test_parse_rank(cell, expected):
    assert rankcount.ballot.parse_rank(cell, 3) == expected


@pytest.mark.parametrize('ranks, expected', [
    ((1, 2, 3, None, 5), (1, 2, 3, None, 4)),
    ((3, None, 1), (2, None, 1)),
    ((None, None), (None, None)),
    ((1, 1, 2), (1, 2, 3)),
    ((2, 1, 1), (3, 1, 2)),
    ((5, 9, 7), (1, 3, 2)),
])
def test_compress_ranks(ranks, expected):
    assert rankcount.ballot.compress_ranks(ranks) == expected


def test_compressed_ranks_consecutive():
    for ranks in [(4, None, 2, 2, 9), (None, 1, None), (3, 3, 3)]:
        compressed = rankcount.ballot.compress_ranks(ranks)
        filled = sorted(rank for rank in compressed if rank is not None)
        assert filled == list(range(1, len(filled) + 1))
        assert [r is None for r in compressed] == [r is None for r in ranks]


def test_ballot_preferences():
    ballot = NormalizedBallot('v', (2, None, 1))
    assert ballot.preferences == (2, 0)
    assert ballot.n_ranked == 2
    assert ballot.choice(1) == 2
    assert ballot.choice(2) == 0
    assert ballot.choice(3) is None
    assert ballot.choice(-1) == 0
    assert ballot.choice(-3) is None
    assert ballot.first_active(set()) == 2
    assert ballot.first_active({2}) == 0
    assert ballot.is_exhausted({0, 2})
    assert not ballot.is_exhausted({1, 2})


def test_empty_ballot():
    ballot = NormalizedBallot('v', (None, None))
    assert ballot.preferences == ()
    assert ballot.choice(1) is None
    assert ballot.choice(-1) is None
    assert ballot.is_exhausted(set())


def test_deduplicate_latest_wins():
    first = RawBallot('v1', (1, 2))
    other = RawBallot('v2', (2, 1))
    resubmitted = RawBallot('v1', (2, 1))
    deduped = rankcount.ballot.deduplicate([first, other, resubmitted])
    assert deduped == [(2, resubmitted), (1, other)]


def test_normalize():
    ballots = rankcount.ballot.normalize_ballots([
        RawBallot('Ann', ('1', '2', 'x')),
        RawBallot('Ben', (3, '', 1)),
        RawBallot('Cid', ('2', '2', '1')),
        RawBallot('Ann', (None, 1, 4)),
    ], 3)
    assert [ballot.voter_id for ballot in ballots] == ['Ann', 'Ben', 'Cid']
    assert [ballot.ranks for ballot in ballots] == [
        (None, 1, None),
        (2, None, 1),
        (2, 3, 1),
    ]
    assert [ballot.order for ballot in ballots] == [3, 1, 2]


def test_normalize_short_ballot():
    ballots = rankcount.ballot.normalize_ballots(
        [RawBallot('v', ('2', '1'))], 4
    )
    assert ballots[0].ranks == (2, 1, None, None)


def test_normalize_idempotent():
    raw = [RawBallot('a', (3, None, 1)), RawBallot('b', ('x', 2, 2))]
    once = rankcount.ballot.normalize_ballots(raw, 3)
    twice = rankcount.ballot.normalize_ballots(
        [RawBallot(b.voter_id, b.ranks) for b in once], 3
    )
    assert [b.ranks for b in once] == [b.ranks for b in twice]


@pytest.mark.parametrize('ballots, n_candidates', [
    ([RawBallot('v', (1, ))], 0),
    ([], 3),
    ([RawBallot('v', (1, 2, 3, 4))], 3),
])
def test_normalize_invalid(ballots, n_candidates):
    with pytest.raises(ValidationError):
        rankcount.ballot.normalize_ballots(ballots, n_candidates)
