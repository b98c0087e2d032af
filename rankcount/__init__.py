"""Rankcount - a library for counting ranked-ballot elections.

Rankcount takes ranked ballots as collected by a form or a spreadsheet and
determines the winner of the election under several methods, keeping enough
evidence for the outcome to be audited.

An evaluation usually goes as follows:

-   The candidates are fixed in a :class:`candidate.CandidateRegistry`; their
    order there is the order of rank cells on every ballot.
-   Raw ballots are deduplicated by voter and their ranks compressed by
    the ``ballot`` module.
-   The ``evaluate`` subpackage then determines the winner: by instant runoff
    (ranked-choice voting) working on the ballots directly, or by one of the
    Condorcet-family resolvers working on a pairwise preference matrix from
    the ``matrix`` module.
-   The ``report`` module flattens the results and the round trace collected
    by the ``trace`` module into rows for display.

The :class:`system.Election` object from the :mod:`system` module ties these
steps together for a single election.
"""
