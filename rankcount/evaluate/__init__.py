'''Evaluate the results of ranked-ballot elections.

There are two families of evaluators. The *instant runoff* engine in
:mod:`runoff` counts the ballots round by round, transferring the votes of
eliminated candidates, and produces a round-by-round result. The
*Condorcet-family resolvers* in :mod:`condorcet` only look at the pairwise
preference matrix and produce a winner (if there is a unique one), a ranking
and the intermediate data that led to them.

Neither family treats a missing winner as an error: an unresolved tie or a
Condorcet cycle is a regular outcome reported in the result. Only an invalid
input raises (:class:`rankcount.candidate.ValidationError`).
'''

from rankcount.evaluate.core import *    # noqa
