'''Replaceable parts of the evaluators.

Components are small functions that evaluators are parametrized with, such as
pairwise win scorers for the Condorcet-family resolvers or the tie-breaking
steps of the instant-runoff engine. Each component module keeps a register of
its functions so that they can be referred to by name.
'''
