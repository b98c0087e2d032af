"""Input/output of election data in tabular forms.

This subpackage is structured into modules by data layout. Currently, the
:mod:`rankcount.io.responses` module reads form response tables (one row per
submitted ballot, one rank column per candidate) and writes runoff summaries.
"""
