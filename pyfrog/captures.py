# -*- coding: utf-8 -*-
"""
Restrict capture records to individuals with repeated complete measurements.

Frogs are measured only at their first capture within a primary period, so
later captures in the same period carry null length or weight.  Dropping rows
with any null field therefore collapses each primary period to the single
measured capture.  Individuals are then kept only when they have more than one
complete row; rows with missing data never count towards an individual's
captures.
"""

import logging

logger = logging.getLogger(__name__)


def complete_captures(captures):
    '''Rows of the capture table with no missing field.'''
    complete = captures.dropna(how = 'any')
    logger.info("Dropped %d incomplete capture rows, %d remain",
                len(captures) - len(complete), len(complete))
    return complete.reset_index(drop = True)


def capture_counts(captures, key = 'pit_tag_ref'):
    '''Number of rows per individual.'''
    return captures.groupby(key).size().rename('n_captures')


def repeated_individuals(captures, min_captures = 2, key = 'pit_tag_ref'):
    '''Keep only individuals with at least ``min_captures`` rows.'''
    counts = captures.groupby(key)[key].transform('size')
    return captures[counts >= min_captures].reset_index(drop = True)


def multiple_captures(captures, min_captures = 2):
    '''
    Complete capture rows of individuals captured more than once.

    Parameters
    ----------
    captures : pandas.DataFrame
        Capture table as returned by ``extract.extract_captures``.
    min_captures : int
        Smallest number of complete rows an individual needs to be kept.

    Returns
    -------
    pandas.DataFrame
        New table; ``captures`` is not modified.
    '''
    complete = complete_captures(captures)
    multiple = repeated_individuals(complete, min_captures = min_captures)
    logger.info("%d of %d individuals have %d or more complete captures (%d rows)",
                multiple.pit_tag_ref.nunique(), complete.pit_tag_ref.nunique(),
                min_captures, len(multiple))
    return multiple
