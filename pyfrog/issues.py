# -*- coding: utf-8 -*-
"""
Known data defect checks.

Each check returns rows of a common issues table so the defects can be
reviewed together and turned into new literal corrections in
``pyfrog.overrides``.  Nothing here changes the data.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

ISSUE_COLUMNS = ['issue', 'site_id', 'pit_tag_ref', 'detail']

# primary periods are assumed to be at least this far apart
MIN_INTERVAL_DAYS = 30


def _issue_frame(issue, site_id, pit_tag_ref, detail):
    return pd.DataFrame({'issue': issue,
                         'site_id': pd.array(site_id, dtype = 'Int64'),
                         'pit_tag_ref': pd.Series(pit_tag_ref, dtype = object).values,
                         'detail': pd.Series(detail, dtype = object).values},
                        columns = ISSUE_COLUMNS)


def duplicate_relocations(relocations):
    '''Individuals with more than one relocation record.'''
    tagged = relocations.dropna(subset = ['pit_tag_ref'])
    counts = tagged.groupby('pit_tag_ref').size()
    dups = counts[counts > 1]
    return _issue_frame('duplicate_relocation',
                        [pd.NA] * len(dups),
                        list(dups.index),
                        [f"{n} relocation records" for n in dups])


def unresolved_population_types(sites):
    '''Sites left without a population type.'''
    missing = sites[sites.population_type.isna()]
    return _issue_frame('unresolved_population_type',
                        list(missing.site_id),
                        [None] * len(missing),
                        ['no relocated frogs and no override'] * len(missing))


def unresolved_frog_types(growth):
    '''Output rows left without a frog type.'''
    missing = growth[growth.frog_type.isna()]
    detail = [f"population_type {p}" for p in missing.population_type]
    return _issue_frame('unresolved_frog_type',
                        list(missing.site_id),
                        list(missing.pit_tag_ref),
                        detail)


def short_intervals(growth, min_days = MIN_INTERVAL_DAYS):
    '''Consecutive captures of an individual closer than ``min_days``.'''
    ordered = growth.sort_values(['pit_tag_ref', 'capture_date'], kind = 'mergesort')
    gap = ordered.groupby('pit_tag_ref')['capture_date'].diff().dt.days
    close = ordered[gap < min_days]
    detail = [f"captured {c:%Y-%m-%d}, {int(d)} days after the previous capture"
              for d, c in zip(gap[close.index], close.capture_date)]
    return _issue_frame('short_interval',
                        list(close.site_id),
                        list(close.pit_tag_ref),
                        detail)


def find_issues(relocations, sites, growth, min_days = MIN_INTERVAL_DAYS):
    '''
    Collect every known defect shape into one table.

    Parameters
    ----------
    relocations : pandas.DataFrame
        Corrected relocation table.
    sites : pandas.DataFrame
        Population type per site.
    growth : pandas.DataFrame
        Formatted growth table.

    Returns
    -------
    pandas.DataFrame
        Columns ``issue``, ``site_id``, ``pit_tag_ref`` and ``detail``.
    '''
    issues = pd.concat([duplicate_relocations(relocations),
                        unresolved_population_types(sites),
                        unresolved_frog_types(growth),
                        short_intervals(growth, min_days)],
                       ignore_index = True)
    for issue, n in issues.groupby('issue').size().items():
        logger.warning("%d %s issues", n, issue)
    return issues
