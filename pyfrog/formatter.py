# -*- coding: utf-8 -*-
"""
Growth Dataset Formatting Module
================================

Final steps of the pipeline: attach each site's population type to its
captures, drop individuals left with a single capture, and shape the table
into ``frog_growth.csv``.

Output Columns
--------------
site_id, population_type, pit_tag_ref, capture_date, state, sex, length,
weight, frog_type

Notes
-----
- ``capture_date`` is the visit date and ``state`` the capture animal state.
- Codes are written as integers; unresolved codes are written as ``NA``.
- Rows are sorted by site, individual and capture date so reruns on the same
  snapshot produce identical files.
"""

import logging

from pyfrog.extract import CSV_OPTIONS

logger = logging.getLogger(__name__)

OUTPUT_RENAMES = {'visit_date': 'capture_date',
                  'capture_animal_state': 'state'}

OUTPUT_COLUMNS = ['site_id', 'population_type', 'pit_tag_ref', 'capture_date',
                  'state', 'sex', 'length', 'weight', 'frog_type']


def add_population_type(joined, sites):
    '''Attach ``population_type`` to every capture by site.'''
    enriched = joined.merge(sites[['site_id', 'population_type']], on = 'site_id', how = 'left')
    if len(enriched) != len(joined):
        # sites carries one row per site, so this only happens if that was broken upstream
        raise ValueError("Population type table has more than one row per site")
    return enriched


def final_filter(enriched, min_captures = 2):
    '''
    Keep individuals with at least ``min_captures`` rows after enrichment.

    Individuals entering the enrichment already had two or more captures, so
    any individual dropped here lost captures to the pre-release site
    filter; each one is reported.
    '''
    counts = enriched.groupby('pit_tag_ref')['pit_tag_ref'].transform('size')
    keep = counts >= min_captures
    dropped = enriched.loc[~keep, 'pit_tag_ref'].unique()
    if len(dropped) > 0:
        logger.warning("%d individuals fell below %d captures during enrichment: %s",
                       len(dropped), min_captures, ', '.join(map(str, dropped[:10])))
    return enriched[keep].reset_index(drop = True)


def format_growth(enriched):
    '''Rename and select the output columns, sorted for stable output.'''
    growth = enriched.rename(columns = OUTPUT_RENAMES)[OUTPUT_COLUMNS]
    growth = growth.sort_values(['site_id', 'pit_tag_ref', 'capture_date'], kind = 'mergesort')
    return growth.reset_index(drop = True)


def write_growth(growth, path):
    '''Write ``frog_growth.csv``.'''
    growth.to_csv(path, **CSV_OPTIONS)
    logger.info("Wrote %d rows for %d individuals to %s",
                len(growth), growth.pit_tag_ref.nunique(), path)
    return path
