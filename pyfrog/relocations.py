# -*- coding: utf-8 -*-
"""
Correct relocation records and attach them to repeated captures.

A relocation record describes the movement of one individual: the site(s) it
was collected from (``collect_siteid`` holds up to three comma separated site
ids), where it was released, when, and whether the movement was a
translocation (wild frogs moved between sites) or a reintroduction (captive
reared frogs released).

The join between captures and relocations assumes one effective relocation
record per individual.  Known bad records are removed before the join and the
join itself is checked, because a second record for an individual would
duplicate every one of its captures.

The correction rules run in a fixed order, each seeing the result of the
previous one:

1. left join captures to relocations on ``pit_tag_ref``
2. null ``type`` for captures made at the frog's own collection site
3. null ``type`` for individuals in ``NULL_TYPE_PIT_TAGS``
4. treat the string ``"NA"`` in ``type`` as null
5. drop captures at sites in ``PRE_RELEASE_SITE_RANGE`` (closed range)
6. drop captures at ``PRE_RELEASE_SITES``
"""

import logging

import pandas as pd

from pyfrog.overrides import (BAD_RELOCATION_PAIRS, NULL_TYPE_PIT_TAGS,
                              PRE_RELEASE_SITE_RANGE, PRE_RELEASE_SITES,
                              REINTRODUCTION, TRANSLOCATION)
from pyfrog.validation import MultiplicityError

logger = logging.getLogger(__name__)

COLLECT_COLUMNS = ['collect_siteid1', 'collect_siteid2', 'collect_siteid3']


def drop_bad_pairs(relocations, bad_pairs = BAD_RELOCATION_PAIRS):
    '''Remove relocation rows matching a literal (collect_siteid, pit_tag_ref) pair.'''
    keep = pd.Series(True, index = relocations.index)
    for collect_siteid, pit_tag_ref in bad_pairs:
        hit = (relocations.collect_siteid == collect_siteid) & (relocations.pit_tag_ref == pit_tag_ref)
        if hit.any():
            logger.debug("Removing relocation of %s from site %s", pit_tag_ref, collect_siteid)
        keep &= ~hit
    return relocations[keep].reset_index(drop = True)


def _site_or_null(value):
    if pd.isna(value):
        return None
    value = str(value).strip()
    return value if value else None


def split_collect_sites(relocations):
    '''
    Split ``collect_siteid`` into ``collect_siteid1..3``.

    Values are left aligned; absent trailing columns are null.  The original
    ``collect_siteid`` column is replaced.
    '''
    lists = relocations['collect_siteid'].map(lambda v: [] if pd.isna(v) else str(v).split(','))
    parts = pd.DataFrame(lists.tolist(), index = relocations.index)
    if parts.shape[1] > len(COLLECT_COLUMNS):
        extra = parts.iloc[:, len(COLLECT_COLUMNS):].notna().any(axis = 1)
        logger.warning("%d relocations list more than %d collection sites, extra sites ignored",
                       int(extra.sum()), len(COLLECT_COLUMNS))
    parts = parts.reindex(columns = range(len(COLLECT_COLUMNS)))

    split = pd.DataFrame(index = relocations.index)
    for i, col in enumerate(COLLECT_COLUMNS):
        split[col] = pd.to_numeric(parts[i].map(_site_or_null)).astype('Int64')

    rest = relocations.drop(columns = 'collect_siteid')
    return pd.concat([split, rest], axis = 1)


def correct_relocations(relocations, bad_pairs = BAD_RELOCATION_PAIRS):
    '''
    Remove known bad relocation rows and split the collection site list.

    Parameters
    ----------
    relocations : pandas.DataFrame
        Relocation table as returned by ``extract.extract_relocations``.
    bad_pairs : list of tuple
        (collect_siteid, pit_tag_ref) pairs to remove.

    Returns
    -------
    pandas.DataFrame
        New table with ``collect_siteid1..3`` in place of ``collect_siteid``.
    '''
    corrected = drop_bad_pairs(relocations, bad_pairs)
    logger.info("Removed %d known bad relocation rows", len(relocations) - len(corrected))
    return split_collect_sites(corrected)


def check_join_multiplicity(before, after, key = 'pit_tag_ref'):
    '''
    Raise ``MultiplicityError`` if a join changed any individual's row count.

    A left join against a table with one row per individual must not add
    rows; if it did, an individual carries more than one relocation record.
    '''
    counts_before = before.groupby(key).size()
    counts_after = after.groupby(key).size().reindex(counts_before.index, fill_value = 0)
    changed = counts_before.index[counts_before != counts_after]
    if len(changed) > 0:
        raise MultiplicityError(
            f"{len(changed)} individuals changed row count in the relocation join "
            f"(more than one relocation record?): {', '.join(map(str, changed[:10]))}")
    return True


def at_collection_site(joined):
    '''True where the capture site is one of the frog's collection sites.'''
    matches = joined[COLLECT_COLUMNS].eq(joined['site_id'], axis = 0)
    return matches.fillna(False).astype(bool).any(axis = 1)


def join_relocations(captures, relocations):
    '''
    Attach corrected relocation records to captures and apply the type
    corrections.

    Parameters
    ----------
    captures : pandas.DataFrame
        Output of ``captures.multiple_captures``.
    relocations : pandas.DataFrame
        Output of ``correct_relocations``.

    Returns
    -------
    pandas.DataFrame
        One row per capture with the relocation columns added.

    Raises
    ------
    MultiplicityError
        If an individual has more than one corrected relocation record.
    '''
    joined = captures.merge(relocations, on = 'pit_tag_ref', how = 'left')
    check_join_multiplicity(captures, joined)
    joined['type'] = joined['type'].astype(object)

    # a capture at the frog's own collection site is not an observation of a relocated frog
    relocated = joined['type'].isin([TRANSLOCATION, REINTRODUCTION])
    at_origin = relocated & at_collection_site(joined) & joined['release_date'].notna()
    joined.loc[at_origin, 'type'] = None
    logger.info("Cleared relocation type on %d captures made at the collection site", int(at_origin.sum()))

    bad_type = joined['pit_tag_ref'].isin(NULL_TYPE_PIT_TAGS)
    joined.loc[bad_type, 'type'] = None

    joined.loc[joined['type'] == 'NA', 'type'] = None

    lo, hi = PRE_RELEASE_SITE_RANGE
    pre_release = joined['site_id'].between(lo, hi) | joined['site_id'].isin(PRE_RELEASE_SITES)
    pre_release = pre_release.fillna(False).astype(bool)
    logger.info("Dropped %d pre-release captures", int(pre_release.sum()))
    return joined[~pre_release].reset_index(drop = True)
