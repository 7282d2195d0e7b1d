# -*- coding: utf-8 -*-
"""
Population type and frog type classification.

Population Type
---------------
A site's population type comes from which relocation types its captured frogs
carry: translocation only (1), reintroduction only (2) or both (3).  Sites
whose reintroduced frogs never made it into the relocation tables are forced
to reintroduction first, then the explicit site lists in
``overrides.POPULATION_TYPE_OVERRIDES`` replace the computed code wherever a
site is listed.  Sites with no relocated frogs and no override stay null.

Frog Type
---------
Each capture gets a frog type, first matching rule wins:

1. relocation type translocation -> 1 (translocated)
2. relocation type reintroduction -> 2 (reintroduced)
3. untyped at a bd naive, post epizootic, bd treatment or natural recovery
   site -> 4 (resident)
4. untyped at a site listed in ``overrides.FROG_TYPE_SITES`` -> that list's code
5. otherwise null, to be resolved by hand

``overrides.FROG_TYPE_EXCEPTIONS`` sets the relocation type of single captures
before the rules run.
"""

import logging

import numpy as np
import pandas as pd

from pyfrog.overrides import (FROG_TYPE_EXCEPTIONS, REINTRODUCTION,
                              REINTRODUCTION_SITES, RESIDENT_POPULATION_TYPES,
                              TRANSLOCATION, frog_type_overrides,
                              population_overrides)

logger = logging.getLogger(__name__)


def _flag(mask):
    return mask.fillna(False).astype(bool)


def site_relocation_flags(joined, reintroduction_sites = REINTRODUCTION_SITES):
    '''
    Presence of each relocation type among a site's captures.

    Returns
    -------
    pandas.DataFrame
        One row per site with boolean ``translocation`` and ``reintroduction``
        columns.
    '''
    pairs = joined[['site_id', 'type']].drop_duplicates().copy()
    pairs['type'] = pairs['type'].astype(object)
    pairs.loc[pairs.site_id.isin(reintroduction_sites), 'type'] = REINTRODUCTION

    typed = pairs.dropna(subset = ['type'])
    flags = pd.DataFrame({'site_id': sorted(pairs.site_id.dropna().unique())})
    for relocation_type in [TRANSLOCATION, REINTRODUCTION]:
        sites = typed.loc[typed['type'] == relocation_type, 'site_id']
        flags[relocation_type] = flags.site_id.isin(sites)
    flags['site_id'] = flags['site_id'].astype('Int64')
    return flags


def base_population_type(flags):
    '''1 translocation only, 2 reintroduction only, 3 both, else null.'''
    trans = flags[TRANSLOCATION].values
    reint = flags[REINTRODUCTION].values
    code = np.select([trans & reint, trans, reint], [3, 1, 2], default = -1)
    base = pd.Series(code, index = flags.index).astype('Int64')
    return base.mask(code < 0)


def population_type(joined, overrides = None, reintroduction_sites = REINTRODUCTION_SITES):
    '''
    Resolve one population type per site.

    Parameters
    ----------
    joined : pandas.DataFrame
        Output of ``relocations.join_relocations``.
    overrides : overrides.override_table, optional
        Explicit site codes; defaults to ``overrides.population_overrides()``.
    reintroduction_sites : list
        Sites forced to reintroduction before the presence flags are computed.

    Returns
    -------
    pandas.DataFrame
        ``site_id`` and nullable integer ``population_type``.
    '''
    if overrides is None:
        overrides = population_overrides()

    flags = site_relocation_flags(joined, reintroduction_sites)
    base = base_population_type(flags)
    sites = pd.DataFrame({'site_id': flags.site_id,
                          'population_type': overrides.resolve_series(flags.site_id, base)})

    unresolved = sites.loc[sites.population_type.isna(), 'site_id']
    if len(unresolved) > 0:
        logger.warning("%d sites have no population type: %s",
                       len(unresolved), ', '.join(map(str, unresolved)))
    logger.info("Classified %d sites", len(sites))
    return sites


def apply_frog_type_exceptions(enriched, exceptions = FROG_TYPE_EXCEPTIONS):
    '''Force the relocation type of single (site_id, pit_tag_ref) captures to translocation.'''
    enriched = enriched.copy()
    enriched['type'] = enriched['type'].astype(object)
    for site_id, pit_tag_ref in exceptions:
        hit = _flag((enriched.site_id == site_id) & (enriched.pit_tag_ref == pit_tag_ref))
        enriched.loc[hit, 'type'] = TRANSLOCATION
    return enriched


def frog_type(enriched, site_overrides = None, exceptions = FROG_TYPE_EXCEPTIONS):
    '''
    Resolve a frog type for every capture.

    Parameters
    ----------
    enriched : pandas.DataFrame
        Captures with relocation ``type`` and ``population_type`` columns.
    site_overrides : overrides.override_table, optional
        Frog type codes for untyped frogs by site; defaults to
        ``overrides.frog_type_overrides()``.
    exceptions : list of tuple
        (site_id, pit_tag_ref) captures forced to translocation.

    Returns
    -------
    pandas.DataFrame
        Copy of ``enriched`` with a nullable integer ``frog_type`` column.
    '''
    if site_overrides is None:
        site_overrides = frog_type_overrides()

    enriched = apply_frog_type_exceptions(enriched, exceptions)
    typ = enriched['type']
    untyped = typ.isna()
    resident_site = _flag(enriched['population_type'].isin(RESIDENT_POPULATION_TYPES))
    site_code = site_overrides.resolve_series(enriched['site_id'], pd.NA)

    frog = pd.Series(pd.NA, index = enriched.index, dtype = 'Int64')
    rules = [(_flag(typ == TRANSLOCATION), 1),
             (_flag(typ == REINTRODUCTION), 2),
             (untyped & resident_site, 4)]
    for mask, code in rules:
        frog[mask & frog.isna()] = code

    listed = untyped & _flag(site_code.notna()) & frog.isna()
    frog[listed] = site_code[listed]

    enriched['frog_type'] = frog
    n_missing = int(frog.isna().sum())
    if n_missing:
        logger.warning("%d captures have no frog type", n_missing)
    return enriched
