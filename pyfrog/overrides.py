# -*- coding: utf-8 -*-
"""
Literal identifier lists used to correct and classify frog capture records.

Every entry in this module is a field correction tied to a documented data
defect or to site knowledge that is not stored in the relocation tables.  The
lists are data, not logic: the classification code only ever asks an
``override_table`` to resolve a site id, so a list can be audited or extended
here (or in a CSV loaded with ``load_overrides``) without touching the
pipeline.

Population Type Codes
---------------------
0 bd_naive, 1 translocated, 2 reintroduced, 3 translocated_reintroduced,
4 translocated_naive, 5 post_epizootic_declining, 6 bd_treatment,
7 reintroduced_naive_declining, 8 natural_recovery

Frog Type Codes
---------------
1 translocated, 2 reintroduced, 3 translocated_or_reintroduced, 4 resident
"""

import logging

import pandas as pd

from pyfrog.validation import AmbiguousClassificationError, ValidationError, validate_file_exists

logger = logging.getLogger(__name__)

TRANSLOCATION = 'translocation'
REINTRODUCTION = 'reintroduction'

POPULATION_TYPES = {0: 'bd_naive',
                    1: 'translocated',
                    2: 'reintroduced',
                    3: 'translocated_reintroduced',
                    4: 'translocated_naive',
                    5: 'post_epizootic_declining',
                    6: 'bd_treatment',
                    7: 'reintroduced_naive_declining',
                    8: 'natural_recovery'}

FROG_TYPES = {1: 'translocated',
              2: 'reintroduced',
              3: 'translocated_or_reintroduced',
              4: 'resident'}

# population types whose untyped frogs are all residents
RESIDENT_POPULATION_TYPES = (0, 5, 6, 8)

# ---------------------------------------------------------------------------
# relocation corrections
# ---------------------------------------------------------------------------

# (collect_siteid, pit_tag_ref) pairs entered against the wrong collection site
BAD_RELOCATION_PAIRS = [('72996', '900067000117396'),
                        ('10055', '900043000217381')]

# individual whose relocation type was entered in error
NULL_TYPE_PIT_TAGS = ['900067000119284']

# lab-held frogs captured before release
PRE_RELEASE_SITE_RANGE = (10475, 10477)

# pre-release captures missing from the relocation tables
PRE_RELEASE_SITES = [50183, 70567]

# ---------------------------------------------------------------------------
# population type
# ---------------------------------------------------------------------------

# reintroduced populations whose frogs are absent from the relocation tables
REINTRODUCTION_SITES = [10100, 10101, 10102, 12590, 20196]

POPULATION_TYPE_OVERRIDES = {
    0: [11008, 11009, 11506, 12330, 70413, 72808],
    1: [70279, 70284, 70611],
    3: [70449, 70550],
    4: [70641, 74976],
    5: [10090, 11858, 12141, 21520, 22019],
    6: [10055, 84218, 84226],
    7: [70505, 72093],
    8: [10223, 10225, 50170, 50219]}

# ---------------------------------------------------------------------------
# frog type
# ---------------------------------------------------------------------------

FROG_TYPE_SITES = {'reintroduced': [10100, 10101, 10486],
                   'translocated_or_reintroduced': [72973, 72442],
                   'resident': [21345, 70370, 72008]}

FROG_TYPE_CODES = {'reintroduced': 2,
                   'translocated_or_reintroduced': 3,
                   'resident': 4}

# (site_id, pit_tag_ref) captures that are translocated frogs regardless of
# the relocation record
FROG_TYPE_EXCEPTIONS = [(70449, '900043000211603')]


class override_table():
    '''
    Lookup from site id to an explicit classification code.

    Parameters
    ----------
    code_to_sites : dict
        Maps each code to an iterable of site ids carrying that code.
    name : str
        Label used in log and error messages.

    Raises
    ------
    AmbiguousClassificationError
        If a site id is listed under more than one code.
    '''

    def __init__(self, code_to_sites, name = 'override'):
        self.name = name
        self.site_to_code = {}
        conflicts = {}
        for code, sites in code_to_sites.items():
            for site in sites:
                site = int(site)
                if site in self.site_to_code and self.site_to_code[site] != code:
                    conflicts.setdefault(site, {self.site_to_code[site]}).add(code)
                self.site_to_code[site] = code
        if conflicts:
            detail = ', '.join(f"{site} -> {sorted(codes)}" for site, codes in sorted(conflicts.items()))
            raise AmbiguousClassificationError(
                f"Sites listed under more than one {name} code: {detail}")

    def __contains__(self, site_id):
        return int(site_id) in self.site_to_code

    def __len__(self):
        return len(self.site_to_code)

    def sites(self, code):
        '''Site ids carrying ``code``.'''
        return sorted(site for site, c in self.site_to_code.items() if c == code)

    def resolve(self, site_id, default = None):
        '''Return the override code for ``site_id``, else ``default``.'''
        if pd.isna(site_id):
            return default
        return self.site_to_code.get(int(site_id), default)

    def resolve_series(self, site_ids, defaults):
        '''
        Vectorised ``resolve``.

        Parameters
        ----------
        site_ids : pandas.Series
            Site ids to look up.
        defaults : pandas.Series
            Codes used where a site has no override; aligned with ``site_ids``.

        Returns
        -------
        pandas.Series
            Nullable integer codes.
        '''
        hits = pd.Series(pd.array([self.resolve(s) for s in site_ids], dtype = 'Int64'),
                         index = site_ids.index)
        logger.debug("%s overrides applied to %d of %d sites",
                     self.name, int(hits.notna().sum()), len(site_ids))
        defaults = pd.Series(defaults, index = site_ids.index).astype('Int64')
        return hits.where(hits.notna(), defaults)

    def to_frame(self):
        '''Table of (site_id, code) rows, sorted by site.'''
        rows = sorted(self.site_to_code.items())
        return pd.DataFrame(rows, columns = ['site_id', 'code'])


def population_overrides():
    '''Override table for population types built from the module lists.'''
    return override_table(POPULATION_TYPE_OVERRIDES, name = 'population_type')


def frog_type_overrides():
    '''Override table for frog types of untyped frogs, keyed by site.'''
    by_code = {FROG_TYPE_CODES[label]: sites for label, sites in FROG_TYPE_SITES.items()}
    return override_table(by_code, name = 'frog_type')


def load_overrides(csv_path, name = 'override'):
    '''
    Build an ``override_table`` from a static two column CSV.

    The file needs a ``site_id`` and a ``code`` column, one row per site.

    Raises
    ------
    ValidationError
        If either column is missing.
    AmbiguousClassificationError
        If a site is listed with two different codes.
    '''
    validate_file_exists(csv_path, f"{name} override table")
    table = pd.read_csv(csv_path)
    missing = {'site_id', 'code'} - set(table.columns)
    if missing:
        raise ValidationError(
            f"Override table {csv_path} missing required columns: {', '.join(sorted(missing))}")

    code_to_sites = {}
    for site_id, code in zip(table.site_id, table.code):
        code_to_sites.setdefault(int(code), []).append(int(site_id))
    logger.info("Loaded %d %s overrides from %s", len(table), name, csv_path)
    return override_table(code_to_sites, name = name)
