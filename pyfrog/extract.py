# -*- coding: utf-8 -*-
"""
Extract capture and relocation lineages from the amphibian database.

Two queries are run against an open database connection and materialised as
pandas DataFrames:

- **capture lineage**: ``visit`` -> ``survey`` -> ``capture_survey`` restricted
  to capture-mark-recapture surveys and to frogs that were not dead when
  captured.
- **relocation lineage**: ``relocate`` left joined to ``relocate_frog``, one
  row per relocated individual.

Both tables are written to CSV as the canonical checkpoint
(``capture_join.csv`` and ``relocate_join.csv``) so the downstream steps can be
rerun without database access.  Reading a checkpoint restores the same dtypes
the extraction produced, so a run from the checkpoint matches a run from the
database.

The connection lifecycle belongs to the caller; any object ``pandas.read_sql``
accepts (a DBAPI connection such as ``sqlite3`` or a SQLAlchemy connectable)
will do.  Query failures are not caught.

Typical Usage
-------------
>>> import sqlite3
>>> from pyfrog import extract
>>> conn = sqlite3.connect('amphibians.db')
>>> captures = extract.extract_captures(conn)
>>> relocations = extract.extract_relocations(conn)
>>> extract.write_checkpoint(captures, 'Data/capture_join.csv')
"""

import logging

import pandas as pd

from pyfrog.validation import (CAPTURE_COLUMNS, RELOCATION_COLUMNS,
                               validate_capture_data, validate_file_exists,
                               validate_relocation_data)

logger = logging.getLogger(__name__)

CAPTURE_QUERY = """
SELECT visit.site_id,
       visit.visit_date,
       capture_survey.pit_tag_ref,
       capture_survey.tag_new,
       capture_survey.capture_animal_state,
       capture_survey.sex,
       capture_survey.length,
       capture_survey.weight
FROM visit
INNER JOIN survey ON survey.visit_id = visit.id
INNER JOIN capture_survey ON capture_survey.survey_id = survey.id
WHERE survey.survey_type = 'cmr'
  AND capture_survey.capture_animal_state <> 'dead'
ORDER BY visit.site_id, capture_survey.pit_tag_ref, visit.visit_date
"""

RELOCATION_QUERY = """
SELECT relocate.collect_siteid,
       relocate.release_siteid1,
       relocate.release_siteid2,
       relocate.release_date,
       relocate.type,
       relocate_frog.pit_tag_ref
FROM relocate
LEFT JOIN relocate_frog ON relocate_frog.relocate_id = relocate.id
ORDER BY relocate.id, relocate_frog.pit_tag_ref
"""

CAPTURE_SORT = ['site_id', 'pit_tag_ref', 'visit_date']

# CSV conventions shared by every file the pipeline writes
CSV_OPTIONS = {'index': False,
               'na_rep': 'NA',
               'date_format': '%Y-%m-%d',
               'encoding': 'utf-8',
               'lineterminator': '\n'}


def _as_text(values):
    '''Identifiers are text; keep nulls null rather than the string "None".'''
    return values.map(lambda v: None if pd.isna(v) else str(v)).astype(object)


def coerce_captures(captures):
    '''Return a copy of the capture table with its canonical dtypes, sorted
    by site, individual and visit date.'''
    validate_capture_data(captures)
    captures = captures[CAPTURE_COLUMNS].copy()
    captures['site_id'] = pd.to_numeric(captures['site_id']).astype('Int64')
    captures['visit_date'] = pd.to_datetime(captures['visit_date'])
    captures['pit_tag_ref'] = _as_text(captures['pit_tag_ref'])
    captures['tag_new'] = captures['tag_new'].astype('boolean')
    for col in ['capture_animal_state', 'sex']:
        captures[col] = _as_text(captures[col])
    captures['length'] = pd.to_numeric(captures['length']).astype(float)
    captures['weight'] = pd.to_numeric(captures['weight']).astype(float)
    captures = captures.sort_values(CAPTURE_SORT, kind = 'mergesort')
    return captures.reset_index(drop = True)


def coerce_relocations(relocations):
    '''Return a copy of the relocation table with its canonical dtypes.'''
    validate_relocation_data(relocations)
    relocations = relocations[RELOCATION_COLUMNS].copy()
    relocations['collect_siteid'] = _as_text(relocations['collect_siteid'])
    for col in ['release_siteid1', 'release_siteid2']:
        relocations[col] = pd.to_numeric(relocations[col]).astype('Int64')
    relocations['release_date'] = pd.to_datetime(relocations['release_date'])
    relocations['type'] = relocations['type'].astype(object).where(relocations['type'].notna(), None)
    relocations['pit_tag_ref'] = _as_text(relocations['pit_tag_ref'])
    return relocations.reset_index(drop = True)


def extract_captures(con):
    '''
    Run the capture lineage query.

    Parameters
    ----------
    con : DBAPI connection or SQLAlchemy connectable
        Open connection exposing ``visit``, ``survey`` and ``capture_survey``.

    Returns
    -------
    pandas.DataFrame
        One row per capture event with columns ``CAPTURE_COLUMNS``.
    '''
    captures = pd.read_sql(CAPTURE_QUERY, con)
    logger.info("Extracted %d capture records", len(captures))
    return coerce_captures(captures)


def extract_relocations(con):
    '''
    Run the relocation lineage query.

    Parameters
    ----------
    con : DBAPI connection or SQLAlchemy connectable
        Open connection exposing ``relocate`` and ``relocate_frog``.

    Returns
    -------
    pandas.DataFrame
        One row per relocated individual with columns ``RELOCATION_COLUMNS``.
    '''
    relocations = pd.read_sql(RELOCATION_QUERY, con)
    logger.info("Extracted %d relocation records", len(relocations))
    return coerce_relocations(relocations)


def write_checkpoint(data, path):
    '''Write a table as comma separated UTF-8 with a header row.'''
    data.to_csv(path, **CSV_OPTIONS)
    logger.info("Wrote %d rows to %s", len(data), path)
    return path


def read_captures(path):
    '''Read a ``capture_join.csv`` checkpoint.'''
    validate_file_exists(path, "Capture checkpoint")
    captures = pd.read_csv(path,
                           dtype = {'pit_tag_ref': str,
                                    'sex': str,
                                    'capture_animal_state': str})
    return coerce_captures(captures)


def read_relocations(path):
    '''Read a ``relocate_join.csv`` checkpoint.'''
    validate_file_exists(path, "Relocation checkpoint")
    relocations = pd.read_csv(path,
                              dtype = {'collect_siteid': str,
                                       'pit_tag_ref': str,
                                       'type': str})
    return coerce_relocations(relocations)
