"""
Shared pytest fixtures for pyfrog tests

This module provides reusable test fixtures for:
- Sample capture/relocation tables
- Temporary project directories
- An in-memory amphibian database
"""

import sqlite3

import numpy as np
import pandas as pd
import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single step")
    config.addinivalue_line("markers", "smoke: quick sanity checks")
    config.addinivalue_line("markers", "integration: full pipeline runs")


@pytest.fixture
def sample_captures():
    """
    Capture table with three individuals

    - 'A' captured three times at site 100, one capture missing length
    - 'B' captured twice at site 100
    - 'C' captured once at site 200

    Returns:
        pd.DataFrame: Capture records in extraction dtypes
    """
    return pd.DataFrame({
        'site_id': pd.array([100, 100, 100, 100, 100, 200], dtype='Int64'),
        'visit_date': pd.to_datetime(['2019-07-01', '2020-07-01', '2021-07-01',
                                      '2019-07-01', '2020-07-15', '2020-07-01']),
        'pit_tag_ref': ['A', 'A', 'A', 'B', 'B', 'C'],
        'tag_new': pd.array([True, False, False, True, False, True], dtype='boolean'),
        'capture_animal_state': ['healthy'] * 6,
        'sex': ['female', 'female', 'female', 'male', 'male', 'female'],
        'length': [45.0, np.nan, 52.0, 40.0, 44.0, 50.0],
        'weight': [8.1, 9.0, 10.2, 6.0, 7.3, 9.9]
    })


@pytest.fixture
def sample_relocations():
    """
    Relocation table in extraction dtypes

    Returns:
        pd.DataFrame: One row per relocated individual
    """
    return pd.DataFrame({
        'collect_siteid': ['300', '300,301', '72996', '10055'],
        'release_siteid1': pd.array([100, 100, 100, 100], dtype='Int64'),
        'release_siteid2': pd.array([pd.NA] * 4, dtype='Int64'),
        'release_date': pd.to_datetime(['2019-06-01', '2019-06-01', '2019-06-01', '2019-06-01']),
        'type': ['translocation', 'translocation', 'reintroduction', 'reintroduction'],
        'pit_tag_ref': ['A', 'Z', '900067000117396', '900043000217381']
    })


def make_capture(site_id, visit_date, pit_tag_ref, length=45.0, weight=8.0):
    """Single complete capture row as a dict"""
    return {'site_id': site_id, 'visit_date': visit_date, 'pit_tag_ref': pit_tag_ref,
            'tag_new': False, 'capture_animal_state': 'healthy', 'sex': 'female',
            'length': length, 'weight': weight}


@pytest.fixture
def temp_project(tmp_path):
    """
    Temporary project directory

    Returns:
        Path: Project directory path
    """
    project_dir = tmp_path / "growth_project"
    project_dir.mkdir()
    return project_dir


def build_database(conn):
    """
    Create and populate the five source relations.

    Sites:
    - 100: translocation destination (frogs collected at 300)
    - 11008: bd naive override site that also received a translocated frog
    - 10476: lab holding site, pre-release captures
    - 21345: listed resident site with no relocations
    """
    conn.executescript("""
        CREATE TABLE visit (id INTEGER PRIMARY KEY, site_id INTEGER, visit_date TEXT);
        CREATE TABLE survey (id INTEGER PRIMARY KEY, visit_id INTEGER, survey_type TEXT);
        CREATE TABLE capture_survey (id INTEGER PRIMARY KEY, survey_id INTEGER,
            pit_tag_ref TEXT, tag_new INTEGER, capture_animal_state TEXT,
            sex TEXT, length REAL, weight REAL);
        CREATE TABLE relocate (id INTEGER PRIMARY KEY, collect_siteid TEXT,
            release_siteid1 INTEGER, release_siteid2 INTEGER, release_date TEXT, type TEXT);
        CREATE TABLE relocate_frog (id INTEGER PRIMARY KEY, relocate_id INTEGER, pit_tag_ref TEXT);
    """)

    visits = [(1, 100, '2019-07-01'), (2, 100, '2020-07-01'), (3, 100, '2021-07-01'),
              (4, 300, '2018-07-01'),
              (5, 11008, '2019-08-01'), (6, 11008, '2020-08-01'),
              (7, 10476, '2018-05-01'), (8, 10476, '2018-06-01'),
              (9, 21345, '2019-08-01'), (10, 21345, '2020-08-01')]
    conn.executemany("INSERT INTO visit VALUES (?, ?, ?)", visits)

    surveys = [(v[0], v[0], 'cmr') for v in visits] + [(11, 2, 'visual')]
    conn.executemany("INSERT INTO survey VALUES (?, ?, ?)", surveys)

    captures = [
        # translocated frog, also caught at its collection site before the move
        (1, 4, '900000000000001', 1, 'healthy', 'female', 40.0, 6.0),
        (2, 1, '900000000000001', 0, 'healthy', 'female', 45.0, 8.0),
        (3, 2, '900000000000001', 0, 'healthy', 'female', 50.0, 9.5),
        (4, 3, '900000000000001', 0, 'healthy', 'female', 53.0, 10.5),
        # second capture in the same primary period is not measured
        (5, 2, '900000000000001', 0, 'healthy', 'female', None, None),
        # resident frog at the translocation site
        (6, 1, '900000000000002', 1, 'healthy', 'male', 41.0, 6.5),
        (7, 3, '900000000000002', 0, 'healthy', 'male', 47.0, 7.9),
        # dead frog is excluded by the query
        (8, 2, '900000000000002', 0, 'dead', 'male', 44.0, 7.0),
        # captured once only
        (9, 2, '900000000000003', 1, 'healthy', 'female', 39.0, 5.9),
        # translocated frog at a bd naive site
        (10, 5, '900000000000004', 1, 'healthy', 'female', 44.0, 7.5),
        (11, 6, '900000000000004', 0, 'healthy', 'female', 49.0, 8.8),
        # lab frog captured before release
        (12, 7, '900000000000005', 1, 'healthy', 'female', 30.0, 3.0),
        (13, 8, '900000000000005', 0, 'healthy', 'female', 31.0, 3.2),
        # resident at a listed resident site
        (14, 9, '900000000000006', 1, 'healthy', 'male', 42.0, 7.0),
        (15, 10, '900000000000006', 0, 'healthy', 'male', 46.0, 7.7),
        # visual survey is not cmr
        (16, 11, '900000000000007', 0, 'healthy', 'male', 46.0, 7.7),
    ]
    conn.executemany("INSERT INTO capture_survey VALUES (?, ?, ?, ?, ?, ?, ?, ?)", captures)

    relocates = [(1, '300', 100, None, '2019-06-15', 'translocation'),
                 (2, '300', 11008, None, '2019-06-15', 'translocation'),
                 (3, '72996', 100, None, '2019-06-15', 'translocation'),
                 (4, '10055', 100, None, '2019-06-15', 'reintroduction')]
    conn.executemany("INSERT INTO relocate VALUES (?, ?, ?, ?, ?, ?)", relocates)

    frogs = [(1, 1, '900000000000001'), (2, 2, '900000000000004'),
             (3, 3, '900067000117396'), (4, 4, '900043000217381')]
    conn.executemany("INSERT INTO relocate_frog VALUES (?, ?, ?)", frogs)
    conn.commit()
    return conn


@pytest.fixture
def amphibian_db():
    """
    In-memory sqlite database with visit, survey, capture_survey, relocate
    and relocate_frog relations

    Returns:
        sqlite3.Connection: Open connection, closed after the test
    """
    conn = sqlite3.connect(':memory:')
    build_database(conn)
    yield conn
    conn.close()
