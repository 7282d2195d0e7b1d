# -*- coding: utf-8 -*-
'''
Module contains the project class that builds the frog growth dataset.'''

import logging
import os

from pyfrog import captures as capture_filter
from pyfrog import classify, extract, formatter, issues, relocations
from pyfrog.logger import setup_logging
from pyfrog.overrides import frog_type_overrides, population_overrides

logger = logging.getLogger(__name__)


def frog_growth(captures, relocation_data, site_overrides = None, frog_overrides = None):
    '''
    Run the transformation steps on extracted tables.

    Parameters
    ----------
    captures : pandas.DataFrame
        Capture lineage (``capture_join.csv``).
    relocation_data : pandas.DataFrame
        Relocation lineage (``relocate_join.csv``).
    site_overrides, frog_overrides : overrides.override_table, optional
        Population type and frog type override tables.

    Returns
    -------
    dict
        Output of every step keyed by name: ``multiple``, ``relocations``,
        ``joined``, ``sites``, ``enriched`` and ``growth``.
    '''
    multiple = capture_filter.multiple_captures(captures)
    corrected = relocations.correct_relocations(relocation_data)
    joined = relocations.join_relocations(multiple, corrected)
    sites = classify.population_type(joined, site_overrides)
    enriched = formatter.add_population_type(joined, sites)
    enriched = classify.frog_type(enriched, frog_overrides)
    enriched = formatter.final_filter(enriched)
    growth = formatter.format_growth(enriched)
    return {'multiple': multiple,
            'relocations': corrected,
            'joined': joined,
            'sites': sites,
            'enriched': enriched,
            'growth': growth}


class growth_project():
    '''
    A class to organise the files of a frog growth dataset build.

    Attributes:
    - project_dir (str): Root directory of the project.
    - data_dir (str): Directory holding the extraction checkpoint.
    - output_dir (str): Directory holding the growth dataset and issues report.
    - capture_path (str): ``capture_join.csv`` checkpoint.
    - relocation_path (str): ``relocate_join.csv`` checkpoint.
    - growth_path (str): ``frog_growth.csv`` output.
    - issues_path (str): ``issues.csv`` output.
    - site_overrides (override_table): Population type overrides.
    - frog_overrides (override_table): Frog type overrides.

    Methods:
    - db_import: Extracts both lineages from the database and writes the checkpoint.
    - load_checkpoint: Reads the checkpoint back.
    - run: Builds and writes the growth dataset and issues report.
    '''

    def __init__(self, project_dir, site_overrides = None, frog_overrides = None, log_level = None):
        '''
        Creates the project directories and loads the override tables.

        Parameters:
        - project_dir (str): The root directory for the project.
        - site_overrides (override_table, optional): Population type overrides,
          defaults to the lists in ``pyfrog.overrides``.
        - frog_overrides (override_table, optional): Frog type overrides,
          defaults to the lists in ``pyfrog.overrides``.
        - log_level (int, optional): If given, logging is configured at this
          level with a log file in the output directory.
        '''
        self.project_dir = project_dir

        self.data_dir = os.path.join(project_dir, 'Data')
        if not os.path.exists(self.data_dir):
            os.makedirs(self.data_dir)

        self.output_dir = os.path.join(project_dir, 'Output')
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir)

        self.capture_path = os.path.join(self.data_dir, 'capture_join.csv')
        self.relocation_path = os.path.join(self.data_dir, 'relocate_join.csv')
        self.growth_path = os.path.join(self.output_dir, 'frog_growth.csv')
        self.issues_path = os.path.join(self.output_dir, 'issues.csv')

        if log_level is not None:
            setup_logging(log_level, os.path.join(self.output_dir, 'frog_growth.log'))

        self.site_overrides = site_overrides if site_overrides is not None else population_overrides()
        self.frog_overrides = frog_overrides if frog_overrides is not None else frog_type_overrides()

        self.stages = {}
        self.issues = None

    def db_import(self, con):
        '''Extract both lineages and write the checkpoint.

        Both queries finish before either file is written, so a failed query
        leaves the previous checkpoint untouched.'''
        captures = extract.extract_captures(con)
        relocation_data = extract.extract_relocations(con)
        relocation_data = relocations.drop_bad_pairs(relocation_data)

        extract.write_checkpoint(captures, self.capture_path)
        extract.write_checkpoint(relocation_data, self.relocation_path)
        return captures, relocation_data

    def load_checkpoint(self):
        '''Read ``capture_join.csv`` and ``relocate_join.csv``.'''
        captures = extract.read_captures(self.capture_path)
        relocation_data = extract.read_relocations(self.relocation_path)
        logger.info("Loaded checkpoint: %d captures, %d relocations",
                    len(captures), len(relocation_data))
        return captures, relocation_data

    def run(self, con = None):
        '''
        Build the growth dataset.

        With a connection the source tables are extracted first; without one
        the build runs from the existing checkpoint.

        Returns
        -------
        pandas.DataFrame
            The growth table written to ``growth_path``.
        '''
        if con is not None:
            captures, relocation_data = self.db_import(con)
        else:
            captures, relocation_data = self.load_checkpoint()

        self.stages = frog_growth(captures, relocation_data,
                                  self.site_overrides, self.frog_overrides)
        growth = self.stages['growth']
        self.issues = issues.find_issues(self.stages['relocations'],
                                         self.stages['sites'],
                                         growth)

        formatter.write_growth(growth, self.growth_path)
        extract.write_checkpoint(self.issues, self.issues_path)
        return growth
