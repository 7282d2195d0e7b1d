"""
End to end tests of the growth dataset build against an in-memory database
"""

import os
import sqlite3
from pathlib import Path

import pandas as pd
import pytest

from pyfrog import extract
from pyfrog.growth_project import frog_growth, growth_project
from pyfrog.validation import ValidationError


@pytest.mark.integration
class TestExtract:

    def test_capture_query(self, amphibian_db):
        captures = extract.extract_captures(amphibian_db)

        assert list(captures.columns) == extract.CAPTURE_COLUMNS
        assert 'dead' not in set(captures.capture_animal_state)
        # visual survey capture excluded
        assert '900000000000007' not in set(captures.pit_tag_ref)
        assert str(captures.visit_date.dtype).startswith('datetime64')
        ordered = captures.sort_values(extract.CAPTURE_SORT, kind='mergesort')
        assert captures.index.equals(ordered.index)

    def test_relocation_query(self, amphibian_db):
        relocations = extract.extract_relocations(amphibian_db)
        assert list(relocations.columns) == extract.RELOCATION_COLUMNS
        assert len(relocations) == 4

    def test_query_failure_propagates(self):
        conn = sqlite3.connect(':memory:')
        with pytest.raises(Exception):
            extract.extract_captures(conn)
        conn.close()

    def test_checkpoint_round_trip(self, amphibian_db, tmp_path):
        captures = extract.extract_captures(amphibian_db)
        path = str(tmp_path / 'capture_join.csv')
        extract.write_checkpoint(captures, path)
        pd.testing.assert_frame_equal(extract.read_captures(path), captures)

    def test_missing_columns(self):
        with pytest.raises(ValidationError, match='weight'):
            extract.coerce_captures(pd.DataFrame({'site_id': [1]}))


@pytest.mark.integration
class TestGrowthProject:

    @pytest.mark.smoke
    def test_project_layout(self, temp_project):
        project = growth_project(str(temp_project))
        assert os.path.isdir(project.data_dir)
        assert os.path.isdir(project.output_dir)

    def test_run_from_database(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        growth = project.run(amphibian_db)

        for path in [project.capture_path, project.relocation_path,
                     project.growth_path, project.issues_path]:
            assert os.path.exists(path)

        # every individual keeps two or more rows
        assert growth.groupby('pit_tag_ref').size().min() >= 2
        assert set(growth.frog_type.dropna()) <= {1, 2, 3, 4}
        assert set(growth.population_type.dropna()) <= set(range(9))

        tags = set(growth.pit_tag_ref)
        assert '900000000000003' not in tags     # single capture
        assert '900000000000005' not in tags     # lab frog, pre-release site
        assert tags == {'900000000000001', '900000000000002',
                        '900000000000004', '900000000000006'}

    def test_classification(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        growth = project.run(amphibian_db)

        def rows(pit_tag_ref, site_id):
            found = growth[(growth.pit_tag_ref == pit_tag_ref) & (growth.site_id == site_id)]
            assert len(found) > 0
            return found

        # captured at its collection site before the translocation
        assert rows('900000000000001', 300).frog_type.isna().all()
        assert (rows('900000000000001', 100).frog_type == 1).all()
        # bd naive override wins over the translocated frog
        assert (rows('900000000000004', 11008).population_type == 0).all()
        assert (rows('900000000000004', 11008).frog_type == 1).all()
        # listed resident site
        assert (rows('900000000000006', 21345).frog_type == 4).all()

        sites = project.stages['sites'].set_index('site_id').population_type
        assert sites.loc[100] == 1

    def test_relocation_checkpoint_excludes_bad_pairs(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        project.run(amphibian_db)
        relocate_join = pd.read_csv(project.relocation_path, dtype=str)

        assert list(relocate_join.columns) == extract.RELOCATION_COLUMNS
        pairs = set(zip(relocate_join.collect_siteid, relocate_join.pit_tag_ref))
        assert ('72996', '900067000117396') not in pairs
        assert ('10055', '900043000217381') not in pairs

    def test_rerun_is_byte_identical(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        project.run(amphibian_db)
        first = {p: Path(p).read_bytes() for p in [project.capture_path,
                                                   project.relocation_path,
                                                   project.growth_path]}
        project.run(amphibian_db)
        for path, content in first.items():
            assert Path(path).read_bytes() == content

    def test_run_from_checkpoint_matches(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        from_db = project.run(amphibian_db)
        db_bytes = Path(project.growth_path).read_bytes()

        from_checkpoint = project.run()
        pd.testing.assert_frame_equal(from_checkpoint, from_db)
        assert Path(project.growth_path).read_bytes() == db_bytes

    def test_missing_checkpoint(self, temp_project):
        project = growth_project(str(temp_project))
        with pytest.raises(FileNotFoundError):
            project.run()

    def test_issues_report(self, temp_project, amphibian_db):
        project = growth_project(str(temp_project))
        project.run(amphibian_db)
        report = pd.read_csv(project.issues_path, dtype={'pit_tag_ref': str})

        unresolved = report[report.issue == 'unresolved_population_type']
        assert set(unresolved.site_id) == {300, 21345}
        frog_issues = report[report.issue == 'unresolved_frog_type']
        assert '900000000000002' in set(frog_issues.pit_tag_ref)


@pytest.mark.unit
def test_frog_growth_stages(sample_captures, sample_relocations):
    stages = frog_growth(sample_captures, sample_relocations)
    assert set(stages) == {'multiple', 'relocations', 'joined', 'sites', 'enriched', 'growth'}
    assert set(stages['growth'].pit_tag_ref) == {'A', 'B'}
