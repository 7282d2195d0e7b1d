"""
pyfrog Quick Start Example
==========================

This script builds the frog growth dataset from the amphibian database.

Before running:
1. Update the project_dir and db_path variables below
2. Review the override lists in pyfrog/overrides.py, or point the
   override CSV variables at your own tables
"""

import logging
import sqlite3

from pyfrog.growth_project import growth_project
from pyfrog.overrides import load_overrides

# =============================================================================
# CONFIGURATION - Update these paths for your project
# =============================================================================

project_dir = r"C:\path\to\your\project"  # UPDATE THIS
db_path = r"C:\path\to\amphibians.db"     # UPDATE THIS

# Optional override tables (site_id, code); None uses the lists in pyfrog.overrides
population_override_csv = None
frog_type_override_csv = None

# =============================================================================
# STEP 1: Initialize Project
# =============================================================================

site_overrides = None
if population_override_csv is not None:
    site_overrides = load_overrides(population_override_csv, name = 'population_type')

frog_overrides = None
if frog_type_override_csv is not None:
    frog_overrides = load_overrides(frog_type_override_csv, name = 'frog_type')

project = growth_project(project_dir,
                         site_overrides = site_overrides,
                         frog_overrides = frog_overrides,
                         log_level = logging.INFO)

# =============================================================================
# STEP 2: Extract from the database and build the dataset
# =============================================================================

conn = sqlite3.connect(db_path)
try:
    growth = project.run(conn)
finally:
    conn.close()

print(f"Growth dataset: {project.growth_path}")
print(f"Rows: {len(growth)}, individuals: {growth.pit_tag_ref.nunique()}")
print(f"Issues to review: {len(project.issues)} ({project.issues_path})")

# =============================================================================
# STEP 3 (optional): Rebuild from the checkpoint after editing overrides
# =============================================================================

# growth = project.run()
