"""
Input validation utilities for pyfrog
"""
import os

CAPTURE_COLUMNS = ['site_id', 'visit_date', 'pit_tag_ref', 'tag_new',
                   'capture_animal_state', 'sex', 'length', 'weight']

RELOCATION_COLUMNS = ['collect_siteid', 'release_siteid1', 'release_siteid2',
                      'release_date', 'type', 'pit_tag_ref']

class ValidationError(Exception):
    """Custom exception for validation errors"""
    pass

class MultiplicityError(ValidationError):
    """A join changed how many rows an individual carries"""
    pass

class AmbiguousClassificationError(ValidationError):
    """A site resolves to more than one classification code"""
    pass

def _check_columns(data, required_columns, description):
    missing_cols = [c for c in required_columns if c not in data.columns]
    if missing_cols:
        raise ValidationError(
            f"{description} missing required columns: {', '.join(missing_cols)}. "
            f"Expected columns: {', '.join(required_columns)}"
        )

def validate_capture_data(capture_data):
    """
    Validate the capture table has the columns the capture query returns.

    Parameters
    ----------
    capture_data : pandas.DataFrame
        Capture table to validate

    Raises
    ------
    ValidationError
        If required columns are missing

    Returns
    -------
    bool
        True if validation passes
    """
    _check_columns(capture_data, CAPTURE_COLUMNS, "Capture data")
    return True

def validate_relocation_data(relocation_data):
    """
    Validate the relocation table has the columns the relocation query returns.

    Parameters
    ----------
    relocation_data : pandas.DataFrame
        Relocation table to validate

    Raises
    ------
    ValidationError
        If required columns are missing

    Returns
    -------
    bool
        True if validation passes
    """
    _check_columns(relocation_data, RELOCATION_COLUMNS, "Relocation data")

    # values other than the two relocation types mean the vocabulary changed upstream
    valid_types = {'translocation', 'reintroduction', 'NA'}
    invalid_types = set(relocation_data['type'].dropna().unique()) - valid_types
    if invalid_types:
        raise ValidationError(
            f"Invalid relocation type values found: {', '.join(sorted(map(str, invalid_types)))}. "
            f"Valid values: translocation, reintroduction"
        )

    return True

def validate_file_exists(file_path, file_description="File"):
    """
    Check if a file exists and is readable.

    Parameters
    ----------
    file_path : str
        Path to file
    file_description : str
        Description of file for error message

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    PermissionError
        If file exists but isn't readable

    Returns
    -------
    bool
        True if file exists and is readable
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(
            f"{file_description} not found: {file_path}"
        )

    if not os.access(file_path, os.R_OK):
        raise PermissionError(
            f"{file_description} exists but is not readable: {file_path}"
        )

    return True
