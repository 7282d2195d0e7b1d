__version__ = '0.1.0'

# Import the submodules first that have no dependencies
from .validation import *
from .overrides import *

# Extraction and the transformation steps, in pipeline order
from .extract import *
from .captures import *
from .relocations import *
from .classify import *
from .formatter import *
from .issues import *

# Finally, import the growth_project class, which depends on all of the above
from .growth_project import *
