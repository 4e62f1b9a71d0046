import os

# --- Input table layout ---
PERSON_ID_COLUMN = "PersonID"
SPOUSE_ID_COLUMN = "SpouseID"
FATHER_ID_COLUMN = "FatherID"
MOTHER_ID_COLUMN = "MotherID"
NAME_COLUMN = "Person"

REQUIRED_COLUMNS = (
    PERSON_ID_COLUMN, SPOUSE_ID_COLUMN, FATHER_ID_COLUMN, MOTHER_ID_COLUMN, NAME_COLUMN,
)

CSV_DELIMITER = os.environ.get('HERITAGE_CSV_DELIMITER', ';')
INPUT_ENCODING = "utf-8-sig"

# --- Output ---
NO_RELATIONSHIP_MESSAGE = "No direct or indirect relationship found"
USAGE_EXAMPLE = "Example: heritage-pathfind path/to/file.csv 1 32"

# --- Logging ---
LOG_LEVEL = os.environ.get('HERITAGE_LOG_LEVEL', 'WARNING')
LOG_FILE = os.environ.get('HERITAGE_LOG_FILE')
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
