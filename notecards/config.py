"""Environment-driven settings for flashcard generation.

Values are read once at import time. A ``.env`` file in the working directory
is loaded first so local overrides do not need to be exported.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# auto | enriched | baseline
ANALYZER_MODE = os.getenv('NOTECARDS_ANALYZER', 'auto').lower()

BASELINE_MAX_CARDS = int(os.getenv('NOTECARDS_BASELINE_MAX_CARDS', '25'))
ENRICHED_MAX_CARDS = int(os.getenv('NOTECARDS_ENRICHED_MAX_CARDS', '30'))

BASELINE_MAX_KEYPHRASES = int(os.getenv('NOTECARDS_BASELINE_MAX_KEYPHRASES', '20'))
ENRICHED_MAX_KEYPHRASES = int(os.getenv('NOTECARDS_ENRICHED_MAX_KEYPHRASES', '25'))

MIN_SECTION_LENGTH = int(os.getenv('NOTECARDS_MIN_SECTION_LENGTH', '10'))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'json')
LOG_FILE_PATH = os.getenv('LOG_FILE_PATH')
LOG_MAX_SIZE = int(os.getenv('LOG_MAX_SIZE', str(10 * 1024 * 1024)))
LOG_MAX_FILES = int(os.getenv('LOG_MAX_FILES', '7'))
