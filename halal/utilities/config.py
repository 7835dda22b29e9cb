"""Configuration management for the HalalCheck core."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Product lookup (Open Food Facts)
OFF_BASE_URL: Final[str] = os.getenv('OFF_BASE_URL', 'https://world.openfoodfacts.org').rstrip('/')
HTTP_TIMEOUT: Final[float] = float(os.getenv('HTTP_TIMEOUT', '10'))
USER_AGENT: Final[str] = os.getenv('USER_AGENT', 'HalalCheck/1.0 (+https://world.openfoodfacts.org)')

# Which ingredients_text_<lang> field is preferred when a product has several
INGREDIENTS_LANGUAGE: Final[str] = os.getenv('INGREDIENTS_LANGUAGE', 'ar')

# Logging
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'WARNING').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('HALAL_DATA_DIR', str(BASE_DIR / 'data'))).expanduser()

# PDF report: a TrueType font covering Arabic (e.g. NotoNaskhArabic-Regular.ttf).
# Empty means the built-in Helvetica, which has no Arabic glyphs.
PDF_FONT_PATH: Final[str] = os.getenv('PDF_FONT_PATH', '')
