"""Configuration management for the PlanEats API."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# AI Configuration
AI_MODEL: Final[str] = os.getenv('AI_MODEL', 'gemini').lower()  # 'gemini' or 'openai'
GEMINI_API_KEY: Final[str] = os.getenv('GEMINI_API_KEY', '')
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
GEMINI_MODEL: Final[str] = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
AI_REQUEST_TIMEOUT: Final[int] = int(os.getenv('AI_REQUEST_TIMEOUT', '30'))

# Rate limiting (slowapi / limits notation)
RATE_LIMIT: Final[str] = os.getenv('RATE_LIMIT', '100/15minutes')
RATE_LIMIT_STORAGE_URI: Final[str] = os.getenv('RATE_LIMIT_STORAGE_URI', 'memory://')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data'))).resolve()
