"""Configuration management for the Kondate planner."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv()

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Plan identifiers
PLAN_ID_LENGTH: Final[int] = int(os.getenv('PLAN_ID_LENGTH', '6'))
PLAN_ID_COOKIE: Final[str] = os.getenv('PLAN_ID_COOKIE', 'currentMealPlanId')

# Status notices kept in memory for polling clients
STATUS_BUFFER_SIZE: Final[int] = int(os.getenv('STATUS_BUFFER_SIZE', '300'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('KONDATE_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
STATIC_DIR: Final[Path] = BASE_DIR / 'static'
TEMPLATES_DIR: Final[Path] = BASE_DIR / 'templates'
