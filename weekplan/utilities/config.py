"""Configuration management for the weekly plan service."""
import os
import logging
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Generation Settings
COMPONENT_MEAL_RATIO: Final[float] = float(os.getenv('COMPONENT_MEAL_RATIO', '0.3'))
MAX_NOVELTIES_CAP: Final[int] = int(os.getenv('MAX_NOVELTIES_CAP', '2'))
_seed = os.getenv('RANDOM_SEED')
RANDOM_SEED: Final[Optional[int]] = int(_seed) if _seed else None

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('WEEKPLAN_DATA_DIR', str(BASE_DIR / 'data')))


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
