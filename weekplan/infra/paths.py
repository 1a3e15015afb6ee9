from pathlib import Path
from weekplan.utilities.config import DATA_DIR

# Centralized data file names (single source of truth)
RECIPES_FILENAME = 'recipes.json'
COMPONENTS_FILENAME = 'components.json'
FAMILIES_FILENAME = 'families.json'
TEMPLATES_FILENAME = 'templates.json'
PLANS_FILENAME = 'plans.json'


def data_file(name: str, data_dir: Path = None) -> Path:
    return (Path(data_dir or DATA_DIR) / name).resolve()


__all__ = ['DATA_DIR', 'RECIPES_FILENAME', 'COMPONENTS_FILENAME', 'FAMILIES_FILENAME',
           'TEMPLATES_FILENAME', 'PLANS_FILENAME', 'data_file']
