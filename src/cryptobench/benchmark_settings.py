"""
Local benchmark settings.

This module defines `LocalSettings`, a container for the location of the JMH
results document, the baseline provider, and how the hierarchy is labelled
and sorted, loaded from `.cryptobench/settings.yaml`. It also provides
`load_local_settings()` to parse the YAML file and return a `LocalSettings`
object.
"""

from dataclasses import dataclass
from pathlib import Path
import logging
import yaml

logger = logging.getLogger(__name__)

LOCAL_SETTINGS_FILE = Path('.cryptobench/settings.yaml')

@dataclass
class LocalSettings:
    """Stores local configuration loaded from `.cryptobench/settings.yaml`.

    Attributes:
        base_path (str):
            Directory or http(s) base URL holding the results document.
        results_file (str):
            Name of the results document.
        baseline_provider (str):
            Provider compared against, matched case insensitively.
        root_label (str):
            Name of the hierarchy root.
        case_sensitive (bool):
            Whether hierarchy siblings are ordered case sensitively.
    """
    base_path: str = '.'
    results_file: str = 'results.json'
    baseline_provider: str = 'BC'
    root_label: str = 'All Benchmarks'
    case_sensitive: bool = True

def _resolve_base_path(base_path: str, working_dir: Path) -> str:
    if base_path.startswith(('http://', 'https://')):
        return base_path
    path = Path(base_path)
    return str(path if path.is_absolute() else working_dir / path)

def load_local_settings(working_dir: Path = Path('.')) -> LocalSettings | None:
    """Load local settings from `.cryptobench/settings.yaml`.

    Relative result paths are resolved against ``working_dir``. Missing
    sections and keys keep their defaults. If the file does not exist,
    returns None.

    Args:
        working_dir (Path):
            Directory containing `.cryptobench/`.

    Returns:
        LocalSettings | None:
            A `LocalSettings` object if the YAML file exists, otherwise `None`.
    """
    try:
        with open(working_dir / LOCAL_SETTINGS_FILE, 'r') as file:
            local_settings_yaml: dict[str, dict] = yaml.safe_load(file) or {}
    except FileNotFoundError:
        return None

    local_settings = LocalSettings()

    results: dict = local_settings_yaml.get('results') or {}
    providers: dict = local_settings_yaml.get('providers') or {}
    hierarchy: dict = local_settings_yaml.get('hierarchy') or {}

    local_settings.base_path = str(results.get('base_path', local_settings.base_path))
    local_settings.results_file = str(results.get('results_file', local_settings.results_file))
    local_settings.baseline_provider = str(providers.get('baseline', local_settings.baseline_provider))
    local_settings.root_label = str(hierarchy.get('root_label', local_settings.root_label))
    local_settings.case_sensitive = bool(hierarchy.get('case_sensitive', local_settings.case_sensitive))

    local_settings.base_path = _resolve_base_path(local_settings.base_path, working_dir)
    logger.debug(f'Loaded settings: {local_settings}')
    return local_settings
