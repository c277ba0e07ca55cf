import logging
import os
from pathlib import Path

import tomlkit

from domain.models import ContourSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat
from shared.constants import APP_DIR_NAME, PROFILE_SUFFIX

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) If <project_root>/configs/profiles exists, use it (run-from-repo setups).
    2) Otherwise, fall back to $XDG_CONFIG_HOME/isocontours/profiles
       or ~/.config/isocontours/profiles when XDG_CONFIG_HOME is not set.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / 'configs' / 'profiles'
    if local_profiles.exists():
        return local_profiles

    return (
        Path(os.getenv('XDG_CONFIG_HOME') or (Path.home() / '.config'))
        / APP_DIR_NAME
        / 'profiles'
    )


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Profile names without extension, sorted."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob(f'*{PROFILE_SUFFIX}') if p.is_file())


def profile_path(name: str) -> Path:
    return ensure_profiles_dir() / f'{name}{PROFILE_SUFFIX}'


def load_profile(name_or_path: str) -> ContourSettings:
    """
    Load and validate a TOML profile.

    Accepts either a profile name (without .toml) from the profiles directory
    or an absolute/relative path to a TOML file.
    """
    p = Path(name_or_path)
    path = (
        p
        if p.suffix.lower() == PROFILE_SUFFIX and p.exists()
        else profile_path(name_or_path)
    )
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    data = tomlkit.parse(text).unwrap()
    settings = ContourSettings.model_validate(sectioned_to_flat(data))
    logger.info(
        'Profile %s loaded: thresholds=%s boundary=%s output=%s',
        path,
        settings.thresholds,
        settings.boundary_mode.value,
        settings.output_kind.value,
    )
    return settings


def save_profile(name: str, settings: ContourSettings) -> Path:
    """Save a profile as sectioned TOML (no atomic write, no backup)."""
    path = profile_path(name)
    data = flat_to_sectioned(settings.model_dump(mode='json'))
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    logger.debug('Profile %s saved to %s', name, path)
    return path


def delete_profile(name: str) -> None:
    """Delete a profile file if it exists."""
    path = profile_path(name)
    if path.exists():
        path.unlink()
