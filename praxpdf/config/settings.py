# praxpdf/config/settings.py
"""
Application settings management for PraxPDF.

Settings are split into two files:
- settings.template.json: defaults (maintained by developers, replaced on update)
- user_settings.json: only the values the user changed
- On load, the template is read first and user settings override it

Cache:
- _settings_cache: AppSettings instances keyed by path
- load() prefers the cache and reloads when either file's mtime changes
- save() refreshes the cache
- invalidate_settings_cache() clears it explicitly
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from praxpdf.models.types import MergeSettings

# Module logger
logger = logging.getLogger(__name__)

# Settings cache: path -> (mtime_template, mtime_user, AppSettings)
_settings_cache: dict[str, tuple[float, float, "AppSettings"]] = {}
_settings_cache_lock = threading.Lock()

# Settings the user can change (saved to user_settings.json)
USER_SETTINGS_KEYS = {
    # Merge trims (page merge panel)
    "trim_top",
    "trim_bottom",
    "inter_page_gap",
    # Output
    "output_directory",
}

# Documented ranges for UI-supplied merge values (points)
MAX_SEAM_TRIM = 288.0        # 4 inches
MAX_INTER_PAGE_GAP = 144.0   # 2 inches, either sign


@dataclass
class AppSettings:
    """Application settings"""

    # Page merge (points)
    trim_top: float = 0.0          # removed at each internal seam, not on the first page
    trim_bottom: float = 0.0       # removed at each internal seam, not on the last page
    inter_page_gap: float = 0.0    # spacing between slices, may be negative

    # Output
    output_directory: Optional[str] = None  # None = same as input
    merged_suffix: str = "_merged"

    @classmethod
    def load(cls, path: Path, use_cache: bool = True) -> "AppSettings":
        """Load settings from template and user settings files.

        1. settings.template.json provides defaults
        2. user_settings.json overrides USER_SETTINGS_KEYS

        Args:
            path: Settings path (config/settings.json). Only its directory is
                  used to find the template and user files.
            use_cache: Use cached settings while the files are unchanged
        """
        config_dir = path.parent
        template_path = config_dir / "settings.template.json"
        user_settings_path = config_dir / "user_settings.json"

        cache_key = str(path.resolve())

        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0

        if use_cache:
            with _settings_cache_lock:
                if cache_key in _settings_cache:
                    cached_template_mtime, cached_user_mtime, cached_settings = _settings_cache[cache_key]
                    if cached_template_mtime == template_mtime and cached_user_mtime == user_mtime:
                        logger.debug("Using cached settings for: %s", path)
                        return cached_settings

        data = {}

        # 1. Load from template (developer defaults)
        if template_path.exists():
            try:
                with open(template_path, 'r', encoding='utf-8-sig') as f:
                    data = json.load(f)
                    logger.debug("Loaded template settings from: %s", template_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load template settings: %s", e)

        if not isinstance(data, dict):
            logger.warning("Template settings are not a JSON object, using defaults")
            data = {}

        # 2. Override with user settings
        if user_settings_path.exists():
            try:
                with open(user_settings_path, 'r', encoding='utf-8-sig') as f:
                    user_data = json.load(f)
                    for key in USER_SETTINGS_KEYS:
                        if key in user_data:
                            data[key] = user_data[key]
                    logger.debug("Loaded user settings from: %s", user_settings_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load user settings: %s", e)

        # Filter to only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        settings = cls(**filtered_data)
        settings._validate()

        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, settings)

        return settings

    def _validate(self) -> None:
        """Clamp merge values to their documented ranges.

        Invalid values are reset to 0 with a warning.
        """
        for name in ("trim_top", "trim_bottom"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0 <= value <= MAX_SEAM_TRIM:
                logger.warning("%s out of range (%r), resetting to 0", name, value)
                setattr(self, name, 0.0)
            else:
                setattr(self, name, float(value))

        gap = self.inter_page_gap
        if not isinstance(gap, (int, float)) or isinstance(gap, bool) or abs(gap) > MAX_INTER_PAGE_GAP:
            logger.warning("inter_page_gap out of range (%r), resetting to 0", gap)
            self.inter_page_gap = 0.0
        else:
            self.inter_page_gap = float(gap)

        if not self.merged_suffix:
            self.merged_suffix = "_merged"

    def save(self, path: Path) -> None:
        """Save user settings to user_settings.json.

        Only USER_SETTINGS_KEYS are written; the template is never changed.

        Args:
            path: Settings path (config/settings.json). The file actually
                  written is config/user_settings.json.
        """
        config_dir = path.parent
        user_settings_path = config_dir / "user_settings.json"
        template_path = config_dir / "settings.template.json"

        config_dir.mkdir(parents=True, exist_ok=True)

        data = {key: getattr(self, key) for key in sorted(USER_SETTINGS_KEYS)}

        with open(user_settings_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.debug("Saved user settings to: %s", user_settings_path)

        cache_key = str(path.resolve())
        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0
        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, self)

    def to_merge_settings(self) -> MergeSettings:
        """Value object passed into every merge call"""
        return MergeSettings(
            trim_top=self.trim_top,
            trim_bottom=self.trim_bottom,
            inter_page_gap=self.inter_page_gap,
        )

    def get_output_directory(self, input_path: Path) -> Path:
        """
        Get output directory for merged files.
        Returns input file's directory if output_directory is None.
        """
        if self.output_directory:
            return Path(self.output_directory)
        return input_path.parent

    def get_merged_output_path(self, input_path: Path) -> Path:
        """Default destination for merging `input_path` (e.g. report_merged.pdf)"""
        return self.get_output_directory(input_path) / f"{input_path.stem}{self.merged_suffix}{input_path.suffix}"


def get_default_settings_path() -> Path:
    """Get default settings file path"""
    return Path.home() / ".praxpdf" / "config" / "settings.json"


def invalidate_settings_cache(path: Optional[Path] = None) -> None:
    """Invalidate settings cache.

    Args:
        path: Only clear the entry for this path. None clears everything.
    """
    with _settings_cache_lock:
        if path is None:
            _settings_cache.clear()
            logger.debug("Cleared all settings cache")
        else:
            cache_key = str(path.resolve())
            if cache_key in _settings_cache:
                del _settings_cache[cache_key]
                logger.debug("Cleared settings cache for: %s", path)
