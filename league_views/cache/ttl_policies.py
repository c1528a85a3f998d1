"""
TTL configuration by data category.
"""
from typing import Dict, Optional, Union

from config.settings import Settings, settings as default_settings

from .core import DataCategory


# Defaults in seconds; overridable through Settings
TTL_CONFIG: Dict[DataCategory, int] = {
    DataCategory.TOURNAMENTS: 5 * 60,
    DataCategory.TOURNAMENT_DATA: 3 * 60,
    DataCategory.LIVE_MATCHES: 30,
    DataCategory.NEWS: 10 * 60,
    DataCategory.VIDEOS: 15 * 60,
    DataCategory.STATIC_DATA: 30 * 60,
}


def ttl_config_from_settings(settings: Optional[Settings] = None) -> Dict[DataCategory, int]:
    """
    Build the category -> TTL table from application settings.

    Args:
        settings: Settings instance (defaults to the global one)

    Returns:
        Mapping with an entry for every DataCategory
    """
    settings = settings or default_settings
    return {
        DataCategory.TOURNAMENTS: settings.ttl_tournaments,
        DataCategory.TOURNAMENT_DATA: settings.ttl_tournament_data,
        DataCategory.LIVE_MATCHES: settings.ttl_live_matches,
        DataCategory.NEWS: settings.ttl_news,
        DataCategory.VIDEOS: settings.ttl_videos,
        DataCategory.STATIC_DATA: settings.ttl_static_data,
    }


def get_ttl_for_category(
    category: Union[DataCategory, str, None],
    ttl_config: Optional[Dict[DataCategory, int]] = None,
) -> int:
    """
    Get the TTL for a data category.

    Args:
        category: The data category (enum member or its string value)
        ttl_config: Table to read from (defaults to TTL_CONFIG)

    Returns:
        TTL in seconds; unknown categories get the uncategorized TTL
    """
    config = ttl_config or TTL_CONFIG
    resolved = DataCategory.coerce(category)
    return config.get(resolved, config.get(DataCategory.STATIC_DATA, TTL_CONFIG[DataCategory.STATIC_DATA]))
