"""Config settings – env-based configuration for the search service."""
from campus_search.config.settings.base import Settings
from campus_search.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from campus_search.config.settings.search import SearchSettings

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SearchSettings", "Settings", "SettingsLoader"]
