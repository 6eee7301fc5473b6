"""Set up the data."""

from pathlib import Path

from pydantic_yaml import parse_yaml_file_as

from .models import BlueprintCatalog, GameSettings

__all__ = ["data_path", "base_catalog", "base_settings", "load_settings"]

data_path = Path(__file__).parent

base_catalog = parse_yaml_file_as(BlueprintCatalog, data_path / "blueprints.yaml")

base_settings = parse_yaml_file_as(GameSettings, data_path / "settings.yaml")


def load_settings(path: Path | str | None = None) -> GameSettings:
    """Load settings from a YAML file, or the bundled defaults."""
    if path is None:
        return base_settings.model_copy(deep=True)
    return parse_yaml_file_as(GameSettings, Path(path))
