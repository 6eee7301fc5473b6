import pytest
from pydantic import ValidationError

from bee_trails.data import base_catalog, base_settings, load_settings
from bee_trails.data.models import GameSettings


def test_bundled_catalog():
    assert len(base_catalog.blueprints) == 10
    assert [bp.atlas_index for bp in base_catalog.blueprints] == list(range(10))
    assert base_catalog.blueprints[9].weight == 0
    assert all(any(bp.connected_sides) for bp in base_catalog.blueprints)
    assert base_catalog.size_weights == [3, 4, 0, 0]


def test_bundled_settings_match_defaults():
    assert base_settings == GameSettings()


def test_load_settings(tmp_path):
    settings = load_settings()
    assert settings == base_settings
    assert settings is not base_settings

    path = tmp_path / "settings.yaml"
    path.write_text("map_radius: 4\nbase_houses: 2\n")
    settings = load_settings(path)
    assert settings.map_radius == 4
    assert settings.base_houses == 2
    assert settings.batch_size == 3


def test_bad_settings_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("base_houses: 5\nmax_houses: 4\n")
    with pytest.raises(ValidationError):
        load_settings(path)
