import pytest

from sprite_atlas.foundation.config_namespace import ConfigNamespace, parse_pair


def test_get_bool_is_strict():
    ns = ConfigNamespace({"enabled": "false"}, path="configuration")
    with pytest.raises(TypeError, match=r"configuration\.enabled must be a boolean"):
        ns.get_bool("enabled")


def test_get_int_is_strict_and_validates_bounds():
    ns = ConfigNamespace({"count": 2.0}, path="sheet")
    with pytest.raises(TypeError, match=r"must be an int"):
        ns.get_int("count")

    ns2 = ConfigNamespace({"count": 2}, path="sheet")
    with pytest.raises(ValueError, match=r"must be >= 3"):
        ns2.get_int("count", min_value=3)
    with pytest.raises(ValueError, match=r"must be <= 1"):
        ns2.get_int("count", max_value=1)


def test_missing_required_key_reports_full_path():
    ns = ConfigNamespace({}, path="textures[0]")
    with pytest.raises(ValueError, match=r"Missing required config key: textures\[0\]\.path"):
        ns.get_str("path")


def test_defaulted_keys_count_as_consumed():
    ns = ConfigNamespace({"padding": [1, 2]}, path="configuration")

    assert ns.get_pair("padding") == (1, 2)
    assert ns.get_pair("initial_size", default=(256, 256)) == (256, 256)
    assert ns.get_bool("auto_format_conversion", default=True) is True

    ns.assert_consumed()


def test_unknown_key_enforcement_includes_path_and_consumed_keys():
    ns = ConfigNamespace({"known": True, "typo": 1}, path="configuration")
    assert ns.get_bool("known") is True
    with pytest.raises(ValueError, match=r"Unknown config keys under configuration: typo \(consumed: known\)"):
        ns.assert_consumed()


def test_get_str_choices():
    ns = ConfigNamespace({"layout_format": "xml"}, path="")
    with pytest.raises(ValueError, match=r"must be one of: csv, json"):
        ns.get_str("layout_format", choices=("json", "csv"))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ([3, 4], (3, 4)),
        ((0, 7), (0, 7)),
        ({"x": 5, "y": 6}, (5, 6)),
    ],
)
def test_parse_pair_accepts_lists_and_xy_mappings(raw, expected):
    assert parse_pair(raw, "v") == expected


@pytest.mark.parametrize(
    "raw, error",
    [
        ([1], ValueError),
        ([1, 2, 3], ValueError),
        ([1, -2], ValueError),
        ([1, 2.5], TypeError),
        ([True, 2], TypeError),
        ({"x": 1}, ValueError),
        ("1x2", TypeError),
    ],
)
def test_parse_pair_rejects_malformed_vectors(raw, error):
    with pytest.raises(error):
        parse_pair(raw, "v")
