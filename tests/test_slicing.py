import pytest

from sprite_atlas.framework.errors import GeometryError
from sprite_atlas.framework.geometry import Rect, Vec2
from sprite_atlas.framework.manifest import (
    HeterogeneousSheet,
    HomogeneousSheet,
    Manifest,
    NoSpriteSheet,
    TextureEntry,
)
from sprite_atlas.framework.slicing import resolve_manifest, resolve_sprites, sheet_rects


def test_none_sheet_spans_whole_image():
    rects = sheet_rects(NoSpriteSheet(), Vec2(40, 30), path="a.png", entry_index=0)
    assert rects == [Rect(Vec2(0, 0), Vec2(40, 30))]


def test_homogeneous_single_row():
    sheet = HomogeneousSheet(tile_size=Vec2(32, 32), columns=4, rows=1)
    rects = sheet_rects(sheet, Vec2(128, 32), path="row.png", entry_index=0)

    assert [tuple(rect.offset) for rect in rects] == [(0, 0), (32, 0), (64, 0), (96, 0)]
    assert all(rect.size == Vec2(32, 32) for rect in rects)


def test_homogeneous_is_row_major_with_padding_and_offset():
    sheet = HomogeneousSheet(
        tile_size=Vec2(10, 8), columns=2, rows=2, padding=Vec2(2, 3), offset=Vec2(5, 1)
    )
    rects = sheet_rects(sheet, Vec2(27, 20), path="grid.png", entry_index=0)

    assert [tuple(rect.offset) for rect in rects] == [(5, 1), (17, 1), (5, 12), (17, 12)]


def test_homogeneous_region_may_touch_image_edge_exactly():
    sheet = HomogeneousSheet(tile_size=Vec2(10, 10), columns=3, rows=1, padding=Vec2(1, 0))
    rects = sheet_rects(sheet, Vec2(32, 10), path="edge.png", entry_index=0)
    assert rects[-1].right == 32


def test_homogeneous_region_exceeding_image_fails():
    sheet = HomogeneousSheet(tile_size=Vec2(10, 10), columns=3, rows=1, padding=Vec2(1, 0))

    with pytest.raises(GeometryError) as excinfo:
        sheet_rects(sheet, Vec2(31, 10), path="edge.png", entry_index=2)

    err = excinfo.value
    assert err.path == "edge.png"
    assert err.entry_index == 2
    assert err.rect == Rect(Vec2(0, 0), Vec2(32, 10))
    assert err.image_size == Vec2(31, 10)
    assert "edge.png" in str(err)


@pytest.mark.parametrize(
    "sheet",
    [
        HomogeneousSheet(tile_size=Vec2(8, 8), columns=0, rows=1),
        HomogeneousSheet(tile_size=Vec2(8, 8), columns=1, rows=0),
        HomogeneousSheet(tile_size=Vec2(0, 8), columns=1, rows=1),
        HomogeneousSheet(tile_size=Vec2(8, 0), columns=1, rows=1),
    ],
)
def test_homogeneous_zero_parameters_fail(sheet):
    with pytest.raises(GeometryError):
        sheet_rects(sheet, Vec2(64, 64), path="zero.png", entry_index=0)


def test_heterogeneous_keeps_declared_order():
    declared = (
        Rect(Vec2(50, 0), Vec2(10, 10)),
        Rect(Vec2(0, 0), Vec2(20, 5)),
        Rect(Vec2(0, 5), Vec2(20, 5)),
    )
    rects = sheet_rects(HeterogeneousSheet(declared), Vec2(60, 10), path="p.png", entry_index=0)
    assert rects == list(declared)


def test_heterogeneous_rect_exceeding_width_fails():
    sheet = HeterogeneousSheet((Rect(Vec2(48, 0), Vec2(64, 16)),))

    with pytest.raises(GeometryError, match=r"exceeds source image bounds") as excinfo:
        sheet_rects(sheet, Vec2(100, 16), path="wide.png", entry_index=1)

    assert excinfo.value.rect == Rect(Vec2(48, 0), Vec2(64, 16))
    assert excinfo.value.entry_index == 1


def test_heterogeneous_empty_or_zero_sized_fails():
    with pytest.raises(GeometryError, match=r"at least one rect"):
        sheet_rects(HeterogeneousSheet(()), Vec2(10, 10), path="e.png", entry_index=0)

    with pytest.raises(GeometryError, match=r"size must be > 0"):
        sheet_rects(
            HeterogeneousSheet((Rect(Vec2(0, 0), Vec2(0, 4)),)), Vec2(10, 10), path="e.png", entry_index=0
        )


def test_resolve_sprites_assigns_global_indexes_from_start():
    entry = TextureEntry("row.png", HomogeneousSheet(tile_size=Vec2(4, 4), columns=3, rows=1))
    sprites = resolve_sprites(entry, Vec2(12, 4), entry_index=1, start_index=5)

    assert [sprite.global_index for sprite in sprites] == [5, 6, 7]
    assert {sprite.entry_index for sprite in sprites} == {1}
    assert {sprite.source_path for sprite in sprites} == {"row.png"}


def test_resolve_manifest_flattens_in_entry_order():
    manifest = Manifest(
        textures=(
            TextureEntry("a.png"),
            TextureEntry("b.png", HomogeneousSheet(tile_size=Vec2(4, 4), columns=2, rows=2)),
            TextureEntry(
                "c.png",
                HeterogeneousSheet((Rect(Vec2(0, 0), Vec2(1, 1)), Rect(Vec2(1, 1), Vec2(2, 2)))),
            ),
        )
    )
    sprites = resolve_manifest(manifest, [Vec2(5, 5), Vec2(8, 8), Vec2(3, 3)])

    assert len(sprites) == manifest.sprite_count == 7
    assert [sprite.global_index for sprite in sprites] == list(range(7))
    assert [sprite.source_path for sprite in sprites] == ["a.png"] + ["b.png"] * 4 + ["c.png"] * 2


def test_resolve_manifest_stops_at_first_invalid_entry():
    manifest = Manifest(
        textures=(
            TextureEntry("ok.png"),
            TextureEntry("bad.png", HeterogeneousSheet((Rect(Vec2(0, 0), Vec2(9, 9)),))),
        )
    )

    with pytest.raises(GeometryError) as excinfo:
        resolve_manifest(manifest, [Vec2(4, 4), Vec2(8, 8)])

    assert excinfo.value.path == "bad.png"
    assert excinfo.value.entry_index == 1
