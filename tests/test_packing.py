import itertools
import random

import pytest

from sprite_atlas.framework.errors import AtlasOverflowError
from sprite_atlas.framework.geometry import Vec2
from sprite_atlas.framework.packing import pack_sprites, placement_order


def _assert_valid_packing(result, sizes, max_size):
    assert result.size.fits_within(max_size)
    assert [packed.global_index for packed in result.packed] == list(range(len(sizes)))
    for packed, size in zip(result.packed, sizes):
        assert packed.rect_in_atlas.size == size
        assert packed.rect_in_atlas.within(result.size)
    for first, second in itertools.combinations(result.packed, 2):
        assert not first.rect_in_atlas.intersects(second.rect_in_atlas), (first, second)


def test_single_sprite_filling_canvas_with_padding():
    result = pack_sprites(
        [Vec2(84, 84)], initial_size=Vec2(84, 84), max_size=Vec2(84, 84), padding=Vec2(2, 2)
    )

    assert result.size == Vec2(84, 84)
    assert tuple(result.packed[0].rect_in_atlas.offset) == (0, 0)
    assert result.attempts == 1


def test_placement_order_is_tallest_then_widest_and_stable():
    sizes = [Vec2(4, 4), Vec2(8, 8), Vec2(2, 8), Vec2(4, 4), Vec2(8, 2)]
    assert placement_order(sizes) == [1, 2, 0, 3, 4]


def test_shelves_respect_padding():
    sizes = [Vec2(10, 10), Vec2(10, 10), Vec2(10, 5)]
    result = pack_sprites(sizes, initial_size=Vec2(22, 40), max_size=Vec2(22, 40), padding=Vec2(2, 3))

    offsets = [tuple(packed.rect_in_atlas.offset) for packed in result.packed]
    assert offsets == [(0, 0), (12, 0), (0, 13)]


def test_canvas_grows_when_initial_size_is_too_small():
    sizes = [Vec2(16, 16)] * 10
    result = pack_sprites(sizes, initial_size=Vec2(16, 16), max_size=Vec2(256, 256), padding=Vec2(0, 0))

    assert result.attempts > 1
    assert result.size.x >= 16 and result.size.y >= 16
    _assert_valid_packing(result, sizes, Vec2(256, 256))


def test_growth_jumps_to_a_sprite_wider_than_double_the_canvas():
    sizes = [Vec2(100, 4)]
    result = pack_sprites(sizes, initial_size=Vec2(8, 8), max_size=Vec2(128, 128), padding=Vec2(0, 0))

    assert result.size == Vec2(100, 8)
    assert result.attempts == 2


def test_never_shrinks_below_initial_size():
    result = pack_sprites([Vec2(2, 2)], initial_size=Vec2(64, 32), max_size=Vec2(64, 32), padding=Vec2(0, 0))
    assert result.size == Vec2(64, 32)


def test_sprite_larger_than_max_size_overflows():
    with pytest.raises(AtlasOverflowError) as excinfo:
        pack_sprites(
            [Vec2(4, 4), Vec2(300, 4)], initial_size=Vec2(16, 16), max_size=Vec2(256, 256), padding=Vec2(0, 0)
        )

    err = excinfo.value
    assert err.global_index == 1
    assert err.sprite_size == Vec2(300, 4)
    assert err.max_size == Vec2(256, 256)


def test_total_area_beyond_max_size_overflows():
    sizes = [Vec2(32, 32)] * 5
    with pytest.raises(AtlasOverflowError, match=r"Could not pack 5 sprite\(s\) within max_size 64x64"):
        pack_sprites(sizes, initial_size=Vec2(32, 32), max_size=Vec2(64, 64), padding=Vec2(0, 0))


def test_padding_can_cause_overflow():
    sizes = [Vec2(32, 32)] * 4
    ok = pack_sprites(sizes, initial_size=Vec2(64, 64), max_size=Vec2(64, 64), padding=Vec2(0, 0))
    _assert_valid_packing(ok, sizes, Vec2(64, 64))

    with pytest.raises(AtlasOverflowError):
        pack_sprites(sizes, initial_size=Vec2(64, 64), max_size=Vec2(64, 64), padding=Vec2(1, 1))


def test_packing_is_deterministic():
    rng = random.Random(7)
    sizes = [Vec2(rng.randint(1, 40), rng.randint(1, 40)) for _ in range(60)]
    kwargs = {"initial_size": Vec2(32, 32), "max_size": Vec2(1024, 1024), "padding": Vec2(1, 2)}

    assert pack_sprites(sizes, **kwargs) == pack_sprites(list(sizes), **kwargs)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_inputs_produce_valid_non_overlapping_layouts(seed):
    rng = random.Random(seed)
    sizes = [Vec2(rng.randint(1, 64), rng.randint(1, 64)) for _ in range(rng.randint(1, 80))]
    max_size = Vec2(2048, 2048)

    result = pack_sprites(sizes, initial_size=Vec2(64, 64), max_size=max_size, padding=Vec2(2, 2))

    _assert_valid_packing(result, sizes, max_size)
