"""Tests for compositing geometry."""

import pytest

from wedding_gallery.domain.geometry import (
    Rect,
    Size,
    centered_offset,
    compute_layout,
    contain_fit,
    round_half_up,
    scaled_box,
    unframed_layout,
)


def test_wedding_frame_layout_matches_reference_numbers() -> None:
    layout = compute_layout(Size(2400, 1700), Size(3000, 2000), 0.85)

    assert layout.canvas == Size(2400, 1700)
    assert layout.photo_box == Rect(x=180, y=127, width=2040, height=1445)
    assert layout.photo_rect == Rect(x=180, y=169, width=2040, height=1360)


def test_layout_is_identical_across_runs() -> None:
    first = compute_layout(Size(2400, 1700), Size(3000, 2000), 0.85)
    second = compute_layout(Size(2400, 1700), Size(3000, 2000), 0.85)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_round_half_up_matches_browser_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_half_up(1444.9999999) == 1445


def test_centered_offset_floors_odd_remainders() -> None:
    assert centered_offset(1700, 1445) == 127
    assert centered_offset(11, 4) == 3


def test_scaled_box_rejects_out_of_range_scale() -> None:
    with pytest.raises(ValueError):
        scaled_box(Size(100, 100), 0)
    with pytest.raises(ValueError):
        scaled_box(Size(100, 100), 1.2)


def test_scale_of_one_fills_the_canvas() -> None:
    layout = compute_layout(Size(400, 300), Size(400, 300), 1.0)

    assert layout.photo_box == Rect(x=0, y=0, width=400, height=300)
    assert layout.photo_rect == layout.photo_box


def test_contain_fit_letterboxes_tall_photos() -> None:
    fitted = contain_fit(Size(1000, 2000), Size(400, 400))

    assert fitted == Size(200, 400)


def test_photo_rect_stays_inside_box() -> None:
    for photo in (Size(1, 1000), Size(1000, 1), Size(123, 457), Size(4000, 3000)):
        layout = compute_layout(Size(640, 480), photo, 0.9)
        box, rect = layout.photo_box, layout.photo_rect
        assert box.x <= rect.x
        assert box.y <= rect.y
        assert rect.x + rect.width <= box.x + box.width
        assert rect.y + rect.height <= box.y + box.height


def test_unframed_layout_uses_photo_dimensions() -> None:
    layout = unframed_layout(Size(300, 200))

    assert layout.canvas == Size(300, 200)
    assert layout.photo_rect == Rect(x=0, y=0, width=300, height=200)


def test_size_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        Size(0, 10)
