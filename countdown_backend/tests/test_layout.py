import pytest

from src.api.rendering.layout import (
    BLOCK_WIDTH,
    LABEL_FONT_SIZE,
    compute_expired_layout,
    compute_layout,
)


class TestComputeLayout:
    def test_is_deterministic(self):
        assert compute_layout(True, 72) == compute_layout(True, 72)
        assert compute_layout(False, 80) == compute_layout(False, 80)

    @pytest.mark.parametrize("requested,effective", [(10, 64), (64, 64), (80, 80), (96, 96), (200, 96)])
    def test_font_size_is_clamped(self, requested, effective):
        layout = compute_layout(False, requested)
        assert layout.value_font_size == effective
        assert layout == compute_layout(False, effective)

    def test_canvas_and_label_size(self):
        layout = compute_layout(True, 72)
        assert (layout.width, layout.height) == (1000, 400)
        assert layout.label_font_size == LABEL_FONT_SIZE == 16
        assert all(block.label.font_size == 16 for block in layout.blocks)

    def test_blocks_spread_across_canvas(self):
        layout = compute_layout(False, 72)
        assert BLOCK_WIDTH == 212.5
        assert [block.value.x for block in layout.blocks] == [106.25, 368.75, 631.25, 893.75]
        assert all(block.value.x == block.label.x for block in layout.blocks)
        assert all(block.value.bold and not block.label.bold for block in layout.blocks)

    def test_without_title_blocks_center_on_full_height(self):
        layout = compute_layout(False, 72)
        assert layout.title is None
        assert {block.value.y for block in layout.blocks} == {170}
        assert {block.label.y for block in layout.blocks} == {170 + 72 + 20}

    def test_title_reserves_top_band(self):
        layout = compute_layout(True, 64)
        assert layout.title is not None
        assert (layout.title.x, layout.title.y) == (500, 40)
        assert layout.title.bold
        assert {block.value.y for block in layout.blocks} == {220}
        assert {block.label.y for block in layout.blocks} == {220 + 64 + 20}


class TestComputeExpiredLayout:
    def test_message_is_centered(self):
        layout = compute_expired_layout(False)
        assert layout.title is None
        assert (layout.message.x, layout.message.y) == (500, 200)
        assert layout.message.font_size == 64
        assert layout.message.anchor == "mm"

    def test_title_sits_above_message(self):
        layout = compute_expired_layout(True)
        assert layout.title is not None
        assert (layout.title.x, layout.title.y) == (500, 150)
        assert layout.title.y < layout.message.y
