from receiptdraft.receipt.ocr_parser.fragments import preprocess_blocks


def test_blocks_without_geometry_get_synthetic_positions() -> None:
    fragment_set = preprocess_blocks(["Bananas", {"text": "$1.99"}, "Milk"])

    positions = [(f.text, f.vertical_position, f.horizontal_position) for f in fragment_set.fragments]
    assert positions == [("Bananas", 0.0, 0.0), ("$1.99", 20.0, 10.0), ("Milk", 40.0, 20.0)]
    assert fragment_set.has_spatial_data is False


def test_multi_line_block_is_split_with_vertical_offset() -> None:
    fragment_set = preprocess_blocks([{"text": "Line one\r\n\nLine two\rLine three"}])

    assert [f.text for f in fragment_set.fragments] == ["Line one", "Line two", "Line three"]
    assert [f.vertical_position for f in fragment_set.fragments] == [0.0, 15.0, 30.0]


def test_top_bottom_left_right_box() -> None:
    fragment_set = preprocess_blocks(
        [{"text": "Milk", "boundingBox": {"top": 100, "bottom": 120, "left": 10, "right": 50}}]
    )

    fragment = fragment_set.fragments[0]
    assert fragment.vertical_position == 110.0
    assert fragment.horizontal_position == 30.0
    assert fragment.has_spatial_data is True
    assert fragment_set.has_spatial_data is True


def test_xywh_frame_box() -> None:
    fragment_set = preprocess_blocks([{"text": "Milk", "frame": {"x": 10, "y": 200, "width": 40, "height": 20}}])

    fragment = fragment_set.fragments[0]
    assert (fragment.vertical_position, fragment.horizontal_position) == (210.0, 30.0)


def test_top_left_width_height_box() -> None:
    fragment_set = preprocess_blocks(
        [{"text": "Milk", "bounding": {"top": 50, "left": 0, "width": 100, "height": 10}}]
    )

    fragment = fragment_set.fragments[0]
    assert (fragment.vertical_position, fragment.horizontal_position) == (55.0, 50.0)


def test_vertical_only_box_uses_synthetic_horizontal() -> None:
    fragment_set = preprocess_blocks(["Header", {"text": "Milk", "boundingBox": {"top": 40, "bottom": 60}}])

    fragment = fragment_set.fragments[1]
    assert fragment.vertical_position == 50.0
    assert fragment.horizontal_position == 10.0
    assert fragment.has_spatial_data is True


def test_box_without_vertical_coordinate_is_synthetic() -> None:
    fragment_set = preprocess_blocks(["Header", {"text": "Milk", "boundingBox": {"left": 300, "right": 340}}])

    fragment = fragment_set.fragments[1]
    assert fragment.vertical_position == 20.0
    assert fragment.horizontal_position == 10.0
    assert fragment_set.has_spatial_data is False


def test_empty_input_gives_empty_set() -> None:
    assert len(preprocess_blocks([])) == 0
    assert len(preprocess_blocks(None)) == 0


def test_blank_and_malformed_blocks_are_skipped_but_keep_block_index() -> None:
    fragment_set = preprocess_blocks([{"text": "   "}, {"text": 42}, 7, "Milk"])

    assert [f.text for f in fragment_set.fragments] == ["Milk"]
    assert fragment_set.fragments[0].vertical_position == 60.0


def test_synthetic_block_starts_below_previous_multi_line_block() -> None:
    fragment_set = preprocess_blocks(["SHOP", "Apple\n$1.00\nPear", "Kiwi", "$3.00"])

    positions = [f.vertical_position for f in fragment_set.fragments]
    assert positions == [0.0, 20.0, 35.0, 50.0, 70.0, 90.0]
    assert positions == sorted(positions)
