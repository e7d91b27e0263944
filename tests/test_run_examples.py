"""Test module to run examples from the examples.hobby package

The tests are run using pytest.
"""

from examples.hobby import hobby_path_svg


def test_examples_hobby_path_svg(tmp_path):
    """Test function for hobby_path_svg example"""
    hobby_path_svg.main(output_dir=str(tmp_path))

    for name in ("hobby_open", "hobby_closed", "natural_closed", "catmull_rom_closed"):
        svg_file = tmp_path / f"{name}.svg"
        assert svg_file.is_file()
        assert "<path" in svg_file.read_text(encoding="utf-8")
