"""Fits a Hobby curve, a natural cubic spline and a Catmull-Rom spline through the
same vertices and writes them into SVG files, with vertices and control point handles shown.
"""

import logging
import pathlib

from bezierfit.common import FitterKind
from bezierfit.path_builder import CurvePathBuilder
from bezierfit.svg_export import SvgPathExporter

OUTPUT_DIR = "data/output/example/svg"

VERTICES = [(20.0, 20.0), (120.0, 40.0), (160.0, 120.0), (80.0, 160.0), (10.0, 100.0)]


def main(output_dir: str = OUTPUT_DIR):
    """Builds open and closed Hobby paths, a closed natural spline and a closed
    Catmull-Rom spline through VERTICES, prints their path data and saves one SVG file per path.
    """
    logging.basicConfig(level=logging.INFO)
    output_path = pathlib.Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    exporter = SvgPathExporter(show_vertices=True, show_controls=True)
    variants = {
        "hobby_open": CurvePathBuilder.build(VERTICES, closed=False, curl=1.0),
        "hobby_closed": CurvePathBuilder.build(VERTICES, closed=True),
        "natural_closed": CurvePathBuilder.build(VERTICES, closed=True, fitter_kind=FitterKind.NATURAL),
        "catmull_rom_closed": CurvePathBuilder.build(VERTICES, closed=True, fitter_kind=FitterKind.CATMULL_ROM),
    }
    for name, path in variants.items():
        print(f"{name}: length={path.length:.3f}")
        print(path.to_path_string())
        svg_file = output_path / f"{name}.svg"
        svg_file.write_text(exporter.to_svg_string(path, pretty=True), encoding="utf-8")
        logging.info("Saved %s", svg_file)


if __name__ == "__main__":
    main()
