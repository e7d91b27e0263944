"""SVG documents of fitted curve paths."""

from __future__ import annotations

import io

import svgwrite
import svgwrite.container

from bezierfit.consts import (
    SVG_CONTROL_STROKE,
    SVG_MARGIN,
    SVG_STROKE,
    SVG_STROKE_WIDTH,
    SVG_VERTEX_RADIUS,
)
from bezierfit.geom import BoundingBox
from bezierfit.path_builder import CurvePath


class SvgPathExporter:
    """Renders a CurvePath into an svgwrite Drawing.

    The viewBox encloses the path (its sampled bounds and its vertices) plus a
    margin. The curve itself is one <path> element in the group "curve";
    vertex markers and control point handles go to the groups "vertices" and
    "controls" if requested.
    """

    def __init__(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        stroke: str = SVG_STROKE,
        stroke_width: float = SVG_STROKE_WIDTH,
        margin: float = SVG_MARGIN,
        show_vertices: bool = False,
        show_controls: bool = False,
    ):
        self.stroke = stroke
        self.stroke_width = stroke_width
        self.margin = margin
        self.show_vertices = show_vertices
        self.show_controls = show_controls

    def view_box(self, path: CurvePath) -> BoundingBox:
        """The visible area for the given path."""
        if len(path) == 0:
            if not path.vertices:
                return BoundingBox(0.0, 0.0, 1.0, 1.0).expand(self.margin)
            return BoundingBox.from_points(path.vertices).expand(self.margin)
        box = path.bounds().union(BoundingBox.from_points(path.vertices))
        if self.show_controls:
            for segment in path:
                box = box.union(BoundingBox.from_points(segment.control_points))
        return box.expand(self.margin)

    def drawing(self, path: CurvePath) -> svgwrite.Drawing:
        """
        Create a drawing showing the given path.

        Args:
            path (CurvePath): The path to draw

        Returns:
            svgwrite.Drawing: the drawing, not yet written anywhere
        """
        box = self.view_box(path)
        # profile="full" to support numbers with more than 4 decimal digits
        drawing = svgwrite.Drawing(
            size=(f"{box.width}", f"{box.height}"),
            viewBox=f"{box.xmin} {box.ymin} {box.width} {box.height}",
            profile="full",
        )

        curve_group: svgwrite.container.Group = drawing.g(id="curve")
        if len(path) > 0:
            curve_group.add(
                drawing.path(
                    d=path.to_path_string(),
                    stroke=self.stroke,
                    stroke_width=self.stroke_width,
                    fill="none",
                )
            )
        drawing.add(curve_group)

        if self.show_controls:
            controls_group = drawing.g(id="controls", stroke=SVG_CONTROL_STROKE, stroke_width=self.stroke_width / 2)
            for segment in path:
                controls_group.add(drawing.line(start=segment.start_point, end=segment.start_control_point))
                controls_group.add(drawing.line(start=segment.end_point, end=segment.end_control_point))
            drawing.add(controls_group)

        if self.show_vertices:
            vertices_group = drawing.g(id="vertices", fill=self.stroke)
            for vertex in path.vertices:
                vertices_group.add(drawing.circle(center=vertex, r=SVG_VERTEX_RADIUS))
            drawing.add(vertices_group)

        return drawing

    def to_svg_string(self, path: CurvePath, pretty: bool = False, indent: int = 2) -> str:
        """
        The SVG document text of the given path.

        Args:
            path (CurvePath): The path to draw
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
        """
        svg_buffer = io.StringIO()
        self.drawing(path).write(svg_buffer, pretty=pretty, indent=indent)
        return svg_buffer.getvalue()
