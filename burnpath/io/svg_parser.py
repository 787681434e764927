"""
SVG Importer for BurnPath

Walks an SVG document and produces polyline shape records. Element
transforms are composed with their parents', curves are flattened and
resampled by arc length, and multi-shape documents are merged into one
group.

Paths are imported only when they declare a fill other than "none";
unfilled paths are treated as construction geometry and dropped. Basic
shapes (rect, circle, ellipse, line, polyline, polygon) are always
imported.
"""

import re
import math
from xml.etree import ElementTree as ET
from typing import Dict, List, Optional, Tuple
import logging

from ..core.geometry import (
    IDENTITY, Point, Transform, compose, rotation, scaling, skew_x, skew_y,
    translation
)
from ..core.records import DEFAULT_STROKE_COLOR, DEFAULT_STROKE_WIDTH, Polyline, group_records
from ..core.sampling import (
    flatten_cubic_bezier, flatten_quadratic_bezier, resample_by_length,
    sample_arc, sample_ellipse
)
from ..errors import DegenerateGeometryError, EmptyResultError, ParseError

logger = logging.getLogger(__name__)

# Style properties inherited from enclosing groups
INHERITED_STYLE = ('fill', 'stroke', 'stroke-width')


class SVGParser:
    """Parse SVG documents into shape records."""

    SVG_NS = '{http://www.w3.org/2000/svg}'

    # Structural and non-visual elements whose subtrees are never drawn
    SKIPPED_TAGS = frozenset({
        'defs', 'clipPath', 'mask', 'marker', 'symbol', 'use', 'style', 'title',
    })

    def __init__(self):
        self.current_transform: Transform = IDENTITY
        self.records: List[Polyline] = []

    def parse_file(self, filepath: str) -> list:
        """Parse an SVG file and return its shape records."""
        with open(filepath, 'r', encoding='utf-8') as f:
            return self.parse_string(f.read())

    def parse_string(self, svg_string: str) -> list:
        """Parse an SVG string and return its shape records."""
        try:
            root = ET.fromstring(svg_string)
        except ET.ParseError as e:
            raise ParseError(f"Malformed SVG: {e}") from e
        return self.parse_svg(root)

    def parse_svg(self, root: ET.Element) -> list:
        """
        Parse the SVG root element.

        Raises:
            ParseError: on malformed attributes or path data.
            EmptyResultError: when the document holds nothing drawable.
        """
        if self._tag(root) != 'svg':
            raise ParseError(f"Root element is <{self._tag(root)}>, expected <svg>")

        self.records = []
        try:
            self.current_transform = self._document_transform(root)
            self._parse_element(root, {})
        except ValueError as e:
            raise ParseError(f"Invalid SVG content: {e}") from e

        records = group_records(self.records)
        if not records:
            raise EmptyResultError("SVG document contains no drawable shapes")
        logger.info(f"Imported {len(self.records)} shapes from SVG")
        return records

    def _tag(self, element: ET.Element) -> str:
        tag = element.tag
        if not isinstance(tag, str):
            # Comments and processing instructions
            return ''
        return tag.replace(self.SVG_NS, '')

    def _document_transform(self, root: ET.Element) -> Transform:
        """Scale from viewBox units to the declared width/height."""
        viewbox = root.get('viewBox')
        width = root.get('width')
        height = root.get('height')
        if not viewbox or not width or not height:
            return IDENTITY
        vb_parts = [float(v) for v in re.split(r'[\s,]+', viewbox.strip())]
        if len(vb_parts) != 4 or vb_parts[2] <= 0 or vb_parts[3] <= 0:
            raise ParseError(f"Invalid viewBox: {viewbox!r}")
        try:
            sx = self._parse_length(width) / vb_parts[2]
            sy = self._parse_length(height) / vb_parts[3]
        except ValueError:
            # Percentage or unparseable sizes keep viewBox units
            return translation(-vb_parts[0], -vb_parts[1])
        return compose(scaling(sx, sy), translation(-vb_parts[0], -vb_parts[1]))

    def _get_style_value(self, element: ET.Element, attr: str,
                         inherited: Dict[str, str], default: Optional[str] = None) -> Optional[str]:
        """Get style attribute value, checking style, then the attribute, then parents."""
        style = element.get('style', '')
        if style:
            # Parse style="fill:black;stroke:none"
            for part in style.split(';'):
                if ':' in part:
                    key, val = part.split(':', 1)
                    if key.strip() == attr:
                        return val.strip()

        value = element.get(attr)
        if value:
            return value
        return inherited.get(attr, default)

    def _parse_element(self, element: ET.Element, inherited: Dict[str, str]) -> None:
        """Recursively parse SVG elements."""
        tag = self._tag(element)
        if tag in self.SKIPPED_TAGS or not tag:
            return

        # Save current transform
        saved_transform = self.current_transform

        transform_str = element.get('transform')
        if transform_str:
            self.current_transform = compose(self.current_transform,
                                             self._parse_transform(transform_str))

        style = dict(inherited)
        for attr in INHERITED_STYLE:
            value = self._get_style_value(element, attr, inherited)
            if value is not None:
                style[attr] = value

        try:
            if tag == 'rect':
                self._add(self._parse_rect(element), True, style)
            elif tag == 'circle':
                self._add(self._parse_circle(element), True, style)
            elif tag == 'ellipse':
                self._add(self._parse_ellipse(element), True, style)
            elif tag == 'line':
                self._add(self._parse_line(element), False, style)
            elif tag == 'polyline':
                self._add(self._parse_points(element.get('points', '')), False, style)
            elif tag == 'polygon':
                self._add(self._parse_points(element.get('points', '')), True, style)
            elif tag == 'path':
                self._parse_path(element, style)
            elif tag in ('g', 'svg', 'a', 'switch'):
                for child in element:
                    self._parse_element(child, style)
        except DegenerateGeometryError as e:
            logger.debug(f"Skipping degenerate <{tag}>: {e}")

        # Restore transform
        self.current_transform = saved_transform

    def _add(self, points: List[Point], closed: bool, style: Dict[str, str],
             already_transformed: bool = False) -> None:
        """Record a polyline in document coordinates."""
        if len(points) < 2:
            logger.debug(f"Skipping shape with {len(points)} points")
            return
        if closed and points[0] != points[-1]:
            points = points + [points[0]]
        if not already_transformed:
            points = self.current_transform.apply_all(points)

        fill = style.get('fill')
        if fill is not None and fill.lower() in ('none', 'transparent', ''):
            fill = None
        stroke = style.get('stroke')
        if stroke is None or stroke.lower() in ('none', 'transparent', ''):
            stroke = fill or DEFAULT_STROKE_COLOR
        stroke_width = DEFAULT_STROKE_WIDTH
        if style.get('stroke-width'):
            stroke_width = self._parse_length(style['stroke-width'])

        self.records.append(Polyline(
            points=tuple(points),
            closed=closed,
            stroke_color=stroke,
            stroke_width=stroke_width,
            fill_color=fill,
        ))

    def _parse_rect(self, element: ET.Element) -> List[Point]:
        """Parse a rect element, with rounded corners when rx/ry are set."""
        x = self._parse_length(element.get('x', '0'))
        y = self._parse_length(element.get('y', '0'))
        width = self._parse_length(element.get('width', '0'))
        height = self._parse_length(element.get('height', '0'))
        if width <= 0 or height <= 0:
            raise DegenerateGeometryError(f"rect of size {width}x{height}")

        rx = element.get('rx')
        ry = element.get('ry')
        rx = self._parse_length(rx) if rx else None
        ry = self._parse_length(ry) if ry else None
        radius = min(rx if rx is not None else (ry or 0.0), width / 2, height / 2)
        if radius <= 0:
            return [Point(x, y), Point(x + width, y),
                    Point(x + width, y + height), Point(x, y + height)]

        points = []
        corners = [
            (Point(x + width - radius, y + radius), -90),
            (Point(x + width - radius, y + height - radius), 0),
            (Point(x + radius, y + height - radius), 90),
            (Point(x + radius, y + radius), 180),
        ]
        for centre, start in corners:
            points.extend(sample_arc(centre, radius, start, 90))
        return points

    def _parse_circle(self, element: ET.Element) -> List[Point]:
        """Parse a circle element."""
        cx = self._parse_length(element.get('cx', '0'))
        cy = self._parse_length(element.get('cy', '0'))
        r = self._parse_length(element.get('r', '0'))
        return sample_ellipse(Point(cx, cy), r, r)

    def _parse_ellipse(self, element: ET.Element) -> List[Point]:
        """Parse an ellipse element."""
        cx = self._parse_length(element.get('cx', '0'))
        cy = self._parse_length(element.get('cy', '0'))
        rx = self._parse_length(element.get('rx', '0'))
        ry = self._parse_length(element.get('ry', '0'))
        return sample_ellipse(Point(cx, cy), rx, ry)

    def _parse_line(self, element: ET.Element) -> List[Point]:
        """Parse a line element."""
        start = Point(self._parse_length(element.get('x1', '0')),
                      self._parse_length(element.get('y1', '0')))
        end = Point(self._parse_length(element.get('x2', '0')),
                    self._parse_length(element.get('y2', '0')))
        if start == end:
            raise DegenerateGeometryError("line with coincident end points")
        return [start, end]

    def _parse_path(self, element: ET.Element, style: Dict[str, str]) -> None:
        """Import each subpath of a filled path element."""
        fill = style.get('fill')
        if fill is None or fill.strip().lower() in ('none', 'transparent', ''):
            logger.debug("Skipping unfilled path")
            return

        d = element.get('d', '')
        if not d.strip():
            return

        for points, closed in self._parse_path_d(d):
            try:
                sampled = resample_by_length(points, self.current_transform)
            except DegenerateGeometryError as e:
                logger.debug(f"Skipping subpath: {e}")
                continue
            self._add(sampled, closed, style, already_transformed=True)

    def _parse_path_d(self, d: str) -> List[Tuple[List[Point], bool]]:
        """
        Parse SVG path data into flattened subpaths.

        Every M/m starts a new subpath. Curves are flattened finely here;
        the caller resamples the result by arc length.

        Returns:
            List of (points, closed) per subpath, in user units.

        Raises:
            ParseError: if a command is missing arguments.
        """
        tokens = self._tokenize_path(d)
        subpaths: List[Tuple[List[Point], bool]] = []
        current_path: List[Point] = []

        current_x, current_y = 0.0, 0.0
        start_x, start_y = 0.0, 0.0
        i = 0
        last_command = None
        last_control = None  # For smooth curves (S, T)

        def finish(closed: bool) -> None:
            nonlocal current_path
            if len(current_path) >= 2:
                subpaths.append((current_path, closed))
            current_path = []

        def take(count: int) -> List[float]:
            nonlocal i
            values = tokens[i:i + count]
            if len(values) < count or any(v.isalpha() for v in values):
                raise ParseError(f"Path command {command!r} is missing arguments in {d!r}")
            i += count
            return [float(v) for v in values]

        def take_flag() -> int:
            # Arc flags are single digits and may run into the next number ("0110")
            nonlocal i
            if i >= len(tokens) or tokens[i][:1] not in ('0', '1'):
                raise ParseError(f"Path command {command!r} has an invalid arc flag in {d!r}")
            token = tokens[i]
            if len(token) == 1:
                i += 1
            else:
                tokens[i] = token[1:]
            return int(token[0])

        def ensure_started() -> None:
            if not current_path:
                current_path.append(Point(current_x, current_y))

        while i < len(tokens):
            token = tokens[i]

            if token.isalpha():
                command = token
                i += 1
            elif last_command:
                # Repeat last command (M becomes L, m becomes l)
                command = last_command
                if command == 'M':
                    command = 'L'
                elif command == 'm':
                    command = 'l'
            else:
                raise ParseError(f"Path data must start with a command: {d!r}")

            is_relative = command.islower()
            cmd_upper = command.upper()
            last_command = command

            if cmd_upper == 'M':
                x, y = take(2)
                if is_relative:
                    x += current_x
                    y += current_y
                finish(False)
                current_x, current_y = x, y
                start_x, start_y = x, y
                current_path.append(Point(x, y))
                last_control = None

            elif cmd_upper == 'L':
                x, y = take(2)
                if is_relative:
                    x += current_x
                    y += current_y
                ensure_started()
                current_path.append(Point(x, y))
                current_x, current_y = x, y
                last_control = None

            elif cmd_upper == 'H':
                (x,) = take(1)
                if is_relative:
                    x += current_x
                ensure_started()
                current_path.append(Point(x, current_y))
                current_x = x
                last_control = None

            elif cmd_upper == 'V':
                (y,) = take(1)
                if is_relative:
                    y += current_y
                ensure_started()
                current_path.append(Point(current_x, y))
                current_y = y
                last_control = None

            elif cmd_upper in ('C', 'S'):
                if cmd_upper == 'C':
                    cp1x, cp1y, cp2x, cp2y, x, y = take(6)
                    if is_relative:
                        cp1x += current_x
                        cp1y += current_y
                else:
                    cp2x, cp2y, x, y = take(4)
                    # Reflect last control point for smooth curve
                    if last_control is not None and last_control[0] == 'C':
                        cp1x = 2 * current_x - last_control[1].x
                        cp1y = 2 * current_y - last_control[1].y
                    else:
                        cp1x, cp1y = current_x, current_y
                if is_relative:
                    cp2x += current_x
                    cp2y += current_y
                    x += current_x
                    y += current_y
                ensure_started()
                curve = flatten_cubic_bezier(Point(current_x, current_y), Point(cp1x, cp1y),
                                             Point(cp2x, cp2y), Point(x, y))
                current_path.extend(curve[1:])
                current_x, current_y = x, y
                last_control = ('C', Point(cp2x, cp2y))

            elif cmd_upper in ('Q', 'T'):
                if cmd_upper == 'Q':
                    cpx, cpy, x, y = take(4)
                    if is_relative:
                        cpx += current_x
                        cpy += current_y
                else:
                    x, y = take(2)
                    if last_control is not None and last_control[0] == 'Q':
                        cpx = 2 * current_x - last_control[1].x
                        cpy = 2 * current_y - last_control[1].y
                    else:
                        cpx, cpy = current_x, current_y
                if is_relative:
                    x += current_x
                    y += current_y
                ensure_started()
                curve = flatten_quadratic_bezier(Point(current_x, current_y),
                                                 Point(cpx, cpy), Point(x, y))
                current_path.extend(curve[1:])
                current_x, current_y = x, y
                last_control = ('Q', Point(cpx, cpy))

            elif cmd_upper == 'A':
                rx, ry, x_rot = take(3)
                large_arc = take_flag()
                sweep = take_flag()
                x, y = take(2)
                if is_relative:
                    x += current_x
                    y += current_y
                ensure_started()
                # Skip degenerate arcs (start == end)
                if abs(x - current_x) > 1e-9 or abs(y - current_y) > 1e-9:
                    start = Point(current_x, current_y)
                    for cp1, cp2, end in self._arc_to_bezier(
                            current_x, current_y, abs(rx), abs(ry), x_rot,
                            int(large_arc), int(sweep), x, y):
                        current_path.extend(flatten_cubic_bezier(start, cp1, cp2, end)[1:])
                        start = end
                current_x, current_y = x, y
                last_control = None

            elif cmd_upper == 'Z':
                if current_path and current_path[-1] != Point(start_x, start_y):
                    current_path.append(Point(start_x, start_y))
                finish(True)
                current_x, current_y = start_x, start_y
                last_control = None

        finish(False)
        return subpaths

    def _arc_to_bezier(self, x1: float, y1: float, rx: float, ry: float,
                       phi: float, large_arc: int, sweep: int,
                       x2: float, y2: float) -> List[Tuple[Point, Point, Point]]:
        """Convert SVG arc to cubic bezier curves (W3C endpoint parameterization)."""
        if rx == 0 or ry == 0:
            # Degenerate case - straight line
            return [(Point(x1, y1), Point(x2, y2), Point(x2, y2))]

        phi_rad = math.radians(phi)
        cos_phi = math.cos(phi_rad)
        sin_phi = math.sin(phi_rad)

        # Step 1: Compute (x1', y1')
        dx = (x1 - x2) / 2
        dy = (y1 - y2) / 2
        x1p = cos_phi * dx + sin_phi * dy
        y1p = -sin_phi * dx + cos_phi * dy

        # Ensure radii are large enough
        lambda_ = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
        if lambda_ > 1:
            rx *= math.sqrt(lambda_)
            ry *= math.sqrt(lambda_)

        # Step 2: Compute (cx', cy')
        denominator = (rx*rx * y1p*y1p) + (ry*ry * x1p*x1p)
        sq = max(0, ((rx*rx * ry*ry) - denominator) / denominator) if denominator else 0
        coef = math.sqrt(sq)
        if large_arc == sweep:
            coef = -coef
        cxp = coef * rx * y1p / ry
        cyp = -coef * ry * x1p / rx

        # Step 3: Compute (cx, cy) from (cx', cy')
        cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
        cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

        # Step 4: Compute theta1 and dtheta
        def angle(ux, uy, vx, vy):
            n = math.sqrt(ux*ux + uy*uy) * math.sqrt(vx*vx + vy*vy)
            if n == 0:
                return 0
            c = (ux*vx + uy*vy) / n
            s = ux*vy - uy*vx
            return math.atan2(s, max(-1, min(1, c)))

        theta1 = angle(1, 0, (x1p - cxp) / rx, (y1p - cyp) / ry)
        dtheta = angle((x1p - cxp) / rx, (y1p - cyp) / ry,
                       (-x1p - cxp) / rx, (-y1p - cyp) / ry)

        if sweep == 0 and dtheta > 0:
            dtheta -= 2 * math.pi
        elif sweep == 1 and dtheta < 0:
            dtheta += 2 * math.pi

        # Split arc into segments of max 90 degrees
        segments = max(1, int(math.ceil(abs(dtheta) / (math.pi / 2))))
        delta = dtheta / segments
        alpha = math.sin(delta) * (math.sqrt(4 + 3 * math.tan(delta/2)**2) - 1) / 3

        def transform_point(px, py):
            x = px * rx
            y = py * ry
            return Point(
                cos_phi * x - sin_phi * y + cx,
                sin_phi * x + cos_phi * y + cy
            )

        curves = []
        for i in range(segments):
            t1 = theta1 + i * delta
            t2 = theta1 + (i + 1) * delta

            x1_i = math.cos(t1)
            y1_i = math.sin(t1)
            x2_i = math.cos(t2)
            y2_i = math.sin(t2)

            c1 = transform_point(x1_i - alpha * y1_i, y1_i + alpha * x1_i)
            c2 = transform_point(x2_i + alpha * y2_i, y2_i - alpha * x2_i)
            curves.append((c1, c2, transform_point(x2_i, y2_i)))

        return curves

    def _tokenize_path(self, d: str) -> List[str]:
        """Tokenize SVG path data into commands and numbers."""
        pattern = r'([MmZzLlHhVvCcSsQqTtAa])|(-?[0-9]+\.?[0-9]*(?:[eE][-+]?[0-9]+)?)|(-?\.[0-9]+(?:[eE][-+]?[0-9]+)?)'
        return [match.group(0) for match in re.finditer(pattern, d)]

    def _parse_length(self, length_str: str) -> float:
        """Parse SVG length value, ignoring units."""
        length_str = length_str.strip()
        for unit in ('px', 'pt', 'pc', 'mm', 'cm', 'in', 'em'):
            if length_str.endswith(unit):
                return float(length_str[:-len(unit)])
        return float(length_str)

    def _parse_points(self, points_str: str) -> List[Point]:
        """Parse SVG points attribute."""
        numbers = re.findall(r'-?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?', points_str)
        if len(numbers) % 2:
            raise ParseError(f"Odd number of coordinates in points={points_str!r}")
        return [Point(float(numbers[i]), float(numbers[i + 1]))
                for i in range(0, len(numbers), 2)]

    def _parse_transform(self, transform_str: str) -> Transform:
        """Compose the transform list of a ``transform`` attribute, left to right."""
        transform_pattern = r'(translate|rotate|scale|matrix|skewX|skewY)\s*\(([^)]*)\)'
        result = IDENTITY

        for match in re.finditer(transform_pattern, transform_str):
            func = match.group(1)
            args = [float(x) for x in
                    re.findall(r'-?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?', match.group(2))]

            if func == 'translate':
                tx = args[0] if len(args) > 0 else 0
                ty = args[1] if len(args) > 1 else 0
                step = translation(tx, ty)
            elif func == 'rotate':
                angle = args[0] if args else 0
                cx = args[1] if len(args) > 1 else 0
                cy = args[2] if len(args) > 2 else 0
                step = rotation(angle, cx, cy)
            elif func == 'scale':
                sx = args[0] if len(args) > 0 else 1
                sy = args[1] if len(args) > 1 else sx
                step = scaling(sx, sy)
            elif func == 'matrix':
                if len(args) != 6:
                    raise ParseError(f"matrix() needs 6 values: {transform_str!r}")
                step = Transform(*args)
            elif func == 'skewX':
                step = skew_x(args[0] if args else 0)
            else:
                step = skew_y(args[0] if args else 0)

            result = compose(result, step)

        return result


def import_vector_markup(text: str) -> list:
    """Import an SVG document as shape records."""
    return SVGParser().parse_string(text)
