"""
Basalt Icons Generator

A single-file Python CLI tool that builds the Basalt hexagon-cluster icon as an
SVG document plus a set of PNG sizes. The SVG is written with svgwrite, each
PNG is rasterized from the same scene by cairosvg and encoded via Pillow.

Usage:
    python basalt_icons.py
    python basalt_icons.py build/icons --debug
    python basalt_icons.py build/icons --theme light --sizes 16 32 48
"""

import argparse
import dataclasses
import functools
import io
import math
import os
import re
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import cairosvg
import svgwrite
from PIL import Image, ImageColor


RGB = Tuple[int, int, int]
Point = Tuple[float, float]

HEXAGON_SIZE: float = 10.0
HEXAGON_MARGIN: float = 0.0
SVG_WIDTH: int = 128
SVG_HEIGHT: int = 128
CANVAS_MARGIN_RATIO: float = 0.12
BORDER_STROKE_WIDTH_RATIO: float = 0.015
BORDER_CORNER_RADIUS_RATIO: float = 0.05
PNG_SIZES: Tuple[int, ...] = (32, 64, 96, 128, 256)
ICON_NAME: str = "basalt"
BASE_HEXAGON_ID: str = "base"


# ---------------------------------------------------------------------------
# Rect
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in real-valued pixel space (y grows downward)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return (self.left + self.width / 2.0, self.top + self.height / 2.0)

    def union(self, other: "Rect") -> "Rect":
        """Return the smallest rectangle containing both rectangles."""
        left = min(self.left, other.left)
        top = min(self.top, other.top)
        right = max(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        return Rect(left, top, right - left, bottom - top)

    def contains(self, other: "Rect") -> bool:
        return (self.left <= other.left and self.top <= other.top
                and other.right <= self.right and other.bottom <= self.bottom)

    @classmethod
    def bounding(cls, rects: Iterable["Rect"]) -> "Rect":
        """Union of a non-empty collection of rectangles.

        Raises:
            ValueError: If ``rects`` is empty.
        """
        rects = list(rects)
        if not rects:
            raise ValueError("Cannot compute the bounding box of zero rectangles")
        return functools.reduce(cls.union, rects)


# ---------------------------------------------------------------------------
# HexagonGeometry
# ---------------------------------------------------------------------------
class HexagonGeometry:
    """Vertex and extent computation for the icon's regular hexagons.

    Vertices sit at 30 + 60*k degrees from the positive x-axis, so two apexes
    lie on the vertical axis and the left/right sides are vertical edges. The
    hexagon therefore spans R*cos(30deg) horizontally and R vertically on
    each side of its centre.

    Attributes:
        circumradius: The circumradius (centre-to-vertex distance) in pixels.
    """

    def __init__(self, circumradius: float) -> None:
        self._circumradius: float = circumradius

    @property
    def circumradius(self) -> float:
        """Return the circumradius R."""
        return self._circumradius

    @property
    def half_width(self) -> float:
        """Return the horizontal half extent R * cos(30deg)."""
        return self._circumradius * math.cos(math.pi / 6.0)

    @property
    def half_height(self) -> float:
        """Return the vertical half extent R."""
        return self._circumradius

    def vertices(self, cx: float = 0.0, cy: float = 0.0) -> List[Point]:
        """Compute the 6 vertices of the hexagon centred at (cx, cy).

        Vertex k lies at angle 60deg * (k + 0.5), i.e. vertex 0 is at 30deg
        and the sequence proceeds in increasing angle.

        Args:
            cx: X coordinate of the hexagon centre.
            cy: Y coordinate of the hexagon centre.

        Returns:
            A list of 6 (x, y) tuples.
        """
        R = self._circumradius
        return [
            (cx + R * math.cos(math.pi / 3.0 * (k + 0.5)),
             cy + R * math.sin(math.pi / 3.0 * (k + 0.5)))
            for k in range(6)
        ]

    def bounding_box(self, cx: float, cy: float) -> Rect:
        """Return the bounding rectangle of the hexagon centred at (cx, cy)."""
        return Rect(
            cx - self.half_width,
            cy - self.half_height,
            2.0 * self.half_width,
            2.0 * self.half_height,
        )


HEXAGON_GEOMETRY = HexagonGeometry(HEXAGON_SIZE)


# ---------------------------------------------------------------------------
# Grid model
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class HexagonSlot:
    """Abstract grid entry: integer grid coordinate plus palette slot."""

    grid_x: int
    grid_y: int
    color_index: int


# Staggered rows: odd columns on rows 1 and 5, even columns on row 3.
HEXAGON_SLOTS: Tuple[HexagonSlot, ...] = (
    HexagonSlot(1, 1, 0),
    HexagonSlot(3, 1, 1),
    HexagonSlot(5, 1, 2),
    HexagonSlot(2, 3, 3),
    HexagonSlot(4, 3, 4),
    HexagonSlot(1, 5, 5),
)


# ---------------------------------------------------------------------------
# ColorParser
# ---------------------------------------------------------------------------
class ColorParser:
    """Parses palette color strings into RGB tuples.

    Supports CSS named colours, hex codes (#RGB, #RRGGBB), and RGB
    comma-separated tuples (e.g. '255,128,0').
    """

    def parse(self, color_str: str) -> RGB:
        """Parse a color string into an (R, G, B) tuple.

        Args:
            color_str: The color specification string.

        Returns:
            An (R, G, B) tuple of integers in [0, 255].

        Raises:
            ValueError: If the color string cannot be parsed.
        """
        s = color_str.strip()
        if "," in s:
            return self._parse_rgb_tuple(s)
        try:
            rgb = ImageColor.getrgb(s)
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid color specification: '{color_str}'")
        return (rgb[0], rgb[1], rgb[2])

    def parse_all(self, color_strs: Iterable[str]) -> Tuple[RGB, ...]:
        """Parse an ordered palette, preserving order."""
        return tuple(self.parse(s) for s in color_strs)

    def _parse_rgb_tuple(self, s: str) -> RGB:
        parts = [p.strip() for p in s.split(",")]
        if len(parts) != 3:
            raise ValueError(f"RGB tuple must have 3 components, got {len(parts)}: '{s}'")
        try:
            r, g, b = (int(p) for p in parts)
        except ValueError:
            raise ValueError(f"RGB components must be integers: '{s}'")
        for v in (r, g, b):
            if not 0 <= v <= 255:
                raise ValueError(f"RGB values must be in [0, 255], got {v}: '{s}'")
        return (r, g, b)


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Theme:
    """Named palette: border stroke, border fill and ordered hexagon colors."""

    name: str
    border_color: RGB
    border_fill: RGB
    hexagon_colors: Tuple[RGB, ...]

    @classmethod
    def from_strings(
        cls,
        name: str,
        border_color: str,
        border_fill: str,
        hexagon_colors: Sequence[str],
    ) -> "Theme":
        """Build a theme from color strings understood by ColorParser.

        Raises:
            ValueError: If any color string is malformed.
        """
        parser = ColorParser()
        return cls(
            name=name,
            border_color=parser.parse(border_color),
            border_fill=parser.parse(border_fill),
            hexagon_colors=parser.parse_all(hexagon_colors),
        )


THEMES: Dict[str, Theme] = {
    theme.name: theme
    for theme in (
        Theme.from_strings(
            "light",
            border_color="#c8d1d9",
            border_fill="#2c2c2c",
            hexagon_colors=["#4da3ff", "#6bcb77", "#ffd6d0", "#ff9f43", "#9d4edd", "#ff6b6b"],
        ),
    )
}
DEFAULT_THEME: str = "light"


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PlacedHexagon:
    """A hexagon resolved to a pixel-space centre and a fill color."""

    center: Point
    color: RGB

    @property
    def bounding_box(self) -> Rect:
        return HEXAGON_GEOMETRY.bounding_box(*self.center)

    @property
    def left(self) -> float:
        return self.bounding_box.left

    @property
    def right(self) -> float:
        return self.bounding_box.right

    @property
    def top(self) -> float:
        return self.bounding_box.top

    @property
    def bottom(self) -> float:
        return self.bounding_box.bottom


@dataclass(frozen=True)
class RenderContext:
    """Resolved layout for one generation run.

    Attributes:
        theme: The active palette.
        hexagons: One PlacedHexagon per grid slot, in grid order.
        canvas: Square canvas centred on the union of hexagon boxes.
        border_stroke_width: Border stroke width, proportional to the canvas.
    """

    theme: Theme
    hexagons: Tuple[PlacedHexagon, ...]
    canvas: Rect
    border_stroke_width: float

    @classmethod
    def build(
        cls,
        theme: Theme,
        slots: Sequence[HexagonSlot] = HEXAGON_SLOTS,
    ) -> "RenderContext":
        """Place every grid slot and derive the canvas and border width.

        Columns are ``dx = HEXAGON_SIZE + HEXAGON_MARGIN`` apart and rows
        ``dx / 2 * tan(60deg)`` apart. The canvas side is the larger side of
        the hexagon union scaled by ``1 + CANVAS_MARGIN_RATIO``.

        Args:
            theme: Palette providing a color for every slot index.
            slots: Grid entries to place.

        Returns:
            The immutable RenderContext.

        Raises:
            ValueError: If the theme palette does not cover every slot index.
        """
        needed = max(slot.color_index for slot in slots) + 1
        if len(theme.hexagon_colors) < needed:
            raise ValueError(
                f"Theme '{theme.name}' defines {len(theme.hexagon_colors)} hexagon "
                f"colors but the grid references {needed}"
            )

        dx = HEXAGON_SIZE + HEXAGON_MARGIN
        dy = dx / 2.0 * math.tan(math.pi / 3.0)

        hexagons = tuple(
            PlacedHexagon(
                center=(dx * slot.grid_x, dy * slot.grid_y),
                color=theme.hexagon_colors[slot.color_index],
            )
            for slot in slots
        )

        union = Rect.bounding(h.bounding_box for h in hexagons)
        cx, cy = union.center
        half = max(union.width, union.height) * (1.0 + CANVAS_MARGIN_RATIO) / 2.0
        canvas = Rect(cx - half, cy - half, half * 2.0, half * 2.0)

        return cls(
            theme=theme,
            hexagons=hexagons,
            canvas=canvas,
            border_stroke_width=canvas.width * BORDER_STROKE_WIDTH_RATIO,
        )


# ---------------------------------------------------------------------------
# VectorScene
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BorderShape:
    """Rounded rectangle drawn behind the hexagons."""

    rect: Rect
    corner_radius: float
    stroke_width: float
    stroke: RGB
    fill: RGB


@dataclass(frozen=True)
class HexagonInstance:
    """One placement of the shared base outline."""

    x: float
    y: float
    fill: RGB


@dataclass(frozen=True)
class VectorScene:
    """Immutable SVG scene: one shared outline plus positioned instances.

    ``width``/``height`` are the declared pixel size; ``view_box`` maps the
    geometric coordinates onto that pixel box.
    """

    width: int
    height: int
    view_box: Rect
    base_points: Tuple[Point, ...]
    border: BorderShape
    instances: Tuple[HexagonInstance, ...]

    def resized(self, size: int) -> "VectorScene":
        """Return a snapshot declared at size x size; the view-box is kept."""
        return dataclasses.replace(self, width=size, height=size)

    def to_drawing(self) -> svgwrite.Drawing:
        """Build the svgwrite document for this scene."""
        dwg = svgwrite.Drawing(size=(self.width, self.height))
        dwg.viewbox(self.view_box.left, self.view_box.top,
                    self.view_box.width, self.view_box.height)

        dwg.defs.add(dwg.polygon(points=list(self.base_points), id=BASE_HEXAGON_ID))

        border = self.border
        dwg.add(dwg.rect(
            insert=(border.rect.left, border.rect.top),
            size=(border.rect.width, border.rect.height),
            rx=border.corner_radius,
            ry=border.corner_radius,
            fill=svgwrite.rgb(*border.fill),
            stroke=svgwrite.rgb(*border.stroke),
            stroke_width=border.stroke_width,
        ))

        for instance in self.instances:
            dwg.add(dwg.use(
                "#" + BASE_HEXAGON_ID,
                insert=(instance.x, instance.y),
                fill=svgwrite.rgb(*instance.fill),
            ))
        return dwg

    def to_svg(self) -> str:
        """Serialize the scene to an SVG string."""
        return self.to_drawing().tostring()


# ---------------------------------------------------------------------------
# SceneRenderer
# ---------------------------------------------------------------------------
class SceneRenderer:
    """Turns a RenderContext into a VectorScene."""

    def base_points(self) -> Tuple[Point, ...]:
        """Vertices of the shared hexagon outline, centred at the origin.

        Coordinates are rounded to 6 decimals so that values such as
        cos(90deg) * R serialize as 0.0 rather than 6e-16.
        """
        return tuple(
            (round(x, 6), round(y, 6)) for x, y in HEXAGON_GEOMETRY.vertices()
        )

    def border(self, context: RenderContext) -> BorderShape:
        """Rounded border inset by half its stroke so the stroke stays on the canvas."""
        canvas = context.canvas
        sw = context.border_stroke_width
        return BorderShape(
            rect=Rect(canvas.left + sw / 2.0, canvas.top + sw / 2.0,
                      canvas.width - sw, canvas.height - sw),
            corner_radius=canvas.width * BORDER_CORNER_RADIUS_RATIO,
            stroke_width=sw,
            stroke=context.theme.border_color,
            fill=context.theme.border_fill,
        )

    def build_scene(
        self,
        context: RenderContext,
        width: int = SVG_WIDTH,
        height: int = SVG_HEIGHT,
    ) -> VectorScene:
        """Build the scene for a resolved layout.

        Args:
            context: The resolved layout.
            width: Declared pixel width of the document.
            height: Declared pixel height of the document.

        Returns:
            A VectorScene whose view-box equals ``context.canvas``.
        """
        return VectorScene(
            width=width,
            height=height,
            view_box=context.canvas,
            base_points=self.base_points(),
            border=self.border(context),
            instances=tuple(
                HexagonInstance(h.center[0], h.center[1], h.color)
                for h in context.hexagons
            ),
        )


# ---------------------------------------------------------------------------
# IconExporter
# ---------------------------------------------------------------------------
class IconExporter:
    """Writes the SVG and the PNG sizes of a scene into a directory.

    Attributes:
        name: Base file name of every artifact.
        sizes: Ascending PNG edge lengths in pixels.
    """

    def __init__(
        self,
        name: str = ICON_NAME,
        sizes: Iterable[int] = PNG_SIZES,
        on_saved: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Initialise the exporter.

        Args:
            name: Base file name (``<name>.svg``, ``<name>-SxS.png``).
            sizes: PNG sizes; duplicates are dropped and order is ascending.
            on_saved: Called with each artifact path right after it is written.

        Raises:
            ValueError: If a size is not a positive integer.
        """
        sizes = sorted(set(sizes))
        for size in sizes:
            if size <= 0:
                raise ValueError(f"PNG size must be a positive integer, got {size}")
        self.name: str = name
        self.sizes: List[int] = sizes
        self._on_saved = on_saved

    def svg_path(self, directory: str) -> str:
        return os.path.join(directory, f"{self.name}.svg")

    def png_path(self, directory: str, size: int) -> str:
        return os.path.join(directory, f"{self.name}-{size}x{size}.png")

    def rasterize(self, scene: VectorScene, size: int) -> Image.Image:
        """Rasterize the scene at size x size without touching ``scene``.

        Args:
            scene: The shared scene.
            size: Output edge length in pixels.

        Returns:
            An RGBA Pillow image of exactly (size, size).
        """
        svg = scene.resized(size).to_svg()
        png = cairosvg.svg2png(bytestring=svg.encode("utf-8"))
        with Image.open(io.BytesIO(png)) as img:
            return img.convert("RGBA")

    def export(self, scene: VectorScene, directory: str) -> List[str]:
        """Write ``<name>.svg`` then one PNG per size.

        Files are overwritten. An error aborts the run; artifacts written
        before it stay on disk.

        Args:
            scene: The scene to export, written as-is for the SVG.
            directory: Existing, writable output directory.

        Returns:
            The paths written, in write order.

        Raises:
            OSError: If a file cannot be written.
        """
        written: List[str] = []

        svg_path = self.svg_path(directory)
        scene.to_drawing().saveas(svg_path)
        self._saved(svg_path, written)

        for size in self.sizes:
            png_path = self.png_path(directory, size)
            self.rasterize(scene, size).save(png_path, "PNG")
            self._saved(png_path, written)

        return written

    def _saved(self, path: str, written: List[str]) -> None:
        written.append(path)
        if self._on_saved is not None:
            self._on_saved(path)


# ---------------------------------------------------------------------------
# Version helper
# ---------------------------------------------------------------------------
def _changelog_version(fallback: str = "0.0.0") -> str:
    """Read the highest version from CHANGELOG.md next to this script.

    Scans for ``## [X.Y.Z]`` headings (skipping ``[Unreleased]``) and returns
    the first match. Returns *fallback* when the file is missing or has no
    versioned headings.
    """
    changelog = os.path.join(os.path.dirname(os.path.abspath(__file__)), "CHANGELOG.md")
    try:
        with open(changelog, "r", encoding="utf-8") as fh:
            for line in fh:
                m = re.match(r"^##\s+\[(\d+\.\d+\.\d+)\]", line)
                if m:
                    return m.group(1)
    except OSError:
        pass
    return fallback


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
class Application:
    """Top-level entry point for the Basalt Icons Generator.

    Parses CLI arguments, builds the layout and scene, exports every
    artifact and prints one line per file written.
    """

    VERSION:      str = _changelog_version("1.0.0")
    BUILD_DATE:   str = "2026-10-19"
    TITLE:        str = "Basalt Icons Generator"
    BANNER_WIDTH: int = 60

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Execute the full generation pipeline.

        Args:
            argv: Argument list; ``sys.argv[1:]`` when None.

        Returns:
            None
        """
        args = self._build_parser().parse_args(argv)

        try:
            context = RenderContext.build(THEMES[args.theme])
            exporter = IconExporter(
                sizes=args.sizes if args.sizes else PNG_SIZES,
                on_saved=self._report_saved,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        scene = SceneRenderer().build_scene(context)

        self._print_banner()
        try:
            os.makedirs(args.directory, exist_ok=True)
            exporter.export(scene, args.directory)
        except OSError as e:
            print(f"Error: Cannot write icon files: {e}", file=sys.stderr)
            sys.exit(1)

        if args.debug:
            self._print_debug(context, exporter)
        print()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build the argparse ArgumentParser."""
        banner = self._banner_text()

        class _BannerParser(argparse.ArgumentParser):
            """ArgumentParser that prints the banner before help text."""

            def print_help(self, file=None):
                if file is None:
                    file = sys.stdout
                file.write(banner + "\n\n")
                super().print_help(file)

        parser = _BannerParser(
            description="Basalt Icons Generator: write the hexagon-cluster icon as SVG and PNG.",
        )
        parser.add_argument("directory", nargs="?", default=".",
                            help="Output directory, created if missing (default: .)")
        parser.add_argument("--theme", choices=sorted(THEMES), default=DEFAULT_THEME,
                            help=f"Palette (default: {DEFAULT_THEME})")
        parser.add_argument("--sizes", type=int, nargs="+", default=None,
                            help="PNG sizes in pixels (default: "
                                 + " ".join(str(s) for s in PNG_SIZES) + ")")
        parser.add_argument("--debug", action="store_true",
                            help="Print the resolved layout")
        return parser

    def _report_saved(self, path: str) -> None:
        size_str = self._format_file_size(os.path.getsize(path))
        print(f"  Saved: {path} ({size_str})")

    def _banner_text(self) -> str:
        """Build the application banner as a string."""
        w = self.BANNER_WIDTH
        inner = w - 2
        lines = [
            "┌" + "─" * inner + "┐",
            f"│{'  Program:    ' + self.TITLE:<{inner}}│",
            f"│{'  Version:    ' + self.VERSION:<{inner}}│",
            f"│{'  Build Date: ' + self.BUILD_DATE:<{inner}}│",
            "└" + "─" * inner + "┘",
        ]
        return "\n".join(lines)

    def _print_banner(self) -> None:
        print(self._banner_text())

    def _print_debug(self, context: RenderContext, exporter: IconExporter) -> None:
        """Print the resolved layout to stdout."""
        canvas = context.canvas
        print(f"\n  Theme:            {context.theme.name}")
        print(f"  Canvas:           ({canvas.left:.3f}, {canvas.top:.3f}) "
              f"{canvas.width:.3f} x {canvas.height:.3f}")
        print(f"  Border stroke:    {context.border_stroke_width:.3f}")
        print(f"  SVG size:         {SVG_WIDTH} x {SVG_HEIGHT}")
        print(f"  PNG sizes:        {', '.join(str(s) for s in exporter.sizes)}")
        for i, hexagon in enumerate(context.hexagons):
            x, y = hexagon.center
            print(f"  Hexagon {i}:        ({x:.3f}, {y:.3f}) "
                  f"#{hexagon.color[0]:02x}{hexagon.color[1]:02x}{hexagon.color[2]:02x}")

    def _format_file_size(self, size_bytes: int) -> str:
        """Format a file size in human-readable form (e.g. '1.23 KB')."""
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.2f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    """Main entry point for the Basalt Icons Generator."""
    if sys.stdout and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    app = Application()
    app.run()


if __name__ == "__main__":
    main()
