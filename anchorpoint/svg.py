"""Parse and format SVG path data.

Path strings are tokenized into absolute MoveTo/LineTo/CurveTo/ClosePath
commands. Horizontal and vertical moves become lines, quadratic segments
are raised to cubics and elliptical arcs are approximated with cubic
segments sampled from ``svgpathtools.Arc``.
"""

import logging
import re
from xml.etree import ElementTree as ET

from svgpathtools import Arc

from anchorpoint.errors import PathParseError
from anchorpoint.types import ClosePath, Command, CurveTo, LineTo, MoveTo

logger = logging.getLogger(__name__)

SVG_TOKEN_RE = re.compile(
    r"([MmLlHhVvCcSsQqTtAaZz])|([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
)

# Number of arguments consumed per repetition of each command
ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

ARC_SEGMENTS = 4


def tokenize_path(d: str) -> list[tuple[str, list[float]]]:
    """Parse SVG path d-string into commands with arguments.

    Returns list of (command, [args]) tuples.
    """
    commands: list[tuple[str, list[float]]] = []
    current_cmd = ""
    current_args: list[float] = []

    for match in SVG_TOKEN_RE.finditer(d):
        letter, number = match.groups()
        if letter:
            if current_cmd:
                commands.append((current_cmd, current_args))
            current_cmd = letter
            current_args = []
        elif current_cmd:
            current_args.append(float(number))

    if current_cmd:
        commands.append((current_cmd, current_args))

    return commands


def _arc_to_curves(
    start: complex,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: complex,
) -> list[Command]:
    if start == end:
        return []
    if rx == 0 or ry == 0:
        return [LineTo(x=end.real, y=end.imag)]

    arc = Arc(start, complex(abs(rx), abs(ry)), rotation, large_arc, sweep, end)
    curves: list[Command] = []
    dt = 1 / ARC_SEGMENTS
    for k in range(ARC_SEGMENTS):
        t0, t1 = k * dt, (k + 1) * dt
        p0, p1 = arc.point(t0), arc.point(t1)
        cp1 = p0 + arc.derivative(t0) * dt / 3
        cp2 = p1 - arc.derivative(t1) * dt / 3
        curves.append(
            CurveTo(x1=cp1.real, y1=cp1.imag, x2=cp2.real, y2=cp2.imag, x=p1.real, y=p1.imag)
        )
    return curves


def parse_path_d(d: str, strict: bool = False) -> list[Command]:
    """Parse an SVG path 'd' attribute into absolute commands.

    Args:
        d: SVG path data string (e.g., "M 0 0 L 100 100 Z")
        strict: Raise PathParseError on malformed data instead of
            skipping the offending command

    Returns:
        Flat command list; every sub-path starts with a MoveTo.
    """
    if not d or not d.strip():
        return []

    commands: list[Command] = []
    current_x, current_y = 0.0, 0.0
    start_x, start_y = 0.0, 0.0
    last_control: tuple[float, float] | None = None  # for S/T reflection
    last_upper = ""
    needs_move = True

    def ensure_subpath() -> None:
        nonlocal needs_move
        if needs_move:
            commands.append(MoveTo(x=current_x, y=current_y))
            needs_move = False

    for cmd, args in tokenize_path(d):
        is_relative = cmd.islower()
        upper = cmd.upper()
        count = ARG_COUNTS[upper]

        if upper == "Z":
            if not needs_move:
                commands.append(ClosePath())
            current_x, current_y = start_x, start_y
            needs_move = True
            last_control = None
            last_upper = upper
            continue

        if not args or len(args) % count:
            message = f"Command {cmd} expects a multiple of {count} numbers, got {len(args)}"
            if strict:
                raise PathParseError(message)
            logger.debug(message)
            continue

        for rep in range(len(args) // count):
            a = args[rep * count : (rep + 1) * count]
            ox, oy = (current_x, current_y) if is_relative else (0.0, 0.0)
            # Repeated M arguments are implicit LineTo
            effective = "L" if upper == "M" and rep > 0 else upper

            match effective:
                case "M":
                    current_x, current_y = a[0] + ox, a[1] + oy
                    start_x, start_y = current_x, current_y
                    commands.append(MoveTo(x=current_x, y=current_y))
                    needs_move = False
                    last_control = None

                case "L" | "H" | "V":
                    ensure_subpath()
                    if effective == "L":
                        current_x, current_y = a[0] + ox, a[1] + oy
                    elif effective == "H":
                        current_x = a[0] + ox
                    else:
                        current_y = a[0] + oy
                    commands.append(LineTo(x=current_x, y=current_y))
                    last_control = None

                case "C" | "S":
                    ensure_subpath()
                    if effective == "C":
                        x1, y1 = a[0] + ox, a[1] + oy
                        x2, y2, x, y = a[2] + ox, a[3] + oy, a[4] + ox, a[5] + oy
                    else:
                        # First control point is reflection of last
                        if last_control is not None and last_upper in ("C", "S"):
                            x1 = 2 * current_x - last_control[0]
                            y1 = 2 * current_y - last_control[1]
                        else:
                            x1, y1 = current_x, current_y
                        x2, y2, x, y = a[0] + ox, a[1] + oy, a[2] + ox, a[3] + oy
                    commands.append(CurveTo(x1=x1, y1=y1, x2=x2, y2=y2, x=x, y=y))
                    current_x, current_y = x, y
                    last_control = (x2, y2)

                case "Q" | "T":
                    ensure_subpath()
                    if effective == "Q":
                        qx, qy = a[0] + ox, a[1] + oy
                        x, y = a[2] + ox, a[3] + oy
                    else:
                        if last_control is not None and last_upper in ("Q", "T"):
                            qx = 2 * current_x - last_control[0]
                            qy = 2 * current_y - last_control[1]
                        else:
                            qx, qy = current_x, current_y
                        x, y = a[0] + ox, a[1] + oy
                    # Degree elevation: cubic controls sit 2/3 of the way to the quad control
                    commands.append(
                        CurveTo(
                            x1=current_x + 2 / 3 * (qx - current_x),
                            y1=current_y + 2 / 3 * (qy - current_y),
                            x2=x + 2 / 3 * (qx - x),
                            y2=y + 2 / 3 * (qy - y),
                            x=x,
                            y=y,
                        )
                    )
                    current_x, current_y = x, y
                    last_control = (qx, qy)

                case "A":
                    ensure_subpath()
                    rx, ry, rotation, large_arc, sweep = a[0], a[1], a[2], a[3], a[4]
                    x, y = a[5] + ox, a[6] + oy
                    commands.extend(
                        _arc_to_curves(
                            complex(current_x, current_y),
                            rx,
                            ry,
                            rotation,
                            bool(large_arc),
                            bool(sweep),
                            complex(x, y),
                        )
                    )
                    current_x, current_y = x, y
                    last_control = None

            last_upper = "L" if effective in ("H", "V") else effective

    return commands


def _fmt(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_path_d(commands: list[Command], precision: int = 3) -> str:
    """Serialize commands into an SVG path d-string."""
    parts: list[str] = []
    for cmd in commands:
        match cmd:
            case MoveTo() | LineTo():
                parts.append(f"{cmd.command} {_fmt(cmd.x, precision)} {_fmt(cmd.y, precision)}")
            case CurveTo():
                coords = (cmd.x1, cmd.y1, cmd.x2, cmd.y2, cmd.x, cmd.y)
                parts.append("C " + " ".join(_fmt(v, precision) for v in coords))
            case ClosePath():
                parts.append("Z")
    return " ".join(parts)


def extract_path_data(svg_text: str) -> list[str]:
    """Return the d attribute of every <path> element in an SVG document."""
    if not svg_text or not svg_text.strip():
        return []

    # Handle potential namespace issues
    svg_text = re.sub(r'\sxmlns="[^"]*"', "", svg_text)

    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise PathParseError(f"Invalid SVG document: {e}") from e

    return [
        elem.get("d", "")
        for elem in root.iter()
        if elem.tag.endswith("path") and elem.get("d", "").strip()
    ]
