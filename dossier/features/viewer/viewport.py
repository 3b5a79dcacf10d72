from dataclasses import dataclass

Matrix = tuple[float, float, float, float, float, float]

MIN_SCALE = 0.5
MAX_SCALE = 3.0


def clamp_scale(scale: float) -> float:
    return min(max(scale, MIN_SCALE), MAX_SCALE)


def normalize_rotation(rotation: int) -> int:
    if rotation % 90 != 0:
        raise ValueError(f"rotation must be a multiple of 90, got {rotation}")
    return rotation % 360


@dataclass(frozen=True)
class Viewport:
    """Maps PDF user space (origin bottom-left, y up) to screen pixels (origin top-left, y down).

    Same math as a PDF.js page viewport: scale, then rotate about the centre
    of the view box, then shift so the rotated page starts at (0, 0).
    """

    view_box: tuple[float, float, float, float]
    scale: float = 1.0
    rotation: int = 0

    @property
    def transform(self) -> Matrix:
        x0, y0, x1, y1 = self.view_box
        cx = (x0 + x1) / 2
        cy = (y0 + y1) / 2
        a, b, c, d = {
            0: (1, 0, 0, -1),
            90: (0, 1, 1, 0),
            180: (-1, 0, 0, 1),
            270: (0, -1, -1, 0),
        }[normalize_rotation(self.rotation)]

        s = self.scale
        if a == 0:
            offset_x = abs(cy - y0) * s
            offset_y = abs(cx - x0) * s
        else:
            offset_x = abs(cx - x0) * s
            offset_y = abs(cy - y0) * s

        return (
            a * s,
            b * s,
            c * s,
            d * s,
            offset_x - a * s * cx - c * s * cy,
            offset_y - b * s * cx - d * s * cy,
        )

    @property
    def width(self) -> float:
        x0, y0, x1, y1 = self.view_box
        side = abs(y1 - y0) if self.rotation % 180 else abs(x1 - x0)
        return side * self.scale

    @property
    def height(self) -> float:
        x0, y0, x1, y1 = self.view_box
        side = abs(x1 - x0) if self.rotation % 180 else abs(y1 - y0)
        return side * self.scale

    def convert_to_viewport_point(self, x: float, y: float) -> tuple[float, float]:
        m = self.transform
        return (x * m[0] + y * m[2] + m[4], x * m[1] + y * m[3] + m[5])

    def convert_to_viewport_rectangle(
        self, rect: tuple[float, float, float, float]
    ) -> tuple[float, float, float, float]:
        tl = self.convert_to_viewport_point(rect[0], rect[1])
        br = self.convert_to_viewport_point(rect[2], rect[3])
        return (tl[0], tl[1], br[0], br[1])
