"""Minimal PDF writer.

Builds single-file PDF 1.4 documents from raw syntax: an object table whose
byte offsets are recorded while serializing, and a content stream of text
and vector drawing operators. Only what invoices need is supported (one
standard Type1 font, filled/stroked rectangles and lines).
"""

from typing import Optional

PDF_HEADER = b"%PDF-1.4\n"

Color = tuple[float, float, float]


def pdf_escape(text: str) -> str:
    """Escape a string for use inside a PDF literal string ``( ... )``."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def format_number(value: float) -> str:
    """Format a coordinate or color component the way PDF operators expect."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0")


class ContentStream:
    """Accumulates page drawing operators."""

    def __init__(self, font_name: str = "F1"):
        self.font_name = font_name
        self._operators: list[str] = []

    def _emit(self, *parts: object) -> None:
        self._operators.append(
            " ".join(
                format_number(p) if isinstance(p, (int, float)) else str(p)
                for p in parts
            )
            + "\n"
        )

    def text(self, text: str, x: float, y: float, font_size: float) -> None:
        """Place a single line of text with its baseline starting at (x, y)."""
        self._emit(
            "BT", f"/{self.font_name}", font_size, "Tf",
            1, 0, 0, 1, x, y, "Tm",
            f"({pdf_escape(text)})", "Tj", "ET",
        )

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._emit(x, y, width, height, "re", "f")

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._emit(x, y, width, height, "re", "S")

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._emit(x1, y1, "m", x2, y2, "l", "S")

    def fill_color(self, color: Color) -> None:
        """Set the RGB color used for text and filled shapes."""
        self._emit(*color, "rg")

    def stroke_style(self, color: Color, width: float) -> None:
        """Set the RGB color and width used for stroked lines."""
        self._emit(*color, "RG", width, "w")

    def to_bytes(self) -> bytes:
        return "".join(self._operators).encode("utf-8")


class PdfDocument:
    """Table of numbered PDF objects serialized with an exact xref table.

    Objects are numbered from 1 in the order they are reserved or added.
    Reserving lets objects refer forward to ones defined later.
    """

    def __init__(self):
        self._objects: list[Optional[bytes]] = []

    def reserve(self) -> int:
        """Reserve the next object number; fill it in with ``set_object``."""
        self._objects.append(None)
        return len(self._objects)

    def set_object(self, number: int, body: str | bytes) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._objects[number - 1] = body

    def add_object(self, body: str | bytes) -> int:
        """Append an object (dictionary or other value) and return its number."""
        number = self.reserve()
        self.set_object(number, body)
        return number

    def add_stream(self, data: bytes) -> int:
        """Append a stream object whose /Length is the byte length of ``data``."""
        body = b"<< /Length %d >>\nstream\n" % len(data) + data + b"\nendstream"
        return self.add_object(body)

    def to_bytes(self, root: int) -> bytes:
        """Serialize the document with ``root`` as the catalog object.

        Raises:
            ValueError: If a reserved object was never set
        """
        out = bytearray(PDF_HEADER)
        offsets = []
        for number, body in enumerate(self._objects, start=1):
            if body is None:
                raise ValueError(f"PDF object {number} was reserved but never set")
            offsets.append(len(out))
            out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

        xref_start = len(out)
        size = len(self._objects) + 1
        lines = ["xref", f"0 {size}", "0000000000 65535 f "]
        lines.extend(f"{offset:010d} 00000 n " for offset in offsets)
        lines.extend(
            [
                "trailer",
                f"<< /Size {size} /Root {root} 0 R >>",
                "startxref",
                str(xref_start),
                "%%EOF",
            ]
        )
        out += ("\n".join(lines) + "\n").encode("ascii")
        return bytes(out)
