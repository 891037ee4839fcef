"""Top-down text cursor over a reportlab canvas."""

from __future__ import annotations

import io

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

MARGIN = 72
LEADING = 1.2


class PageWriter:
    """Writes wrapped lines downwards from the top of the page.

    ``y`` is measured from the top edge, like a word processor, and is
    converted to reportlab's bottom-up coordinates only when drawing. A line
    that would cross the bottom margin starts a new page on its own.
    """

    def __init__(self, title: str, *, pagesize: tuple[float, float] = letter) -> None:
        self._buffer = io.BytesIO()
        # invariant=1 pins the document id and creation date, so identical input
        # renders to identical bytes.
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize, invariant=1)
        self._canvas.setTitle(title)
        self._canvas.setCreator("depaudit")
        self.width, self.height = pagesize
        self.y: float = MARGIN
        self.page_count = 1
        self.x = MARGIN
        self.size = 12.0

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1
        self.y = MARGIN

    def break_if_below(self, threshold: float) -> None:
        if self.y > threshold:
            self.new_page()

    def text(
        self,
        value: str,
        *,
        size: float | None = None,
        x: float | None = None,
        y: float | None = None,
        bold: bool = False,
        underline: bool = False,
    ) -> None:
        """Draw *value*, wrapped to the right margin, and advance the cursor."""
        if size is not None:
            self.size = size
        if x is not None:
            self.x = x
        if y is not None:
            self.y = y
        font = FONT_BOLD if bold else FONT
        lines = simpleSplit(value, font, self.size, self.width - self.x - MARGIN) or [""]
        for line in lines:
            if self.y + self.size * LEADING > self.height - MARGIN:
                self.new_page()
            baseline = self.height - (self.y + self.size)
            self._canvas.setFont(font, self.size)
            self._canvas.drawString(self.x, baseline, line)
            if underline and line:
                width = stringWidth(line, font, self.size)
                self._canvas.line(self.x, baseline - 1.5, self.x + width, baseline - 1.5)
            self.y += self.size * LEADING

    def move_down(self, lines: float = 1.0) -> None:
        self.y += self.size * LEADING * lines

    def finish(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()
