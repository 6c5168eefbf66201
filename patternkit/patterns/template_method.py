"""
Template Method pattern.

The skeletal base class :class:`Report` owns the algorithm in
:meth:`Report.generate`. Subclasses override the abstract steps and, where
they need to, the hook methods. The format of a report is fixed by the class
chosen at construction; switching format means building a different object.
"""
import html
from abc import ABC, abstractmethod
from typing import List, Sequence


class Report(ABC):
    """Abstract report; ``generate`` is the template method."""

    def __init__(self, title: str, text: Sequence[str]):
        self.title = title
        self.text = list(text)
        self._output: List[str] = []

    def generate(self) -> str:
        """Run every step in order and return the rendered report."""
        self._output = []
        self.output_start()
        self.output_head()
        self.output_body_start()
        for line in self.text:
            self.output_line(line)
        self.output_body_end()
        self.output_end()
        return "\n".join(self._output)

    def emit(self, line: str) -> None:
        self._output.append(line)

    # Hook methods with default behaviour

    def output_start(self) -> None:
        pass

    def output_body_start(self) -> None:
        pass

    def output_body_end(self) -> None:
        pass

    def output_end(self) -> None:
        pass

    # Abstract steps

    @abstractmethod
    def output_head(self) -> None:
        """Emit the report heading."""

    @abstractmethod
    def output_line(self, line: str) -> None:
        """Emit one line of body text."""


class HTMLReport(Report):
    """Report rendered as a minimal HTML page."""

    def output_start(self) -> None:
        self.emit("<html>")

    def output_head(self) -> None:
        self.emit("  <head>")
        self.emit(f"    <title>{html.escape(self.title)}</title>")
        self.emit("  </head>")

    def output_body_start(self) -> None:
        self.emit("  <body>")

    def output_line(self, line: str) -> None:
        self.emit(f"    <p>{html.escape(line)}</p>")

    def output_body_end(self) -> None:
        self.emit("  </body>")

    def output_end(self) -> None:
        self.emit("</html>")


class PlainTextReport(Report):
    """Report rendered as plain text with a framed title."""

    def output_head(self) -> None:
        self.emit(f"**** {self.title} ****")
        self.emit("")

    def output_line(self, line: str) -> None:
        self.emit(line)
