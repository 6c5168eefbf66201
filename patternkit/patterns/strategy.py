"""
Strategy pattern.

:class:`FormattedReport` is the context; the formatting algorithm is a
separate strategy object that can be replaced at runtime. Any callable with
the signature ``(title, text) -> str`` is accepted as a strategy as well.
"""
import html
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Sequence, Union

from patternkit.domain.exceptions import PatternNotFoundError, PatternUsageError
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class Formatter(ABC):
    """Strategy interface for rendering a report."""

    @abstractmethod
    def output_report(self, title: str, text: Sequence[str]) -> str:
        """Render the report."""


FormatterLike = Union[Formatter, Callable[[str, Sequence[str]], str]]


class HTMLFormatter(Formatter):
    def output_report(self, title: str, text: Sequence[str]) -> str:
        lines = [
            "<html>",
            "  <head>",
            f"    <title>{html.escape(title)}</title>",
            "  </head>",
            "  <body>",
        ]
        lines.extend(f"    <p>{html.escape(line)}</p>" for line in text)
        lines.extend(["  </body>", "</html>"])
        return "\n".join(lines)


class PlainTextFormatter(Formatter):
    def output_report(self, title: str, text: Sequence[str]) -> str:
        return "\n".join([f"**** {title} ****", "", *text])


def _as_callable(formatter: FormatterLike) -> Callable[[str, Sequence[str]], str]:
    if isinstance(formatter, Formatter):
        return formatter.output_report
    if callable(formatter):
        return formatter
    raise PatternUsageError(
        f"Formatter must be a Formatter or a callable, got {type(formatter).__name__}"
    )


class FormattedReport:
    """Context object that delegates rendering to its formatter."""

    def __init__(self, title: str, text: Sequence[str], formatter: FormatterLike):
        self.title = title
        self.text: List[str] = list(text)
        self.formatter = formatter

    @property
    def formatter(self) -> FormatterLike:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: FormatterLike) -> None:
        # Rejected strategies leave the current one in place
        self._render = _as_callable(formatter)
        self._formatter = formatter

    def output_report(self) -> str:
        return self._render(self.title, self.text)


class StrategyRegistry:
    """Named strategies that can be looked up at runtime."""

    def __init__(self):
        self._strategies: Dict[str, FormatterLike] = {}

    @classmethod
    def with_defaults(cls) -> "StrategyRegistry":
        registry = cls()
        registry.register("html", HTMLFormatter())
        registry.register("plain", PlainTextFormatter())
        return registry

    def register(self, name: str, formatter: FormatterLike) -> None:
        _as_callable(formatter)
        self._strategies[name] = formatter
        logger.debug("Registered strategy", strategy=name)

    def get(self, name: str) -> FormatterLike:
        try:
            return self._strategies[name]
        except KeyError:
            raise PatternNotFoundError("Strategy", name) from None

    def names(self) -> List[str]:
        return sorted(self._strategies)
