"""Tests for the Strategy pattern."""
import pytest

from patternkit.domain.exceptions import PatternNotFoundError, PatternUsageError
from patternkit.patterns.strategy import (
    FormattedReport,
    HTMLFormatter,
    PlainTextFormatter,
    StrategyRegistry,
)
from patternkit.patterns.template_method import HTMLReport, PlainTextReport

TITLE = "Monthly Report"
TEXT = ["Things are going", "really, really well."]


class TestFormatters:
    """Strategies render the same output as the template method reports."""

    def test_html_matches_template_method(self):
        assert HTMLFormatter().output_report(TITLE, TEXT) == HTMLReport(TITLE, TEXT).generate()

    def test_plain_matches_template_method(self):
        assert PlainTextFormatter().output_report(TITLE, TEXT) == PlainTextReport(TITLE, TEXT).generate()


class TestFormattedReport:
    """Test the context object."""

    def test_delegates_to_formatter(self):
        report = FormattedReport(TITLE, TEXT, PlainTextFormatter())
        assert report.output_report().startswith("**** Monthly Report ****")

    def test_strategy_swapped_at_runtime(self):
        report = FormattedReport(TITLE, TEXT, PlainTextFormatter())
        report.formatter = HTMLFormatter()
        assert report.output_report().startswith("<html>")

    def test_callable_strategy(self):
        report = FormattedReport(TITLE, TEXT, lambda title, text: f"{title}|{len(text)}")
        assert report.output_report() == "Monthly Report|2"

    def test_invalid_strategy_rejected_on_assignment(self):
        report = FormattedReport(TITLE, TEXT, PlainTextFormatter())
        with pytest.raises(PatternUsageError):
            report.formatter = "html"
        # The previous strategy is still in place
        assert isinstance(report.formatter, PlainTextFormatter)


class TestStrategyRegistry:
    """Test named strategy lookup."""

    def test_defaults(self):
        registry = StrategyRegistry.with_defaults()
        assert registry.names() == ["html", "plain"]
        assert isinstance(registry.get("html"), HTMLFormatter)

    def test_unknown_strategy(self):
        with pytest.raises(PatternNotFoundError):
            StrategyRegistry().get("pdf")

    def test_register_rejects_non_strategy(self):
        with pytest.raises(PatternUsageError):
            StrategyRegistry().register("bad", 42)
