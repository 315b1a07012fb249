"""Tests for ChartConfig parsing and logging setup."""
import logging

from chartgeom import ChartConfig, Margin, PALETTE, setup_logging


class TestChartConfig:
    def test_defaults(self):
        config = ChartConfig.from_options(None)
        assert config == ChartConfig()
        assert config.color_palette == PALETTE
        assert config.margin == Margin(40, 30, 60, 60)
        assert config.hex_radius is None

    def test_camel_case_options(self):
        config = ChartConfig.from_options({
            "showLegend": False,
            "hexRadius": 12,
            "margin": {"top": 5},
            "colorPalette": ["#000", "#fff"],
            "animationsEnabled": False,
            "binCountHint": 40,
        })
        assert config.show_legend is False
        assert config.hex_radius == 12
        assert config.margin == Margin(top=5)
        assert config.color_palette == ("#000", "#fff")
        assert config.animations_enabled is False
        assert config.bin_count_hint == 40

    def test_snake_case_options(self):
        config = ChartConfig.from_options({"show_labels": False, "value_field": "amount"})
        assert config.show_labels is False
        assert config.value_field == "amount"

    def test_unknown_options_are_ignored(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="chartgeom"):
            config = ChartConfig.from_options({"bogus": 1, "showAxisX": False})
        assert config.show_axis_x is False
        assert "bogus" in caplog.text

    def test_none_values_keep_defaults(self):
        assert ChartConfig.from_options({"showLegend": None}).show_legend is True

    def test_with_options(self):
        config = ChartConfig().with_options(round=False)
        assert config.round is False
        assert ChartConfig().round is True


class TestMargin:
    def test_inner(self):
        assert Margin(10, 20, 30, 40).inner(200, 100) == (140, 60)

    def test_inner_never_negative(self):
        assert Margin().inner(50, 50) == (0.0, 0.0)


class TestSetupLogging:
    def test_handlers_not_duplicated(self, tmp_path):
        log_file = tmp_path / "chartgeom.log"
        setup_logging(logging.DEBUG)
        logger = setup_logging(logging.DEBUG, str(log_file))
        try:
            assert len(logger.handlers) == 2
            logging.getLogger("chartgeom.treemap").debug("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "chartgeom.treemap - DEBUG - hello" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
