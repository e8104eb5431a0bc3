"""
End-to-end tests for the orchestration script.
"""
import pytest

import main
from gdpcycle.config import RAW_FILES
from gdpcycle.smoothing import MovingAverageSmoother


@pytest.fixture
def data_dir(tmp_path, gdp_csv, population_csv):
    raw = tmp_path / "data" / "raw_data"
    raw.mkdir(parents=True)
    (raw / RAW_FILES["gdp"]).write_text(gdp_csv.read_text())
    (raw / RAW_FILES["population"]).write_text(population_csv.read_text())
    return tmp_path / "data"


def _argv(data_dir, out_dir):
    return [
        "--data-dir", str(data_dir), "--output-dir", str(out_dir),
        "--base-quarter", "2019Q1", "--smoother", "moving_average",
    ]


@pytest.mark.integration
class TestMain:

    def test_full_run_writes_every_artefact(self, data_dir, tmp_path):
        out = tmp_path / "outputs"
        results = main.main(_argv(data_dir, out))
        assert all(results[k] is not None for k in
                   ("overview", "growth", "productivity", "business_cycle"))
        for name in main.EXPECTED_TABLES:
            assert (out / "tables" / name).exists(), name
        for name in main.EXPECTED_FIGURES:
            assert (out / "figures" / name).exists(), name
        assert (data_dir / "processed_data").is_dir()

    def test_failed_task_does_not_stop_others(self, data_dir, tmp_path, caplog):
        (data_dir / "raw_data" / RAW_FILES["population"]).unlink()
        out = tmp_path / "outputs"
        with caplog.at_level("WARNING"):
            results = main.main(_argv(data_dir, out))
        assert results["growth"] is None
        assert results["productivity"] is None
        assert results["business_cycle"] is not None
        assert (out / "tables" / "business_cycle_stats.csv").exists()
        assert not (out / "tables" / "gdp_growth_summary.csv").exists()
        assert "non-fatal" in caplog.text

    def test_bad_base_quarter_is_isolated(self, data_dir, tmp_path):
        argv = _argv(data_dir, tmp_path / "outputs")
        argv[argv.index("2019Q1")] = "1990 1Q"
        results = main.main(argv)
        assert results["business_cycle"] is None
        assert results["growth"] is None

    def test_artefact_summary_counts(self, tmp_path):
        found, total = main.log_artefact_summary(str(tmp_path), str(tmp_path))
        assert found == 0
        assert total == len(main.EXPECTED_TABLES) + len(main.EXPECTED_FIGURES)


@pytest.mark.integration
class TestSmootherSelection:

    def test_smoother_chosen_once_per_run(self, data_dir, tmp_path, monkeypatch):
        calls = []
        real_select = main.select_smoother

        def _counting_select(preferred):
            calls.append(preferred)
            return real_select(preferred)

        monkeypatch.setattr(main, "select_smoother", _counting_select)
        results = main.main(_argv(data_dir, tmp_path / "outputs"))
        assert calls == ["moving_average"]
        assert results["business_cycle"] is not None

    def test_business_cycle_task_uses_given_smoother(self, gdp_table, config, tmp_path, monkeypatch):
        monkeypatch.setattr(main, "select_smoother", None)
        smoother = MovingAverageSmoother()
        fig_dir, tab_dir = tmp_path / "figures", tmp_path / "tables"
        fig_dir.mkdir()
        tab_dir.mkdir()
        result = main.task_business_cycle(gdp_table, config, smoother, str(fig_dir), str(tab_dir))
        assert result.sd_gdp > 0
        assert (fig_dir / "business_cycle.png").exists()
