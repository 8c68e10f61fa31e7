"""Tests for the YAML run configuration and the experiment runner."""

import json

import pytest
import yaml

from binpack2d import ConfigurationError
from binpack2d.runner.config import RunConfig, load_config, parse_config
from binpack2d.runner.dataset import generate_instance
from binpack2d.runner.experiment import ExperimentRunner, main


def base_config(tmp_path, **overrides):
    data = {
        "instances": [
            {
                "instance_id": 1, "box_length": 20, "num_rectangles": 30,
                "min_width": 2, "max_width": 10, "min_height": 3, "max_height": 15,
                "seed": 12345,
            },
        ],
        "strategies": ["area_desc", "length_desc"],
        "results_dir": str(tmp_path / "results"),
    }
    data.update(overrides)
    return data


class TestConfig:
    def test_defaults(self, tmp_path):
        config = parse_config({"instances": base_config(tmp_path)["instances"]})
        assert config.strategies == ["area_desc", "width_desc", "height_desc"]
        assert config.local_search is True
        assert config.send_telegram is False
        assert config.log_level == "INFO"

    def test_strategy_names_normalized(self, tmp_path):
        config = parse_config(base_config(tmp_path))
        assert config.strategies == ["area_desc", "width_desc"]

    def test_duplicate_strategies_collapsed(self, tmp_path):
        config = parse_config(base_config(
            tmp_path, strategies=["width_desc", "length_desc", "area_desc", "WIDTH_DESC"],
        ))
        assert config.strategies == ["width_desc", "area_desc"]

    @pytest.mark.parametrize("override", [
        {"strategies": ["random"]},
        {"strategies": []},
        {"instances": []},
        {"log_level": "LOUD"},
        {"max_passes": 0},
    ])
    def test_invalid_config(self, tmp_path, override):
        with pytest.raises(ConfigurationError):
            parse_config(base_config(tmp_path, **override))

    def test_invalid_instance_block(self, tmp_path):
        data = base_config(tmp_path)
        data["instances"][0]["box_length"] = 0
        with pytest.raises(ConfigurationError):
            parse_config(data)

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump(base_config(tmp_path)))
        config = load_config(path)
        assert isinstance(config, RunConfig)
        assert config.instances[0].seed == 12345

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "nope.yaml")

    def test_load_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_load_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("instances: [unclosed\n")
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            load_config(path)


class TestExperimentRunner:
    @pytest.mark.asyncio
    async def test_run_experiment(self, tmp_path):
        config = parse_config(base_config(tmp_path))
        metrics = await ExperimentRunner(config).run_experiment()

        assert len(metrics.runs) == 2
        assert metrics.errors_count == 0
        assert metrics.total_rectangles == 2 * 30
        for run in metrics.runs:
            assert run.optimized_containers <= run.greedy_containers
            assert run.optimized_containers >= run.area_lower_bound

        results = tmp_path / "results"
        data = json.loads((results / f"{metrics.experiment_id}.json").read_text())
        assert data["algorithm"] == "FFD+LocalSearch"
        assert (results / f"{metrics.experiment_id}_containers.csv").exists()

    @pytest.mark.asyncio
    async def test_infeasible_instance_is_counted(self, tmp_path):
        data = base_config(tmp_path)
        # max_width exceeds box_length, so generation fails
        data["instances"][0]["max_width"] = 25
        metrics = await ExperimentRunner(parse_config(data)).run_experiment()
        assert metrics.runs == []
        assert metrics.errors_count == 2

    @pytest.mark.asyncio
    async def test_duplicate_strategies_run_once(self, tmp_path):
        config = parse_config(base_config(tmp_path, strategies=["width_desc", "length_desc"]))
        metrics = await ExperimentRunner(config).run_experiment()
        assert metrics.total_runs == 1
        assert [run.strategy for run in metrics.runs] == ["width_desc"]

    @pytest.mark.asyncio
    async def test_equal_bounds_instance_is_counted(self, tmp_path):
        data = base_config(tmp_path)
        data["instances"][0]["min_height"] = data["instances"][0]["max_height"] = 6
        metrics = await ExperimentRunner(parse_config(data)).run_experiment()
        assert metrics.runs == []
        assert metrics.errors_count == 2

    def test_run_single_without_local_search(self, tmp_path):
        config = parse_config(base_config(tmp_path, local_search=False))
        instance = generate_instance(**config.instances[0].model_dump())
        run, solution = ExperimentRunner(config).run_single(instance, "area_desc")
        assert run.optimized_containers == run.greedy_containers == solution.container_count
        assert run.search_passes == 0

    def test_run_single_with_local_search(self, tmp_path):
        config = parse_config(base_config(tmp_path))
        instance = generate_instance(**config.instances[0].model_dump())
        run, solution = ExperimentRunner(config).run_single(instance, "height_desc")
        assert run.strategy == "height_desc"
        assert run.search_passes >= 1
        assert run.optimized_containers == solution.container_count


class TestCli:
    @pytest.mark.asyncio
    async def test_main_with_overrides(self, tmp_path, capsys):
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump(base_config(tmp_path, send_telegram=True)))
        out_dir = tmp_path / "cli_results"

        metrics = await main([
            "--config", str(path),
            "--results-dir", str(out_dir),
            "--no-telegram",
            "--no-local-search",
            "--show-solutions",
        ])

        assert metrics.algorithm == "FFD"
        assert (out_dir / f"{metrics.experiment_id}.json").exists()
        assert "Number of boxes" in capsys.readouterr().out
