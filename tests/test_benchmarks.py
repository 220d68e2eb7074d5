"""Tests for the benchmark runner."""

import pytest
from rich.console import Console

from storagedriver.testsuites import BenchmarkRunner, ContentGenerator
from storagedriver.testsuites.benchmarks import render_results


@pytest.fixture
def runner(any_driver):
    return BenchmarkRunner(any_driver, ContentGenerator(7), iterations=2)


class TestBenchmarkRunner:

    @pytest.mark.parametrize("size", [0, 1024])
    def test_put_get(self, runner, size):
        result = runner.put_get(size)
        assert result.category == "put_get"
        assert result.iterations == 2
        assert result.bytes_per_op == size
        assert runner.driver.list("/") == []

    def test_stream(self, runner):
        result = runner.stream(64 * 1024)
        assert result.bytes_per_op == 64 * 1024
        assert runner.driver.list("/") == []

    def test_list_and_delete(self, runner):
        assert runner.list_files(5).name.endswith("list/5 files")
        assert runner.delete_files(5).category == "delete"
        assert runner.driver.list("/") == []

    def test_run_matrix(self, runner):
        seen = []
        results = runner.run(
            categories=["put_get", "list"],
            sizes={"put_get": [0, 10], "list": [3]},
            on_result=seen.append,
        )
        assert [r.category for r in results] == ["put_get", "put_get", "list"]
        assert seen == results

    def test_unknown_category(self, runner):
        with pytest.raises(ValueError, match="Unknown benchmark category"):
            runner.run(categories=["bogus"])

    def test_iterations_must_be_positive(self, memory_driver):
        with pytest.raises(ValueError):
            BenchmarkRunner(memory_driver, iterations=0)

    def test_render_results(self, runner):
        results = runner.run(categories=["put_get"], sizes={"put_get": [1024]})
        console = Console(record=True, width=200)
        console.print(render_results(results))
        text = console.export_text()
        assert "put_get" in text
        assert "Ops/s" in text
