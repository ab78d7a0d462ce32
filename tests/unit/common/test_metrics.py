"""Unit tests for PipelineMetrics."""

from unittest.mock import patch

from issue_router.common.metrics import PipelineMetrics


def test_instances_do_not_share_registries():
    first = PipelineMetrics()
    second = PipelineMetrics()

    first.record_issues_fetched(3)

    assert first.registry.get_sample_value("issue_router_issues_fetched_total") == 3.0
    assert second.registry.get_sample_value("issue_router_issues_fetched_total") == 0.0


def test_record_prediction_and_mismatches():
    metrics = PipelineMetrics()

    metrics.record_prediction("direct")
    metrics.record_prediction("direct")
    metrics.record_mismatches(4)

    assert metrics.registry.get_sample_value(
        "issue_router_predictions_total", {"predictor": "direct"}
    ) == 2.0
    assert metrics.registry.get_sample_value("issue_router_experiment_mismatches_total") == 4.0


def test_push_skipped_without_gateway():
    metrics = PipelineMetrics()

    with patch("issue_router.common.metrics.push_to_gateway") as push:
        metrics.push("", job="issue-router-fetch")

    push.assert_not_called()


def test_push_failure_is_not_raised():
    metrics = PipelineMetrics()

    with patch("issue_router.common.metrics.push_to_gateway", side_effect=OSError("refused")) as push:
        metrics.push("localhost:9091", job="issue-router-fetch")

    push.assert_called_once()
