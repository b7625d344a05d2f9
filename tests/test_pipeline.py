import json
from unittest.mock import patch

import pytest

import main
from seller_analytics import settings
from seller_analytics.pipelines.seller_report import SellerReportPipeline


@pytest.fixture
def dataset_file(tmp_path, sales_data):
    path = tmp_path / "sales_data.json"
    path.write_text(json.dumps(sales_data), encoding="utf-8")
    return path


def test_pipeline_runs_end_to_end(dataset_file, output_dir):
    pipeline = SellerReportPipeline(input_path=dataset_file, use_defaults=True, test_mode=True)

    with patch("seller_analytics.data_handler.requests.post") as mock_post:
        report = pipeline.run()

    mock_post.assert_not_called()
    assert [row.seller_id for row in report] == ["seller_2", "seller_1", "seller_3"]
    assert pipeline.saved_paths["csv"].exists()
    assert pipeline.status_summary["Sellers Ranked"] == 3
    assert pipeline.status_summary["purchase_records"] == 4


def test_pipeline_posts_outside_test_mode(dataset_file, output_dir, monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_URL", "https://example.test/hook")
    pipeline = SellerReportPipeline(input_path=dataset_file, use_defaults=True)

    with patch("seller_analytics.data_handler.requests.post") as mock_post:
        pipeline.run()

    mock_post.assert_called_once()
    assert mock_post.call_args.kwargs["json"]["reportType"] == "seller"


def test_pipeline_without_calculators_produces_nothing(dataset_file, output_dir):
    pipeline = SellerReportPipeline(input_path=dataset_file, use_defaults=False, test_mode=True)
    assert pipeline.run() is None
    assert not output_dir.exists()


def test_pipeline_with_invalid_dataset(tmp_path, output_dir, sales_data):
    sales_data["products"] = []
    path = tmp_path / "sales_data.json"
    path.write_text(json.dumps(sales_data), encoding="utf-8")

    pipeline = SellerReportPipeline(input_path=path, use_defaults=True, test_mode=True)
    assert pipeline.run() is None


def test_pipeline_with_missing_input(tmp_path, output_dir):
    pipeline = SellerReportPipeline(input_path=tmp_path / "missing.json", test_mode=True)
    assert pipeline.run() is None


def test_pipeline_uses_supplied_calculators(dataset_file, output_dir):
    pipeline = SellerReportPipeline(
        input_path=dataset_file,
        calculate_revenue=lambda item, product: item.sale_price * item.quantity,
        calculate_bonus=lambda index, total, seller: 100.0 if index == 0 else 0.0,
        use_defaults=False,
        top_limit=1,
        test_mode=True,
    )
    report = pipeline.run()

    assert report[0].bonus == 100.0
    seller_1 = next(row for row in report if row.seller_id == "seller_1")
    # no discount applied: 60 + 10 + 24
    assert seller_1.revenue == 94.0
    assert len(seller_1.top_products) == 1


def test_main_entry_point(dataset_file, output_dir, tmp_path, monkeypatch, package_logger):
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(settings, "USE_DEFAULT_CALCULATORS", True)

    exit_code = main.run_process(["--input", str(dataset_file), "--test", "--top", "2"])

    assert exit_code == 0
    assert list(output_dir.glob("seller_report_*.csv"))


def test_main_reports_failure(tmp_path, output_dir, monkeypatch, package_logger):
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    exit_code = main.run_process(["--input", str(tmp_path / "missing.json"), "--test"])
    assert exit_code == 1


def test_main_rejects_negative_top(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.parse_args(["--top", "-1"])
    assert excinfo.value.code == 2
    assert "must not be negative" in capsys.readouterr().err


def test_main_accepts_zero_top():
    assert main.parse_args(["--top", "0"]).top == 0


def test_pipeline_with_negative_top_limit(dataset_file, output_dir):
    pipeline = SellerReportPipeline(
        input_path=dataset_file, use_defaults=True, top_limit=-3, test_mode=True
    )
    assert pipeline.run() is None
    assert not output_dir.exists()
