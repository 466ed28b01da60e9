from config import load_config


def test_load_config_tolerates_trailing_commas(tmp_path) -> None:
    data_path = tmp_path / "data" / "tasks.parquet"
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(
        "{\n"
        f'  "data_parquet_path": "{data_path}",\n'
        '  "default_granularity": "Month",\n'
        '  "follow_up_after_hours": 24,\n'
        "}\n"
    )

    config = load_config(cfg_path)

    assert config.config_error is None
    assert config.data_parquet_path == data_path
    assert config.log_path == data_path.parent / "labcal.log"
    assert config.default_granularity == "month"
    assert config.follow_up_after_hours == 24.0
    assert config.month_preview_limit == 3
    assert data_path.parent.is_dir()


def test_load_config_falls_back_on_bad_values(tmp_path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(
        '{"data_parquet_path": "%s", "default_granularity": "year", '
        '"month_preview_limit": -1, "drag_activation_distance": "far"}' % (tmp_path / "t.parquet")
    )

    config = load_config(cfg_path)

    assert config.default_granularity == "week"
    assert config.month_preview_limit == 3
    assert config.drag_activation_distance == 8.0


def test_invalid_json_reports_error_and_uses_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text("{not json")

    config = load_config(cfg_path)

    assert config.config_error is not None
    assert config.data_parquet_path == tmp_path / "share" / "labcal" / "tasks.parquet"


def test_missing_config_file_is_not_an_error(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    config = load_config(tmp_path / "absent.json")

    assert config.config_error is None
    assert config.log_level == "INFO"
