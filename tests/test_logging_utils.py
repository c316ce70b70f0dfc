import csv
import json

import pytest

from simlab.core.logging_utils import RunLogger


def read_rows(path):
    with path.open(newline="") as fh:
        return list(csv.reader(fh))


def test_logger_writes_all_files(tmp_path):
    with RunLogger(("t", "y"), root_dir=tmp_path, run_id="demo") as logger:
        logger.write_meta({"sketch": "gravity"})
        logger.log_ts([0.0, 80.0])
        logger.log_ts([0.1, 79.5])
        logger.log_event(0.1, "bounce", {"y": -90.0, "vy": 12.5})
        logger.log_event(0.2, "reset")

    run_dir = tmp_path / "demo"
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "demo"
    assert json.loads((run_dir / "meta.json").read_text(encoding="utf-8")) == {"sketch": "gravity"}
    assert read_rows(run_dir / "timeseries.csv") == [["t", "y"], ["0", "80"], ["0.1", "79.5"]]

    events = read_rows(run_dir / "events.csv")
    assert events[0] == ["t", "type", "details"]
    assert events[1][:2] == ["0.1", "bounce"]
    assert json.loads(events[1][2]) == {"vy": 12.5, "y": -90.0}
    assert events[2] == ["0.2", "reset", ""]


def test_run_ids_do_not_collide(tmp_path):
    first = RunLogger(("t",), root_dir=tmp_path, run_id="same")
    second = RunLogger(("t",), root_dir=tmp_path, run_id="same")
    assert first.run_dir != second.run_dir
    assert second.run_id == "same_1"
    first.close()
    second.close()


def test_row_length_is_checked(tmp_path):
    logger = RunLogger(("t", "y"), root_dir=tmp_path)
    with pytest.raises(ValueError):
        logger.log_ts([1.0])
    logger.close()
    logger.close()


def test_empty_columns_rejected(tmp_path):
    with pytest.raises(ValueError):
        RunLogger((), root_dir=tmp_path)


def test_buffer_flushes_at_threshold(tmp_path):
    logger = RunLogger(("t",), root_dir=tmp_path, timeseries_flush_threshold=2)
    logger.log_ts([1.0])
    assert len(read_rows(logger.timeseries_path)) <= 1
    logger.log_ts([2.0])
    assert len(read_rows(logger.timeseries_path)) == 3
    logger.close()
