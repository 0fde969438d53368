import json

import pandas as pd
import pytest

from src.kenken.loader import load_puzzles

TEXT = "ab\nab\n\na: 3+\nb: 3+\n"


def test_text_file_holds_one_puzzle(tmp_path):
    path = tmp_path / "tiny.txt"
    path.write_text(TEXT, encoding="utf-8")

    records = load_puzzles(str(path))
    assert records == [{"id": "tiny", "puzzle": TEXT}]


def test_json_array_and_object(tmp_path):
    array_path = tmp_path / "batch.json"
    array_path.write_text(json.dumps([{"id": "one", "puzzle": TEXT}, {"puzzle": TEXT}]))
    records = load_puzzles(str(array_path))
    assert [r["id"] for r in records] == ["one", "batch-1"]

    object_path = tmp_path / "single.json"
    object_path.write_text(json.dumps({"id": 7, "text": TEXT}))
    records = load_puzzles(str(object_path))
    assert records == [{"id": "7", "text": TEXT, "puzzle": TEXT}]


def test_jsonl_lines(tmp_path):
    path = tmp_path / "batch.jsonl"
    lines = [json.dumps({"id": f"p{i}", "puzzle": TEXT}) for i in range(3)]
    path.write_text("\n".join(lines) + "\n\n")

    records = load_puzzles(str(path))
    assert [r["id"] for r in records] == ["p0", "p1", "p2"]


def test_csv_batch_is_read_with_pandas(tmp_path):
    path = tmp_path / "batch.csv"
    pd.DataFrame([{"id": "a", "puzzle": TEXT}, {"id": "b", "puzzle": TEXT}]).to_csv(path, index=False)

    records = load_puzzles(str(path))
    assert [r["id"] for r in records] == ["a", "b"]
    assert records[0]["puzzle"] == TEXT


def test_parquet_batch(tmp_path):
    pytest.importorskip("pyarrow")
    path = tmp_path / "batch.parquet"
    pd.DataFrame([{"id": "a", "puzzle": TEXT}]).to_parquet(path)

    records = load_puzzles(str(path))
    assert records[0]["id"] == "a"
    assert records[0]["puzzle"] == TEXT


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_puzzles(str(tmp_path / "absent.txt"))
