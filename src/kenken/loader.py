import json
import os
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Plain text files hold one puzzle; .json/.jsonl
    hold records; .csv and .parquet batches are read with pandas.
    Returns a list of records with "id" and "puzzle" (the puzzle text).
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = Path(file_path).stem

    def _normalize_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
        record = dict(record)
        text = record.get("puzzle")
        if not isinstance(text, str):
            for key in ("puzzle_text", "text", "grid"):
                if isinstance(record.get(key), str):
                    text = record[key]
                    break
        record["puzzle"] = text or ""
        if record.get("id") is None or record.get("id") == "":
            record["id"] = f"{stem}-{index}"
        record["id"] = str(record["id"])
        return record

    # Case 1: tabular batches
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        return [_normalize_record(r, i) for i, r in enumerate(df.to_dict(orient="records"))]
    if file_path.endswith(".csv"):
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        return [_normalize_record(r, i) for i, r in enumerate(df.to_dict(orient="records"))]

    # Case 2: JSON object/array, or JSONL
    if file_path.endswith(".json") or file_path.endswith(".jsonl"):
        with open(file_path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            payload = [json.loads(line) for line in raw.splitlines() if line.strip()]
        if isinstance(payload, dict):
            payload = [payload]
        return [_normalize_record(p, i) for i, p in enumerate(payload) if isinstance(p, dict)]

    # Case 3: plain puzzle text
    with open(file_path, "r", encoding="utf-8") as f:
        return [{"id": stem, "puzzle": f.read()}]
