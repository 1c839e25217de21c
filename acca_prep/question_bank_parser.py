import pandas as pd
from typing import List, Dict, Any
from pathlib import Path

# Accepted spellings for each field, after lower-casing
COLUMN_ALIASES = {
    "id": ("id", "question_id"),
    "paper": ("paper",),
    "unit_code": ("unit_code", "unit"),
    "stem": ("stem", "question", "question_text"),
}

class QuestionBankParser:
    """
    Parse question bank exports into question dicts.
    Each row needs an id and a paper; unit code and stem are optional.
    """

    @staticmethod
    def parse_csv_table(file_path: str) -> List[Dict[str, Any]]:
        """Parse CSV question bank"""
        return QuestionBankParser._parse_frame(pd.read_csv(file_path, dtype=str))

    @staticmethod
    def parse_excel_table(file_path: str) -> List[Dict[str, Any]]:
        """Parse Excel question bank"""
        return QuestionBankParser._parse_frame(pd.read_excel(file_path, dtype=str))

    @staticmethod
    def parse_json(file_path: str) -> List[Dict[str, Any]]:
        """Parse JSON question bank (a list of objects)"""
        return QuestionBankParser._parse_frame(pd.read_json(file_path, orient="records", dtype=False, convert_dates=False))

    @staticmethod
    def auto_parse(file_path: str) -> List[Dict[str, Any]]:
        """Pick a parser from the file extension"""
        suffix = Path(file_path).suffix.lower()
        if suffix == ".csv":
            return QuestionBankParser.parse_csv_table(file_path)
        if suffix in (".xlsx", ".xls"):
            return QuestionBankParser.parse_excel_table(file_path)
        if suffix == ".json":
            return QuestionBankParser.parse_json(file_path)
        raise ValueError(f"Unsupported question bank format: {suffix or file_path}")

    @staticmethod
    def _parse_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
        # Normalize column names
        df.columns = df.columns.astype(str).str.strip().str.lower()

        questions = []
        for _, row in df.iterrows():
            item = {
                field: QuestionBankParser._cell(row, aliases)
                for field, aliases in COLUMN_ALIASES.items()
            }

            # Skip rows with missing essential data
            if not item["id"] or not item["paper"]:
                continue

            item["stem"] = item["stem"] or ""
            questions.append(item)

        return questions

    @staticmethod
    def _cell(row: pd.Series, aliases) -> Any:
        """First non-empty value among the aliased columns, stripped"""
        for column in aliases:
            if column not in row:
                continue
            value = row[column]
            if pd.isna(value):
                continue
            value = str(value).strip()
            if value and value.lower() != "nan":
                return value
        return None
