"""GL actuals CSV import domain service."""

import csv
from pathlib import Path
from typing import Any

from farmledger.database.base import Database
from farmledger.domain.entities import GlActualRow
from farmledger.domain.gl_rollup import GlRollupService
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date
from farmledger.utils.fiscal_year import DEFAULT_START_MONTH, calendar_to_fiscal, is_valid_month

REQUIRED_COLUMNS = {"account_number", "amount"}


class GlImportService:
    """Service for importing GL actual amounts from CSV files.

    The file needs ``account_number`` and ``amount`` columns plus either a
    ``month`` column (``Jan`` .. ``Dec``) or a ``date`` column.
    """

    def __init__(self, db: Database):
        """Initialize GL import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.rollup_service = GlRollupService(db)

    def read_csv(
        self, csv_file_path: str, fiscal_year: int, start_month: str = DEFAULT_START_MONTH
    ) -> tuple[list[GlActualRow], list[str]]:
        """Parse GL actual rows from a CSV file.

        Args:
            csv_file_path: Path to CSV file
            fiscal_year: Fiscal year the rows must belong to
            start_month: Fiscal start month used to place dated rows

        Returns:
            Tuple of (parsed rows, per-row error messages)

        Raises:
            ValueError: If required columns are missing
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        rows: list[GlActualRow] = []
        errors: list[str] = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise ValueError("CSV file has no columns")

            columns = {name.strip().lower(): name for name in reader.fieldnames if name}
            missing = REQUIRED_COLUMNS - set(columns)
            if missing:
                raise ValueError(f"CSV file missing required columns: {', '.join(sorted(missing))}")
            if "month" not in columns and "date" not in columns:
                raise ValueError("CSV file needs a 'month' or 'date' column")

            for row_num, row in enumerate(reader, start=2):  # Header is row 1
                values = {key: (row.get(name) or "").strip() for key, name in columns.items()}

                account_number = values["account_number"]
                if not account_number:
                    errors.append(f"Row {row_num}: Missing account_number")
                    continue

                try:
                    amount = parse_amount(values["amount"])
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")
                    continue

                month = values.get("month", "").title()
                if not month:
                    try:
                        posted = parse_date(values.get("date", ""))
                    except ValueError as e:
                        errors.append(f"Row {row_num}: {e}")
                        continue
                    row_year, month = calendar_to_fiscal(posted, start_month)
                    if row_year != fiscal_year:
                        errors.append(
                            f"Row {row_num}: {posted.isoformat()} falls in FY{row_year}, not FY{fiscal_year}"
                        )
                        continue
                elif len(month) > 3:
                    month = month[:3]

                if not is_valid_month(month):
                    errors.append(f"Row {row_num}: Invalid month '{values.get('month')}'")
                    continue

                rows.append(GlActualRow(account_number=account_number, month=month, amount=amount))

        return rows, errors

    def import_csv(
        self, csv_file_path: str, farm_id: int, fiscal_year: int, start_month: str = DEFAULT_START_MONTH
    ) -> dict[str, Any]:
        """Read a CSV file and import its rows as GL actuals.

        Returns:
            The GL import statistics plus ``errors``, the per-row messages
        """
        rows, errors = self.read_csv(csv_file_path, fiscal_year, start_month)
        result = self.rollup_service.import_gl_actuals(farm_id, fiscal_year, rows)
        result["errors"] = errors
        return result
