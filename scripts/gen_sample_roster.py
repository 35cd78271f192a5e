#!/usr/bin/env python3
"""Generate a synthetic producer roster workbook.

The workbook has one sheet (default ``Sheet1``) with a header on row 1 and
one producer per line, mixing Individual and Firm rows, a share of expired
licenses and a share of repeated license numbers. Useful for manual runs of
``producer-export`` and for timing larger inputs.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

COLUMNS = [
    "ENTITYTYPE",
    "PRODUCERNAME",
    "NPN",
    "LICENSETYPE",
    "LICENSENUMBER",
    "EFFECTIVEDATE",
    "EXPIRATIONDATE",
    "QUALIFICATION",
    "QUALIFICATIONEFFECTIVEDATE",
    "MAILINGPHONE",
    "BUSINESSPHONE",
    "MAILINGEMAILADDRESS",
    "BUSINESSEMAILADDRESS",
    "PREFERREDPOSTALADDRESS",
    "FIRMBUSINESSADDRESS",
]

FIRST_NAMES = ["Jane", "John", "Maria", "Wei", "Aisha", "Carlos", "Priya", "Tom"]
LAST_NAMES = ["Doe", "Smith", "Garcia", "Chen", "Khan", "Lopez", "Patel", "Brown"]
QUALIFICATIONS = ["Life", "Health", "Property", "Casualty"]


def generate_roster(
    rows: int,
    *,
    firm_ratio: float = 0.3,
    expired_ratio: float = 0.1,
    duplicate_ratio: float = 0.05,
    seed: int = 42,
    today: date | None = None,
) -> pd.DataFrame:
    """Generate roster rows as a DataFrame (dates as ``datetime.date`` cells)."""
    rng = np.random.default_rng(seed)
    today = today or date.today()
    records: list[dict[str, Any]] = []

    for i in range(rows):
        is_firm = rng.random() < firm_ratio
        if records and rng.random() < duplicate_ratio:
            license_number = records[int(rng.integers(0, len(records)))]["LICENSENUMBER"]
        else:
            license_number = f"L{100000 + i}"
        if rng.random() < expired_ratio:
            expiration = today - timedelta(days=int(rng.integers(1, 900)))
        else:
            expiration = today + timedelta(days=int(rng.integers(1, 900)))
        effective = expiration - timedelta(days=730)

        if is_firm:
            name = f"{rng.choice(LAST_NAMES)} & {rng.choice(LAST_NAMES)} Agency"
        else:
            name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        slug = name.lower().replace(" ", ".").replace("&", "and")
        street = f"{int(rng.integers(1, 9999))} Main St"

        records.append({
            "ENTITYTYPE": "Firm" if is_firm else "Individual",
            "PRODUCERNAME": name,
            "NPN": str(int(rng.integers(1_000_000, 9_999_999))),
            "LICENSETYPE": "Resident",
            "LICENSENUMBER": license_number,
            "EFFECTIVEDATE": effective,
            "EXPIRATIONDATE": expiration,
            "QUALIFICATION": str(rng.choice(QUALIFICATIONS)),
            "QUALIFICATIONEFFECTIVEDATE": effective,
            "MAILINGPHONE": f"555-{int(rng.integers(1000, 9999))}",
            "BUSINESSPHONE": f"555-{int(rng.integers(1000, 9999))}",
            "MAILINGEMAILADDRESS": f"{slug}@example.com",
            "BUSINESSEMAILADDRESS": f"office@{slug}.example.com" if is_firm else None,
            "PREFERREDPOSTALADDRESS": f"{street}, Denver, CO 80202",
            "FIRMBUSINESSADDRESS": f"{street}\nDenver, CO 80202" if is_firm else None,
        })

    return pd.DataFrame(records, columns=COLUMNS)


def write_workbook(df: pd.DataFrame, output: Path, sheet_name: str) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic producer roster workbook")
    parser.add_argument("--rows", type=int, default=200, help="Number of producer rows")
    parser.add_argument("--output", type=Path, default=Path("data/sample_roster.xlsx"))
    parser.add_argument("--sheet", default="Sheet1", help="Worksheet name")
    parser.add_argument("--firm-ratio", type=float, default=0.3)
    parser.add_argument("--expired-ratio", type=float, default=0.1)
    parser.add_argument("--duplicate-ratio", type=float, default=0.05)
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    df = generate_roster(
        args.rows,
        firm_ratio=args.firm_ratio,
        expired_ratio=args.expired_ratio,
        duplicate_ratio=args.duplicate_ratio,
        seed=args.seed,
    )
    write_workbook(df, args.output, args.sheet)
    print(f"wrote {len(df)} rows to {args.output} (sheet {args.sheet})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
