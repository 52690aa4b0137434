"""
1.0 Results Module
Persists the two record collections and summarizes a finished run.
"""

import json
import logging
import os
from typing import Dict, List, Optional

import pandas as pd

from sitemap_checker.status_store import StatusRecord

logger = logging.getLogger(__name__)


def save_records(records: List[StatusRecord], path: str) -> str:
    """
    2.0 Write records as a pretty-printed JSON array of {url, status}.

    Returns:
        The path written
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        json.dump([record.to_dict() for record in records], f, indent=2)

    logger.info(f"Saved {len(records)} records to {path}")
    return path


def save_results(
    all_records: List[StatusRecord],
    non_200_records: List[StatusRecord],
    non200_file: str,
    all_file: str,
) -> Dict[str, str]:
    """2.1 Save both collections. Returns the written paths keyed by collection."""
    return {
        "non200_file": save_records(non_200_records, non200_file),
        "all_file": save_records(all_records, all_file),
    }


def records_frame(records: List[StatusRecord]) -> pd.DataFrame:
    return pd.DataFrame([record.to_dict() for record in records], columns=["url", "status"])


def print_summary(
    status_counts: Dict[int, int],
    non_200_records: List[StatusRecord],
    sitemap_url: Optional[str] = None,
):
    """
    3.0 Print summary of a finished run.
    """
    total = sum(status_counts.values())
    if total == 0:
        print("\nNo URLs were checked.\n")
        return

    print(f"\n{'='*50}")
    print(f"Status Check Summary{': ' + sitemap_url if sitemap_url else ''}")
    print(f"{'='*50}")

    print("\nBy Status:")
    counts = pd.Series(status_counts).sort_index()
    for status, count in counts.items():
        pct = count / total * 100
        print(f"  {status}: {count} ({pct:.1f}%)")

    if non_200_records:
        print(f"\nNon-200 URLs ({len(non_200_records)}):")
        df = records_frame(non_200_records).sort_values(["status", "url"])
        for _, row in df.iterrows():
            print(f"  {row['status']}  {row['url']}")

    print(f"{'='*50}\n")
