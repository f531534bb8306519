"""Upload local CSV files with the example jobs.

Provides two jobs:
- csv_to_s3.yml   (AWS S3, credentials from the environment)
- csv_to_minio.yml (S3-compatible endpoint with static keys)
"""

from __future__ import annotations

import argparse
from pathlib import Path

from s3fileoutput import LocalStateBackend, from_yaml, run_job
from s3fileoutput.core.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload CSV files to S3")
    parser.add_argument(
        "--job",
        choices=["csv_to_s3", "csv_to_minio"],
        default="csv_to_s3",
        help="Job to run",
    )
    parser.add_argument("--run-date", default="latest", help="Value for var('run_date')")
    parser.add_argument("files", nargs="+", help="CSV files to upload")
    args = parser.parse_args()

    configure_logging(level="INFO")
    job_path = Path(__file__).parent / "jobs" / f"{args.job}.yml"
    job = from_yaml(str(job_path), cli_vars={"run_date": args.run_date})
    report = run_job(job, args.files, LocalStateBackend(".state"))
    print(f"Uploaded {len(args.files)} files in {report.task_count} tasks")


if __name__ == "__main__":
    main()
