"""Export the remote temperature table to a CSV snapshot.

Point ``TEMPSIM_CSV_PATH`` at the output to run the dashboard offline.
"""
import argparse
import csv
import logging
import sys
from dataclasses import replace

from tempsim.config import Settings, setup_logging
from tempsim.constants import FEED_COLUMNS
from tempsim.data_loader import TemperatureDataError, load_series, open_source

logger = logging.getLogger("tempsim.fetch")


def write_csv(series, out_path):
    with open(out_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FEED_COLUMNS)
        writer.writeheader()
        for r in series:
            writer.writerow({
                "year": r.year,
                "annual_mean": r.annual_mean,
                "five_year_smooth": r.five_year_smooth,
            })


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("out_path", help="CSV file to write")
    args = parser.parse_args(argv)

    # Always read from the remote table, even when a CSV snapshot is configured
    settings = replace(Settings.load(), csv_path=None)
    setup_logging(settings)

    try:
        with open_source(settings) as source:
            series = load_series(source)
    except TemperatureDataError as e:
        logger.error("%s", e)
        return 1

    write_csv(series, args.out_path)
    logger.info("Wrote %d rows to %s", len(series), args.out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
