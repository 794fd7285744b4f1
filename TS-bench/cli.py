import os
import sys
import logging
import argparse

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import BenchmarkConfig, RESULT_OUTPUT_DIR, TEST_DATA_PERSISTENCE

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class MeasurementCLI:
    """CLI interface for summarizing recorded benchmark operations."""

    def __init__(self, out=None):
        self.out = out
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='TS-bench Measurement CLI',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Summarize per-operation records of a 60 second run
  python cli.py report --input results/records.csv --elapsed 60

  # Also append the results to a CSV result file
  python cli.py report --input records.parquet --elapsed 60 --persistence csv --output-dir results
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Report command
        report_parser = subparsers.add_parser('report', help='Merge records and report statistics')
        report_parser.add_argument('--input', type=str, required=True,
                                   help='CSV or Parquet file with per-operation records')
        report_parser.add_argument('--elapsed', type=float, required=True,
                                   help='Test elapsed time in seconds (not including schema creation)')
        report_parser.add_argument('--schema-time', type=float, default=0.0,
                                   help='Schema creation time in seconds (default: 0)')
        report_parser.add_argument('--persistence', choices=['none', 'csv', 'parquet', 'prometheus'],
                                   default=TEST_DATA_PERSISTENCE.lower(),
                                   help=f'Result persistence (default: {TEST_DATA_PERSISTENCE})')
        report_parser.add_argument('--output-dir', type=str, default=RESULT_OUTPUT_DIR,
                                   help=f'Output directory for result files (default: {RESULT_OUTPUT_DIR})')

        return parser

    def run_report(self, args):
        """Run the report command."""
        try:
            from common.persistence_factory import persistence_factory
            from measurement.loader import load_records, build_thread_measurements
            from measurement.measurement import merge_measurements
            from measurement.reporter import MeasurementReporter
            from measurement.statistics import calculate_metrics

            logger.info("=== Measurement Report ===")

            if not os.path.exists(args.input):
                logger.error(f"Record file not found: {args.input}")
                return 1

            data = load_records(args.input)
            thread_measurements = build_thread_measurements(data)

            merged = merge_measurements(thread_measurements.values())
            merged.create_schema_time = args.schema_time
            merged.elapse_time = args.elapsed
            statistics = calculate_metrics(merged)

            reporter = MeasurementReporter(
                merged,
                BenchmarkConfig.from_environment(),
                statistics=statistics,
                persistence_factory=persistence_factory(args.persistence, output_dir=args.output_dir),
                out=self.out,
            )
            reporter.report()

            logger.info(f"Report completed for {len(thread_measurements)} threads")
            return 0

        except Exception as e:
            logger.error(f"Error in report: {e}", exc_info=True)
            return 1

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'report':
                return self.run_report(parsed_args)
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = MeasurementCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
