#!/usr/bin/env python3
"""
Main CLI entry point for the accessibility monitoring engine
"""

import asyncio
import argparse
import json
import logging
import sys
from typing import Dict, Any, List

from a11y_monitor.axe_scanner import AxeScanner
from a11y_monitor.browser_manager import BrowserManager
from a11y_monitor.config_loader import ConfigLoader
from a11y_monitor.monitoring_service import AccessibilityMonitoringService
from a11y_monitor.models import AccessibilityReport
from a11y_monitor.report_exporter import ReportExporter

logger = logging.getLogger(__name__)


class UTF8StreamHandler(logging.StreamHandler):
    """StreamHandler that uses UTF-8 encoding for Windows compatibility"""
    def __init__(self, stream=None):
        if stream is None:
            stream = sys.stdout
        if sys.platform == 'win32' and hasattr(stream, 'reconfigure'):
            try:
                stream.reconfigure(encoding='utf-8', errors='replace')
            except (AttributeError, ValueError):
                pass
        super().__init__(stream)


def setup_logging(config: Dict[str, Any]):
    """Configure root logging from the 'logging' config section"""
    logging_config = config.get('logging', {})
    handlers = [UTF8StreamHandler(sys.stdout)]
    if logging_config.get('file'):
        handlers.append(logging.FileHandler(logging_config['file'], encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, str(logging_config.get('level', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Accessibility monitoring and reporting',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py process axe_results.json
  python main.py process axe_results.json --component PlayerCard --html
  python main.py scan http://localhost:5173/
  python main.py trends --days 14
        """
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file (default: config/default_config.yaml)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    process = subparsers.add_parser('process', help='Process a saved axe results JSON file')
    process.add_argument('results_file', type=str, help='axe results JSON (object with "violations" or a list)')
    process.add_argument('--component', type=str, default=None, help='Scope metrics to one component')
    process.add_argument('--no-store', action='store_true', help='Do not add the snapshot to history')
    process.add_argument('--html', action='store_true', help='Also write an HTML report')

    scan = subparsers.add_parser('scan', help='Scan a URL with axe-core and process the results')
    scan.add_argument('url', type=str, help='URL to scan')
    scan.add_argument('--component', type=str, default=None, help='Scope metrics to one component')
    scan.add_argument('--no-store', action='store_true', help='Do not add the snapshot to history')
    scan.add_argument('--html', action='store_true', help='Also write an HTML report')

    subparsers.add_parser('history', help='List stored snapshots')

    trends = subparsers.add_parser('trends', help='Show violation trend data')
    trends.add_argument('--days', type=int, default=30, help='Window size in days (default: 30)')
    trends.add_argument('--component', type=str, default=None, help='Follow a single component')

    return parser


def load_results_file(path: str) -> Dict[str, Any]:
    """Read axe results from disk; a bare list is taken as the violations"""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, list):
        return {'violations': data}
    return data


def publish_report(service: AccessibilityMonitoringService, results: Dict[str, Any],
                   args: argparse.Namespace, config: Dict[str, Any]) -> AccessibilityReport:
    """Process results, store them, export the report and log its summary"""
    snapshot = service.process_axe_results(results, args.component)
    if not args.no_store:
        service.store_metrics(snapshot)

    report = service.generate_report(snapshot, results.get('violations'))

    exporter = ReportExporter(config.get('output', {}).get('reports_dir', 'output/reports'))
    exporter.save_json(report)
    if args.html:
        exporter.save_html(report, service.get_trend_data(30), title=args.component or 'Application')

    summary = report.summary
    logger.info("=" * 60)
    logger.info(f"Overall score: {summary.overall_score}")
    logger.info(f"Compliance level: {summary.compliance_level.value}")
    logger.info(f"Trend: {summary.trend_direction.value}")
    for issue in summary.key_issues:
        logger.info(f"  Issue: {issue}")
    for recommendation in summary.recommendations:
        logger.info(f"  Recommendation: {recommendation}")
    logger.info("=" * 60)
    return report


async def run_scan(url: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """Scan a single URL in a fresh browser"""
    browser_config = config.get('browser', {})
    scanner_config = config.get('scanner', {})
    browser_manager = BrowserManager(
        headless=browser_config.get('headless', True),
        timeout=browser_config.get('timeout', 30000),
        viewport=browser_config.get('viewport')
    )
    scanner = AxeScanner(
        tags=scanner_config.get('tags'),
        timeout=float(scanner_config.get('timeout', 30.0))
    )
    try:
        await browser_manager.start()
        return await scanner.scan_url(url, browser_manager)
    finally:
        try:
            await browser_manager.stop()
        except Exception as stop_err:
            logger.debug(f"Error stopping browser: {stop_err}")


def print_rows(rows: List[Dict[str, Any]]):
    print(json.dumps(rows, indent=2))


async def main(argv: List[str] = None):
    """Main execution function"""
    args = build_parser().parse_args(argv)

    config = ConfigLoader.load_config(args.config)
    setup_logging(config)

    try:
        service = AccessibilityMonitoringService.from_config(config)

        if args.command == 'process':
            logger.info(f"Processing axe results from {args.results_file}")
            results = load_results_file(args.results_file)
            publish_report(service, results, args, config)

        elif args.command == 'scan':
            logger.info(f"Scanning {args.url}")
            results = await run_scan(args.url, config)
            if results.get('error'):
                logger.error(f"Scan of {args.url} failed: {results['error']}")
                sys.exit(1)
            publish_report(service, results, args, config)

        elif args.command == 'history':
            print_rows([
                {
                    'timestamp': snapshot.timestamp,
                    'totalViolations': snapshot.total_violations,
                    'violationsByLevel': snapshot.violations_by_level.to_dict(),
                    'components': len(snapshot.component_metrics)
                }
                for snapshot in service.get_metrics_history()
            ])

        elif args.command == 'trends':
            if args.component:
                points = service.get_component_trends(args.component, args.days)
            else:
                points = service.get_trend_data(args.days)
            print_rows([point.to_dict() for point in points])

    except Exception as e:
        logger.error(f"Error during execution: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
