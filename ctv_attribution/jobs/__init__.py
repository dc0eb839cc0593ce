"""
One-shot export jobs.

Each job renders campaign data to CSV and writes it to disk, returning a
result dict (``success``, ``path`` or ``error``). Jobs never raise and are
never retried; a failed export is logged and reported to the caller.

Usage:
    import asyncio
    from ctv_attribution.jobs import export_report_csv

    result = asyncio.run(export_report_csv(record, AttributionMode.HOUSEHOLD))
    if not result['success']:
        print(result['error'])
"""

from ctv_attribution.jobs.export import (
    build_report_sections,
    build_metrics_frame,
    render_report_csv,
    render_metrics_csv,
    export_filename,
    run_export,
    export_report_csv,
    export_metrics_csv,
    export_all_reports,
)

__all__ = [
    'build_report_sections',
    'build_metrics_frame',
    'render_report_csv',
    'render_metrics_csv',
    'export_filename',
    'run_export',
    'export_report_csv',
    'export_metrics_csv',
    'export_all_reports',
]
