"""Console formatting of run reports.

Colors are applied with ``click.style``; ``click.echo`` strips them when
output is not a terminal.
"""

from __future__ import annotations

import click

from ftxindex.models.report import (
    BranchOutcome,
    DeleteReport,
    IngestReport,
    OutcomeStatus,
    ResetReport,
)

_STATUS_STYLE: dict[OutcomeStatus, tuple[str, str]] = {
    OutcomeStatus.SUCCEEDED: ("OK", "green"),
    OutcomeStatus.NOT_FOUND: ("NOT FOUND", "yellow"),
    OutcomeStatus.NO_MATCHES: ("NO MATCHES", "yellow"),
    OutcomeStatus.FAILED: ("FAILED", "red"),
}


def format_outcome(outcome: BranchOutcome) -> str:
    """One line describing a branch outcome."""
    label, color = _STATUS_STYLE[outcome.status]
    line = f"  {click.style(label, fg=color, bold=True)} {outcome.index}"
    if outcome.count:
        line += f" ({outcome.count} records)"
    if outcome.truncated:
        line += click.style(" [discovery limit reached, run again]", fg="yellow")
    if outcome.error:
        line += f": {outcome.error}"
    return line


def _summary(success: bool, ok: str, failed: str) -> str:
    if success:
        return click.style(ok, fg="green", bold=True)
    return click.style(failed, fg="red", bold=True)


def format_ingest_report(report: IngestReport) -> str:
    """Multi-line summary of an ingest run."""
    if report.no_op:
        return click.style(
            f"No records found in {report.source_file}; nothing imported", fg="yellow"
        )

    lines = [
        f"Imported {report.source_file}: {report.paragraphs} paragraphs, "
        f"{report.definitions} defined terms, {report.documents} documents",
    ]
    if report.uploaded:
        lines.append(f"  Uploaded to: {', '.join(report.uploaded)}")
    if report.skipped_records:
        lines.append(
            click.style(
                f"  Skipped {report.skipped_records} unreadable records", fg="yellow"
            )
        )
    error_tag = click.style("ERROR", fg="red")
    lines.extend(f"  {error_tag} {error}" for error in report.errors)
    lines.append(
        _summary(
            report.success,
            "File processed successfully",
            "File processed with errors",
        )
    )
    return "\n".join(lines)


def format_delete_report(report: DeleteReport) -> str:
    """Multi-line summary of a cascading delete."""
    lines = [f"Deletion of document '{report.doc_id}':"]
    lines.extend(format_outcome(outcome) for outcome in report.outcomes)
    lines.append(
        _summary(
            report.success,
            "Document deletion completed successfully",
            "Document deletion incomplete; re-run to converge",
        )
    )
    return "\n".join(lines)


def format_reset_report(report: ResetReport) -> str:
    """Multi-line summary of an index reset."""
    lines = ["Index deletion:"]
    lines.extend(format_outcome(outcome) for outcome in report.outcomes)
    lines.append(
        _summary(
            report.success,
            "All indexes deleted successfully",
            "Some indexes could not be deleted",
        )
    )
    return "\n".join(lines)
