"""Console rendering of the release status report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitrel.output.console import Style
from gitrel.services.classify import Marker, ReleaseKind, ReleaseReport

if TYPE_CHECKING:
    from gitrel.output.console import ConsoleProtocol

__all__ = ["render_report"]

_KIND_STYLE = {
    ReleaseKind.DRAFT: Style.ERROR,
    ReleaseKind.PRERELEASE: Style.WARNING,
    ReleaseKind.RELEASE: Style.SUCCESS,
}


def render_report(report: ReleaseReport, console: ConsoleProtocol) -> None:
    for entry in report.entries:
        console.print(f"{entry.tag} ({entry.kind.value})", _KIND_STYLE[entry.kind])
        if entry.marker is not Marker.NONE:
            console.print(entry.marker.value, Style.INFO)
        console.print(f"released: {entry.published_at or '-'}")
        console.print("notes:")
        for line in entry.notes:
            console.print(f"  {line}")
        console.newline()

    for notice in report.notices:
        console.print(f"{notice}!", Style.ERROR)
