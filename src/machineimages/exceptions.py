"""Exceptions for machine image computation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, override

from safir.slack.blockkit import SlackException, SlackMessage, SlackTextBlock
from safir.slack.sentry import SentryEventInfo

if TYPE_CHECKING:
    from .models.domain.filterkind import OsImagesFilterKind

__all__ = ["CatalogLoadError", "ConflictingFiltersError"]


class ConflictingFiltersError(SlackException):
    """The include and exclude filter lists share at least one kind.

    Parameters
    ----------
    conflicts
        Filter kinds present in both lists, in include-list order.
    """

    def __init__(self, conflicts: list[OsImagesFilterKind]) -> None:
        self.conflicts = conflicts
        kinds = ", ".join(x.value for x in conflicts)
        super().__init__(
            f"Exclude filter list contains element of include list: {kinds}"
        )

    @override
    def to_slack(self) -> SlackMessage:
        """Format this exception as a Slack message."""
        message = super().to_slack()
        text = ", ".join(x.value for x in self.conflicts)
        attachment = SlackTextBlock(heading="Conflicting filters", text=text)
        message.attachments.append(attachment)
        return message

    @override
    def to_sentry(self) -> SentryEventInfo:
        """Return Sentry metadata for this exception."""
        info = super().to_sentry()
        info.contexts["filters"] = {
            "conflicts": [x.value for x in self.conflicts]
        }
        return info


class CatalogLoadError(SlackException):
    """An input catalog document could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot load catalog {path!s}: {reason}")

    @override
    def to_sentry(self) -> SentryEventInfo:
        """Return Sentry metadata for this exception."""
        info = super().to_sentry()
        info.tags["catalog"] = str(self.path)
        return info
