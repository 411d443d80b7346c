"""Outlook mailbox: Graph message conversion, sending and folder actions."""

import base64
import logging

from mailbridge.batch import batch_operation
from mailbridge.codec.compose import compose_message
from mailbridge.config.settings import CodecSettings
from mailbridge.core.models import (
    Attachment,
    Draft,
    Email,
    ListOptions,
    ListResponse,
    SendOptions,
    SendResponse,
)
from mailbridge.ports import MessageSender, OutlookActions, OutlookFetcher

from .convert import convert_attachment, convert_message

logger = logging.getLogger(__name__)


def _skip_of(page_token: str) -> int:
    # Page tokens are plain skip offsets; anything else starts from the top
    try:
        return max(int(page_token), 0)
    except (TypeError, ValueError):
        return 0


def next_page_token(options: ListOptions, returned: int) -> str:
    """Compute the skip-based token for the page after this one.

    Graph's list endpoint is paged with ``$top``/``$skip``. A full page
    implies there may be more; a short page, or no page size at all, is
    the last page.
    """
    if not returned or options.max_results <= 0 or returned != options.max_results:
        return ""
    return str(_skip_of(options.page_token) + options.max_results)


class OutlookMailbox:
    """High-level Outlook operations on canonical models."""

    def __init__(
        self,
        fetcher: OutlookFetcher,
        sender: MessageSender,
        actions: OutlookActions,
        settings: CodecSettings | None = None,
    ):
        self._fetcher = fetcher
        self._sender = sender
        self._actions = actions
        self._settings = settings or CodecSettings()

    @classmethod
    def from_client(cls, client, settings: CodecSettings | None = None) -> "OutlookMailbox":
        return cls(client, client, client, settings)

    def list_emails(self, options: ListOptions | None = None) -> ListResponse:
        """List and convert one page of messages.

        Messages that fail conversion are skipped with a warning.
        ``total_count`` is the number of messages returned, since Graph's
        list endpoint gives no estimate.
        """
        options = options or ListOptions()
        messages = self._fetcher.list_messages(options)

        emails = []
        for msg in messages:
            try:
                emails.append(convert_message(msg))
            except Exception as e:
                logger.warning("Skipping message %s: %s", msg.get("id"), e)

        return ListResponse(
            emails=emails,
            next_page_token=next_page_token(options, len(messages)),
            total_count=len(emails),
        )

    def get_email(self, message_id: str) -> Email:
        return convert_message(self._fetcher.get_message(message_id))

    def get_attachment(self, message_id: str, attachment_id: str) -> Attachment:
        """Fetch one attachment with its bytes."""
        return convert_attachment(
            self._fetcher.get_attachment(message_id, attachment_id)
        )

    def send(self, draft: Draft, options: SendOptions | None = None) -> SendResponse:
        """Compose a draft and submit it as a MIME message.

        Graph's MIME send takes the raw message in standard base64 and
        answers without a body, so the returned id is usually empty.

        Raises:
            ValidationError: If the draft is invalid; nothing is sent.
            ComposeError: If the draft cannot be serialized.
        """
        raw = compose_message(
            draft,
            options,
            sender=self._settings.sender,
            message_id_host=self._settings.message_id_host,
        )
        result = self._sender.send(base64.b64encode(raw).decode("ascii")) or {}
        logger.info("Sent message (%d bytes)", len(raw))
        return SendResponse(
            id=result.get("id", ""),
            thread_id=result.get("conversationId", ""),
        )

    def mark_as_read(self, message_id: str) -> None:
        self._actions.set_read(message_id, True)

    def mark_as_unread(self, message_id: str) -> None:
        self._actions.set_read(message_id, False)

    def move(self, message_id: str, folder_id: str) -> None:
        self._actions.move(message_id, folder_id)

    def delete(self, message_id: str) -> None:
        self._actions.delete(message_id)

    def _batch(self, ids: list[str], op, label: str) -> None:
        batch_operation(ids, op, label, max_workers=self._settings.batch_workers)

    def batch_mark_as_read(self, ids: list[str]) -> None:
        self._batch(ids, self.mark_as_read, "mark as read")

    def batch_mark_as_unread(self, ids: list[str]) -> None:
        self._batch(ids, self.mark_as_unread, "mark as unread")

    def batch_move(self, ids: list[str], folder_id: str) -> None:
        self._batch(ids, lambda message_id: self.move(message_id, folder_id), "move")

    def batch_delete(self, ids: list[str]) -> None:
        self._batch(ids, self.delete, "delete")
