"""Gmail mailbox: decode, compose and label actions over the Gmail ports."""

import logging

from mailbridge.batch import batch_operation
from mailbridge.codec.compose import compose_message, encode_for_transport
from mailbridge.config.settings import CodecSettings
from mailbridge.core.errors import MailbridgeError
from mailbridge.core.models import (
    STARRED,
    UNREAD,
    Draft,
    Email,
    ListOptions,
    ListResponse,
    SendOptions,
    SendResponse,
)
from mailbridge.ports import (
    AttachmentFetcher,
    MessageFetcher,
    MessageModifier,
    MessageSender,
)

from .convert import convert_message, decode_attachment_data

logger = logging.getLogger(__name__)


class GmailMailbox:
    """High-level Gmail operations on canonical models.

    Example:
        client = GmailClient(creds)
        mailbox = GmailMailbox.from_client(client)
        for email in mailbox.list_emails(ListOptions(max_results=10)).emails:
            print(email.subject)
    """

    def __init__(
        self,
        fetcher: MessageFetcher,
        attachments: AttachmentFetcher,
        sender: MessageSender,
        modifier: MessageModifier,
        settings: CodecSettings | None = None,
    ):
        self._fetcher = fetcher
        self._attachments = attachments
        self._sender = sender
        self._modifier = modifier
        self._settings = settings or CodecSettings()

    @classmethod
    def from_client(cls, client, settings: CodecSettings | None = None) -> "GmailMailbox":
        """Build a mailbox from one client implementing every Gmail port."""
        return cls(client, client, client, client, settings)

    def list_emails(self, options: ListOptions | None = None) -> ListResponse:
        """List and decode one page of messages.

        A message that cannot be fetched or decoded is skipped with a
        warning; it never fails the page. ``total_count`` is the
        provider's estimate and is not adjusted for skipped messages.
        """
        page = self._fetcher.list_messages(options or ListOptions())

        emails = []
        for message_id in page.ids:
            try:
                emails.append(self.get_email(message_id))
            except Exception as e:
                logger.warning("Skipping message %s: %s", message_id, e)

        return ListResponse(
            emails=emails,
            next_page_token=page.next_page_token,
            total_count=page.total_count,
        )

    def get_email(self, message_id: str) -> Email:
        """Fetch and decode one message.

        Raises:
            MimeDepthError: If the part tree is too deep to decode.
        """
        msg = self._fetcher.get_message(message_id)
        return convert_message(msg, max_depth=self._settings.max_tree_depth)

    def get_attachment(self, message_id: str, attachment_id: str) -> bytes:
        """Fetch and decode an attachment's bytes."""
        result = self._attachments.get_attachment(message_id, attachment_id)
        return decode_attachment_data(result)

    def send(self, draft: Draft, options: SendOptions | None = None) -> SendResponse:
        """Validate, compose and send a draft.

        Raises:
            ValidationError: If the draft is invalid; nothing is sent.
            ComposeError: If the draft cannot be serialized.
            MailbridgeError: If the provider returns no message id.
        """
        raw = compose_message(
            draft,
            options,
            sender=self._settings.sender,
            message_id_host=self._settings.message_id_host,
        )
        result = self._sender.send(encode_for_transport(raw))
        if not result.get("id"):
            raise MailbridgeError("send returned no message id")

        logger.info("Sent message %s", result["id"])
        return SendResponse(id=result["id"], thread_id=result.get("threadId", ""))

    def mark_as_read(self, message_id: str) -> None:
        self._modifier.modify_labels(message_id, [], [UNREAD])

    def mark_as_unread(self, message_id: str) -> None:
        self._modifier.modify_labels(message_id, [UNREAD], [])

    def star(self, message_id: str) -> None:
        self._modifier.modify_labels(message_id, [STARRED], [])

    def unstar(self, message_id: str) -> None:
        self._modifier.modify_labels(message_id, [], [STARRED])

    def trash(self, message_id: str) -> None:
        self._modifier.trash(message_id)

    def untrash(self, message_id: str) -> None:
        self._modifier.untrash(message_id)

    def delete(self, message_id: str) -> None:
        """Permanently delete a message. Use ``trash`` for a recoverable delete."""
        self._modifier.delete(message_id)

    def modify_labels(
        self, message_id: str, add: list[str], remove: list[str]
    ) -> None:
        self._modifier.modify_labels(message_id, add, remove)

    def _batch(self, ids: list[str], op, label: str) -> None:
        batch_operation(ids, op, label, max_workers=self._settings.batch_workers)

    def batch_trash(self, ids: list[str]) -> None:
        """Trash every id.

        Raises:
            BatchPartialFailure: Listing each id that failed.
        """
        self._batch(ids, self.trash, "trash")

    def batch_delete(self, ids: list[str]) -> None:
        self._batch(ids, self.delete, "delete")

    def batch_mark_as_read(self, ids: list[str]) -> None:
        self._batch(ids, self.mark_as_read, "mark as read")

    def batch_mark_as_unread(self, ids: list[str]) -> None:
        self._batch(ids, self.mark_as_unread, "mark as unread")

    def batch_modify(self, ids: list[str], add: list[str], remove: list[str]) -> None:
        self._batch(
            ids,
            lambda message_id: self.modify_labels(message_id, add, remove),
            "modify",
        )
