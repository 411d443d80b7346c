"""Tests for Outlook (Graph) conversion and OutlookMailbox."""

import base64
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from mailbridge.codec.rfc822 import decode_raw_message
from mailbridge.core.errors import BatchPartialFailure, EncodingError
from mailbridge.core.models import Draft, EmailAddress, EmailBody, ListOptions
from mailbridge.outlook import (
    OutlookMailbox,
    convert_attachment,
    convert_message,
    next_page_token,
)


@pytest.fixture
def graph_message() -> dict:
    return {
        "id": "AAMk-1",
        "conversationId": "conv-1",
        "subject": "Planning",
        "from": {"emailAddress": {"name": "Alice", "address": "alice@example.com"}},
        "toRecipients": [
            {"emailAddress": {"name": "Bob", "address": "bob@example.com"}},
            {"emailAddress": {"name": "Nobody", "address": ""}},
        ],
        "ccRecipients": [{"emailAddress": {"address": "carol@example.com"}}],
        "bccRecipients": [],
        "receivedDateTime": "2024-01-15T10:31:00Z",
        "sentDateTime": "2024-01-15T10:30:00Z",
        "isRead": True,
        "isDraft": False,
        "flag": {"flagStatus": "flagged"},
        "body": {"contentType": "html", "content": "<p>Agenda</p>"},
        "bodyPreview": "Agenda",
        "parentFolderId": "inbox-folder",
        "hasAttachments": True,
    }


class TestConvertMessage:
    """Tests for Graph message conversion."""

    def test_fields(self, graph_message):
        email = convert_message(graph_message)

        assert email.id == "AAMk-1"
        assert email.thread_id == "conv-1"
        assert email.subject == "Planning"
        assert email.from_ == EmailAddress(email="alice@example.com", name="Alice")
        assert email.snippet == "Agenda"
        assert email.is_read is True
        assert email.is_starred is True
        assert email.is_draft is False

    def test_recipients_without_address_dropped(self, graph_message):
        email = convert_message(graph_message)

        assert email.to == (EmailAddress(email="bob@example.com", name="Bob"),)
        assert email.cc == (EmailAddress(email="carol@example.com"),)
        assert email.bcc == ()

    def test_sent_date_preferred(self, graph_message):
        email = convert_message(graph_message)

        assert email.date == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_received_date_fallback(self, graph_message):
        del graph_message["sentDateTime"]

        email = convert_message(graph_message)

        assert email.date == datetime(2024, 1, 15, 10, 31, tzinfo=timezone.utc)

    def test_html_body(self, graph_message):
        email = convert_message(graph_message)

        assert email.body.html == "<p>Agenda</p>"
        assert email.body.text is None

    def test_text_body(self, graph_message):
        graph_message["body"] = {"contentType": "text", "content": "Agenda"}

        email = convert_message(graph_message)

        assert email.body.text == "Agenda"
        assert email.body.html is None

    def test_folder_is_only_label(self, graph_message):
        assert convert_message(graph_message).labels == {"inbox-folder"}

    def test_attachments_need_separate_fetch(self, graph_message):
        assert convert_message(graph_message).attachments == ()

    def test_minimal_message(self):
        email = convert_message({"id": "x"})

        assert email.subject == ""
        assert email.from_.is_empty
        assert email.date is None
        assert email.labels == frozenset()
        assert email.is_read is False


class TestConvertAttachment:
    """Tests for Graph attachment conversion."""

    def test_raw_bytes(self):
        att = convert_attachment(
            {
                "id": "att-1",
                "name": "notes.txt",
                "contentType": "text/plain",
                "size": 5,
                "contentBytes": b"hello",
            }
        )

        assert att.id == "att-1"
        assert att.filename == "notes.txt"
        assert att.mime_type == "text/plain"
        assert att.size == 5
        assert att.data == b"hello"

    def test_base64_string(self):
        att = convert_attachment(
            {"id": "att-1", "name": "a.bin", "contentType": "application/octet-stream",
             "contentBytes": base64.b64encode(b"\xfb\xff\x00").decode()}
        )

        assert att.data == b"\xfb\xff\x00"
        assert att.size == 3

    def test_no_content(self):
        att = convert_attachment({"id": "att-1", "name": "a.bin", "size": 10})

        assert att.data is None
        assert att.size == 10

    def test_invalid_content(self):
        with pytest.raises(EncodingError):
            convert_attachment({"name": "a.bin", "contentBytes": "!!!invalid!!!"})


class TestNextPageToken:
    """Tests for skip-based pagination."""

    def test_full_first_page(self):
        assert next_page_token(ListOptions(max_results=10), 10) == "10"

    def test_full_later_page(self):
        assert next_page_token(ListOptions(max_results=10, page_token="20"), 10) == "30"

    def test_short_page_is_last(self):
        assert next_page_token(ListOptions(max_results=10), 4) == ""

    def test_no_page_size(self):
        assert next_page_token(ListOptions(), 25) == ""

    def test_garbage_token_treated_as_zero(self):
        assert next_page_token(ListOptions(max_results=5, page_token="abc"), 5) == "5"


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def mailbox(client):
    return OutlookMailbox.from_client(client)


class TestOutlookMailbox:
    """Tests for OutlookMailbox over a fake client."""

    def test_list_emails(self, mailbox, client, graph_message):
        client.list_messages.return_value = [graph_message, dict(graph_message, id="AAMk-2")]

        result = mailbox.list_emails(ListOptions(max_results=2))

        assert [e.id for e in result.emails] == ["AAMk-1", "AAMk-2"]
        assert result.next_page_token == "2"
        assert result.total_count == 2

    def test_list_skips_unconvertible(self, mailbox, client, graph_message):
        broken = dict(graph_message, id="broken", flag="not-a-dict")
        client.list_messages.return_value = [broken, graph_message]

        result = mailbox.list_emails()

        assert [e.id for e in result.emails] == ["AAMk-1"]

    def test_get_email(self, mailbox, client, graph_message):
        client.get_message.return_value = graph_message

        assert mailbox.get_email("AAMk-1").subject == "Planning"

    def test_get_attachment(self, mailbox, client):
        client.get_attachment.return_value = {
            "id": "att-1", "name": "a.txt", "contentType": "text/plain", "contentBytes": "aGk="
        }

        att = mailbox.get_attachment("AAMk-1", "att-1")

        assert att.data == b"hi"
        client.get_attachment.assert_called_once_with("AAMk-1", "att-1")

    def test_send_standard_base64(self, mailbox, client):
        client.send.return_value = None
        draft = Draft(
            to=[EmailAddress(email="bob@example.com")],
            subject="Hi",
            body=EmailBody(html="<p>Hi</p>"),
        )

        response = mailbox.send(draft)

        assert response.id == ""
        payload = client.send.call_args.args[0]
        decoded = decode_raw_message(base64.b64decode(payload, validate=True))
        assert decoded.subject == "Hi"
        assert decoded.body.html == "<p>Hi</p>"

    def test_actions(self, mailbox, client):
        mailbox.mark_as_read("m1")
        mailbox.mark_as_unread("m2")
        mailbox.move("m3", "archive")
        mailbox.delete("m4")

        assert client.set_read.call_args_list[0].args == ("m1", True)
        assert client.set_read.call_args_list[1].args == ("m2", False)
        client.move.assert_called_once_with("m3", "archive")
        client.delete.assert_called_once_with("m4")

    def test_batch_move_partial_failure(self, mailbox, client):
        client.move.side_effect = [None, RuntimeError("locked"), None]

        with pytest.raises(BatchPartialFailure) as exc_info:
            mailbox.batch_move(["m1", "m2", "m3"], "archive")

        assert str(exc_info.value) == "failed to move 1 messages: m2: locked"
        assert client.move.call_count == 3

    def test_batch_mark_and_delete(self, mailbox, client):
        mailbox.batch_mark_as_read(["m1", "m2"])
        mailbox.batch_mark_as_unread(["m3"])
        mailbox.batch_delete(["m4"])

        assert client.set_read.call_count == 3
        client.delete.assert_called_once_with("m4")
