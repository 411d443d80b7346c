"""Tests for raw RFC 2822 message decoding."""

from datetime import datetime, timezone

import pytest

from mailbridge.codec.rfc822 import decode_raw_message
from mailbridge.core.models import EmailAddress

PLAIN_EMAIL = b"""\
From: Alice Smith <alice@example.com>
To: Bob Jones <bob@example.com>
Cc: Charlie <charlie@example.com>
Date: Mon, 15 Jan 2024 10:00:00 +0000
Subject: Test message
Message-ID: <abc123@example.com>
Content-Type: text/plain; charset="utf-8"

Hello Bob,

This is a test message.
"""

MULTIPART_EMAIL = b"""\
From: alice@example.com
To: bob@example.com
Subject: =?utf-8?q?Rapport_trimestriel?=
Date: not a real date
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="outer"

--outer
Content-Type: multipart/alternative; boundary="inner"

--inner
Content-Type: text/plain; charset="iso-8859-1"
Content-Transfer-Encoding: quoted-printable

Caf=E9
--inner
Content-Type: text/html; charset="utf-8"

<p>Caf\xc3\xa9</p>
--inner--

--outer
Content-Type: application/pdf; name="report.pdf"
Content-Disposition: attachment; filename="report.pdf"
Content-Transfer-Encoding: base64

JVBERi0xLjQ=
--outer--
"""


class TestDecodeRawMessage:
    """Tests for decode_raw_message."""

    def test_headers(self):
        email = decode_raw_message(PLAIN_EMAIL, message_id="m1", thread_id="t1")

        assert email.id == "m1"
        assert email.thread_id == "t1"
        assert email.subject == "Test message"
        assert email.from_ == EmailAddress(email="alice@example.com", name="Alice Smith")
        assert email.to == (EmailAddress(email="bob@example.com", name="Bob Jones"),)
        assert email.cc == (EmailAddress(email="charlie@example.com", name="Charlie"),)
        assert email.date == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_plain_body(self):
        email = decode_raw_message(PLAIN_EMAIL)

        assert email.body.text.startswith("Hello Bob,")
        assert email.body.html is None
        assert email.attachments == ()

    def test_multipart(self):
        email = decode_raw_message(MULTIPART_EMAIL)

        assert email.subject == "Rapport trimestriel"
        assert email.body.text == "Café"
        assert email.body.html == "<p>Café</p>"

    def test_attachment_carries_data(self):
        email = decode_raw_message(MULTIPART_EMAIL)

        assert len(email.attachments) == 1
        att = email.attachments[0]
        assert att.filename == "report.pdf"
        assert att.mime_type == "application/pdf"
        assert att.data == b"%PDF-1.4"
        assert att.size == 8
        assert att.id is None

    def test_bad_date_degrades(self):
        assert decode_raw_message(MULTIPART_EMAIL).date is None

    @pytest.mark.parametrize(
        "labels, is_read, is_starred",
        [
            ((), True, False),
            (("UNREAD",), False, False),
            (("STARRED", "INBOX"), True, True),
        ],
    )
    def test_flags_from_labels(self, labels, is_read, is_starred):
        email = decode_raw_message(PLAIN_EMAIL, labels=labels)

        assert email.is_read is is_read
        assert email.is_starred is is_starred
        assert email.labels == frozenset(labels)

    def test_empty_input(self):
        email = decode_raw_message(b"")

        assert email.subject == ""
        assert email.from_.is_empty
        assert email.body.is_empty
