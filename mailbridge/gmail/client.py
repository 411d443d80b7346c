"""Gmail API transport.

Thin adapter over googleapiclient implementing the Gmail capability
ports for the authenticated user. No decoding happens here; responses are
handed back as the API returns them.
"""

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError  # noqa: F401 - re-exported for callers

from mailbridge.core.models import ListOptions
from mailbridge.ports import MessagePage

USER_ID = "me"


class GmailClient:
    """Client for Gmail API message operations.

    Example:
        client = GmailClient(creds)
        page = client.list_messages(ListOptions(max_results=20))
        msg = client.get_message(page.ids[0])
    """

    def __init__(self, credentials: Credentials):
        """Initialize Gmail client with credentials.

        Args:
            credentials: Google OAuth credentials object.
        """
        self._service = build("gmail", "v1", credentials=credentials)

    def _messages(self):
        return self._service.users().messages()

    def list_messages(self, options: ListOptions) -> MessagePage:
        """List one page of message ids.

        Args:
            options: Page size, page token, search query and label filter,
                passed to the API unchanged.

        Returns:
            The page of ids with the next page token and the API's
            result size estimate.
        """
        params = {"userId": USER_ID}
        if options.max_results:
            params["maxResults"] = options.max_results
        if options.page_token:
            params["pageToken"] = options.page_token
        if options.query:
            params["q"] = options.query
        if options.labels:
            params["labelIds"] = list(options.labels)

        result = self._messages().list(**params).execute()

        return MessagePage(
            ids=[m["id"] for m in result.get("messages", [])],
            next_page_token=result.get("nextPageToken", ""),
            total_count=result.get("resultSizeEstimate", 0),
        )

    def get_message(self, message_id: str) -> dict:
        """Get a single message with its full MIME part tree."""
        return (
            self._messages()
            .get(userId=USER_ID, id=message_id, format="full")
            .execute()
        )

    def get_attachment(self, message_id: str, attachment_id: str) -> dict:
        return (
            self._messages()
            .attachments()
            .get(userId=USER_ID, messageId=message_id, id=attachment_id)
            .execute()
        )

    def send(self, payload: str) -> dict:
        """Send an already-encoded message.

        Args:
            payload: base64url-encoded RFC 2822 message.

        Returns:
            Dict with at least ``id`` and ``threadId``.
        """
        return self._messages().send(userId=USER_ID, body={"raw": payload}).execute()

    def trash(self, message_id: str) -> None:
        self._messages().trash(userId=USER_ID, id=message_id).execute()

    def untrash(self, message_id: str) -> None:
        self._messages().untrash(userId=USER_ID, id=message_id).execute()

    def delete(self, message_id: str) -> None:
        # Permanent; bypasses the trash
        self._messages().delete(userId=USER_ID, id=message_id).execute()

    def modify_labels(
        self, message_id: str, add: list[str], remove: list[str]
    ) -> None:
        body = {"addLabelIds": list(add), "removeLabelIds": list(remove)}
        self._messages().modify(userId=USER_ID, id=message_id, body=body).execute()
