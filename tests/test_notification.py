"""Tests for the notification document view."""

import pytest

from sample_notifications import (
    errors_document,
    message_document,
    notification,
    status_document,
    unknown_document,
)
from whatsapp_cloud.webhooks.models import NotificationKind, WebhookEventType
from whatsapp_cloud.webhooks.notification import NotificationView


# ============================================================================
# Classification Tests
# ============================================================================

class TestClassification:
    """Tests for kind and message type detection."""

    def test_text_message(self, text_document):
        """Test a text message is classified with its identity fields."""
        view = NotificationView(text_document)

        assert view.kind is NotificationKind.MESSAGE
        assert view.message_type == "text"
        assert view.text == {"body": "hello world"}
        assert view.sender == "15557654321"
        assert view.id == "wamid.ID"
        assert view.timestamp == "1700000000"
        assert view.phone_number_id == "PHONE_NUMBER_ID"
        assert view.contact["wa_id"] == "15557654321"

    def test_status(self):
        """Test a status notification exposes the status fields."""
        view = NotificationView(status_document("delivered"))

        assert view.kind is NotificationKind.STATUS
        assert view.status_value == "delivered"
        assert view.message_type is None
        assert view.recipient_id == "15557654321"
        assert view.id == "wamid.STATUS"

    def test_top_level_errors(self, top_level_errors_document):
        view = NotificationView(top_level_errors_document)

        assert view.kind is NotificationKind.ERRORS
        assert view.error["code"] == 130429
        assert view.id is None

    def test_unrecognized_shape(self, unrecognized_document):
        """Test a value with no messages, statuses or errors has no kind."""
        view = NotificationView(unrecognized_document)

        assert view.kind is None
        assert view.resolve_event() is None

    def test_message_wins_over_status(self):
        """Test the message branch is checked before statuses."""
        document = message_document({"type": "text", "text": {"body": "hi"}})
        document["entry"][0]["changes"][0]["value"]["statuses"] = [{"status": "read"}]

        assert NotificationView(document).kind is NotificationKind.MESSAGE

    def test_empty_lists_are_absent(self):
        """Test empty arrays do not count as a populated branch."""
        document = notification({"messages": [], "statuses": [], "errors": []})

        assert NotificationView(document).kind is None

    @pytest.mark.parametrize(
        "document",
        [
            None,
            [],
            "text",
            {},
            {"entry": "x"},
            {"entry": []},
            {"entry": [{"changes": None}]},
            {"entry": [{"changes": [{"value": None}]}]},
            {"entry": [{"changes": [{"value": ["messages"]}]}]},
            {"entry": [{"changes": [{"value": {"messages": "nope"}}]}]},
            {"entry": ["x"]},
            {"entry": [{"changes": [1]}]},
            notification({"messages": ["x"]}),
            notification({"messages": [1]}),
            notification({"messages": [[]]}),
            notification({"statuses": ["x"]}),
            notification({"errors": [None]}),
        ],
    )
    def test_malformed_documents_never_raise(self, document):
        """Test broken nesting yields None everywhere instead of raising."""
        view = NotificationView(document)

        assert view.kind is None
        assert view.message is None
        assert view.message_type is None
        assert view.sender is None
        assert view.resolve_event() is None
        assert "NotificationView" in repr(view)


# ============================================================================
# Message Type Inference Tests
# ============================================================================

class TestMessageTypeInference:
    """Tests for inferring the tag of untyped messages."""

    def test_explicit_type_wins(self):
        """Test the type field is used even when other sub-objects exist."""
        view = NotificationView(message_document({"type": "text", "text": {"body": "x"}, "image": {"id": "1"}}))

        assert view.message_type == "text"

    def test_inferred_from_sub_object(self):
        view = NotificationView(message_document({"image": {"id": "IMG"}}))

        assert view.message_type == "image"
        assert view.image == {"id": "IMG"}

    def test_inference_order(self):
        """Test the first present tag in inference order is chosen."""
        view = NotificationView(message_document({"text": {"body": "x"}, "audio": {"id": "A"}}))

        assert view.message_type == "audio"

    def test_contacts_inferred_from_message(self):
        """Test shared contact cards count, not the sender contact list."""
        view = NotificationView(message_document({"contacts": [{"name": {"formatted_name": "Ann"}}]}))

        assert view.message_type == "contacts"
        assert view.message_contacts[0]["name"]["formatted_name"] == "Ann"

    @pytest.mark.parametrize(
        "message,expected",
        [
            ({"system": {}}, "system"),
            ({"contacts": []}, "contacts"),
            ({"text": {"body": ""}, "video": None}, "text"),
        ],
    )
    def test_empty_sub_object_counts_as_present(self, message, expected):
        """Test inference looks at key presence, not at emptiness."""
        assert NotificationView(message_document(message)).message_type == expected

    def test_non_object_elements_have_no_kind(self):
        """Test list elements that are not objects are treated as absent."""
        view = NotificationView(notification({"messages": ["x"], "statuses": [{"status": "read"}]}))

        assert view.message is None
        assert view.kind is NotificationKind.STATUS

    def test_value_contacts_do_not_infer(self):
        """Test value-level contacts alone leave the type undetermined."""
        view = NotificationView(message_document({}))

        assert view.contacts is not None
        assert view.message_type is None

    def test_unknown_explicit_type_is_returned(self):
        """Test an unrecognized explicit type is reported but maps to no event."""
        view = NotificationView(message_document({"type": "ephemeral"}))

        assert view.message_type == "ephemeral"
        assert view.resolve_event() is None

    def test_interactive_type(self):
        view = NotificationView(
            message_document(
                {
                    "type": "interactive",
                    "interactive": {"type": "button_reply", "button_reply": {"id": "yes", "title": "Yes"}},
                }
            )
        )

        assert view.interactive_type == "button_reply"


# ============================================================================
# Event Resolution Tests
# ============================================================================

class TestEventResolution:
    """Tests for event selection and event payloads."""

    def test_message_event(self, text_document):
        view = NotificationView(text_document)
        event = view.resolve_event()

        assert event is WebhookEventType.TEXT
        assert view.event_payload(event) == {"body": "hello world"}

    @pytest.mark.parametrize("status", ["sent", "delivered", "read"])
    def test_status_events(self, status):
        """Test sent/delivered/read emit their own name with the status object."""
        view = NotificationView(status_document(status))
        event = view.resolve_event()

        assert event == WebhookEventType(status)
        assert view.event_payload(event) is view.status

    def test_failed_status_maps_to_errors(self, failed_status_document):
        """Test failed statuses are emitted as errors with the status errors."""
        view = NotificationView(failed_status_document)
        event = view.resolve_event()

        assert event is WebhookEventType.ERRORS
        assert view.event_payload(event)[0]["code"] == 131

    def test_unknown_status_value(self):
        assert NotificationView(status_document("deleted")).resolve_event() is None

    def test_top_level_errors_event(self):
        view = NotificationView(errors_document())
        event = view.resolve_event()

        assert event is WebhookEventType.ERRORS
        assert view.event_payload(event) == [{"code": 130429, "title": "Rate limit hit"}]

    def test_unsupported_message_carries_error(self):
        """Test unsupported messages deliver their first error object."""
        view = NotificationView(
            message_document({"type": "unsupported", "errors": [{"code": 131051, "title": "Unsupported"}]})
        )
        event = view.resolve_event()

        assert event is WebhookEventType.UNSUPPORTED
        assert view.event_payload(event) == {"code": 131051, "title": "Unsupported"}

    def test_contacts_message_payload(self):
        view = NotificationView(message_document({"type": "contacts", "contacts": [{"phones": []}]}))

        assert view.event_payload(view.resolve_event()) == [{"phones": []}]

    def test_unknown_document(self):
        assert NotificationView(unknown_document()).resolve_event() is None
