"""Tests for push notification options and click routing."""

from conftest import APP_URL
from src.messaging.notifications import build_notification_options


class TestNotificationOptions:
    """Test suite for build_notification_options."""

    def test_wire_shape(self):
        """Test the options use the field names the OS surface expects."""
        options = build_notification_options("Time to review!", now_ms=1700000000000)

        assert options.to_wire() == {
            "body": "Time to review!",
            "icon": "./icon-192x192.png",
            "badge": "./icon-72x72.png",
            "vibrate": [100, 50, 100],
            "data": {"dateOfArrival": 1700000000000, "primaryKey": "1"},
            "actions": [
                {"action": "explore", "title": "Open Dashboard", "icon": "./icon-192x192.png"},
                {"action": "close", "title": "Close", "icon": "./icon-192x192.png"},
            ],
        }

    def test_default_body(self):
        options = build_notification_options(None)

        assert options.body == "Study reminder from Anki Dashboard"
        assert options.data.date_of_arrival > 0


class TestNotificationCenter:
    """Test suite for push and click handling via the worker."""

    def test_push_shows_notification(self, worker):
        notification = worker.handle_push(b"Review 20 cards")

        assert notification.title == "Anki Dashboard"
        assert notification.options.body == "Review 20 cards"
        assert worker.notifications.shown == [notification]

    def test_explore_click_opens_dashboard(self, worker):
        """Test the explore action opens the application entry document."""
        notification = worker.handle_push()

        client = worker.handle_notification_click(notification, "explore")

        assert notification.closed is True
        assert client is not None
        assert client.url == APP_URL

    def test_close_click_only_closes(self, worker):
        notification = worker.handle_push()

        assert worker.handle_notification_click(notification, "close") is None
        assert notification.closed is True
        assert worker.clients.match_all(include_uncontrolled=True) == []
