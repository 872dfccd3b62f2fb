"""Tests for the Wikimedia record models."""

from eventstreams.dispatch import Dispatcher
from eventstreams.events import RecentChangeEvent, RevisionCreateEvent

RECENT_CHANGE_PAYLOAD = b"""{
  "$schema": "/mediawiki/recentchange/1.0.0",
  "meta": {
    "uri": "https://en.wikipedia.org/wiki/Main_Page",
    "request_id": "abc",
    "id": "0f1e2d3c",
    "dt": "2024-01-01T00:00:01Z",
    "domain": "en.wikipedia.org",
    "stream": "mediawiki.recentchange",
    "topic": "eqiad.mediawiki.recentchange",
    "partition": 0,
    "offset": 4821
  },
  "id": 1700000001,
  "type": "edit",
  "namespace": 0,
  "title": "Main Page",
  "comment": "typo",
  "timestamp": 1704067201,
  "user": "Example",
  "bot": false,
  "minor": true,
  "patrolled": true,
  "length": {"old": 100, "new": 104},
  "revision": {"old": 41, "new": 42},
  "server_url": "https://en.wikipedia.org",
  "server_name": "en.wikipedia.org",
  "server_script_path": "/w",
  "wiki": "enwiki",
  "parsedcomment": "typo",
  "notify_url": "https://en.wikipedia.org/w/index.php?diff=42"
}"""

REVISION_CREATE_PAYLOAD = b"""{
  "$schema": "/mediawiki/revision/create/2.0.0",
  "meta": {"domain": "de.wikipedia.org", "stream": "mediawiki.revision-create"},
  "database": "dewiki",
  "page_id": 9,
  "page_title": "Berlin",
  "page_namespace": 0,
  "rev_id": 77,
  "rev_timestamp": "2024-01-01T00:00:02Z",
  "rev_sha1": "deadbeef",
  "rev_minor_edit": false,
  "rev_len": 2048,
  "rev_content_model": "wikitext",
  "rev_content_format": "text/x-wiki",
  "performer": {
    "user_text": "Beispiel",
    "user_groups": ["*", "user", "autoconfirmed"],
    "user_is_bot": false,
    "user_id": 5,
    "user_edit_count": 12
  },
  "page_is_redirect": false,
  "rev_parent_id": 76,
  "dt": "2024-01-01T00:00:02Z",
  "rev_slots": {
    "main": {
      "rev_slot_content_model": "wikitext",
      "rev_slot_sha1": "cafe",
      "rev_slot_size": 2048,
      "rev_slot_origin_rev_id": 77
    }
  },
  "rev_content_changed": true
}"""


class TestRecentChangeEvent:
    def test_decodes_sample(self):
        event = RecentChangeEvent.model_validate_json(RECENT_CHANGE_PAYLOAD)
        assert event.schema_uri == "/mediawiki/recentchange/1.0.0"
        assert event.meta.domain == "en.wikipedia.org"
        assert event.meta.offset == 4821
        assert event.title == "Main Page"
        assert event.minor is True
        assert event.length.old == 100
        assert event.length.new == 104
        assert event.revision.new == 42
        assert event.wiki == "enwiki"

    def test_missing_fields_default(self):
        event = RecentChangeEvent.model_validate_json(b'{"type": "log"}')
        assert event.type == "log"
        assert event.id is None
        assert event.meta.stream == ""
        assert event.revision.old is None

    def test_through_dispatcher(self):
        received = []

        def handler(event: RecentChangeEvent) -> None:
            received.append(event)

        Dispatcher(handler).dispatch(RECENT_CHANGE_PAYLOAD)
        assert received[0].user == "Example"


class TestRevisionCreateEvent:
    def test_decodes_sample(self):
        event = RevisionCreateEvent.model_validate_json(REVISION_CREATE_PAYLOAD)
        assert event.database == "dewiki"
        assert event.page_title == "Berlin"
        assert event.performer.user_groups == ["*", "user", "autoconfirmed"]
        assert event.performer.user_registration_dt is None
        assert event.rev_slots.main.rev_slot_size == 2048
        assert event.rev_content_changed is True
        assert event.comment == ""
