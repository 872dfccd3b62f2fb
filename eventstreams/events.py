# =============================================================================
# EventStreams Client -- Wikimedia Record Models
# =============================================================================
#
# Ready-made record types for the public Wikimedia streams.  Any pydantic
# model, dataclass or TypedDict works as a handler parameter; these are a
# convenience.  Missing fields fall back to empty values and unknown fields
# are ignored, so schema additions upstream do not break decoding.
#
# Schemas:
#   mediawiki/recentchange/1.0.0
#   mediawiki/revision/create/2.0.0
# =============================================================================

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

RECENT_CHANGE = "recentchange"
REVISION_CREATE = "revision-create"


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Meta(_Record):
    """Envelope metadata present on every event."""

    uri: str = ""
    request_id: str = ""
    id: str = ""
    dt: str = ""
    domain: str = ""
    stream: str = ""
    topic: str = ""
    partition: int = 0
    offset: int = 0


class EventData(_Record):
    schema_uri: str = Field(default="", alias="$schema")


class OldNew(_Record):
    old: int | None = None
    new: int | None = None


class RecentChangeEvent(EventData):
    """One entry of the ``recentchange`` stream."""

    id: int | None = None
    meta: Meta = Field(default_factory=Meta)
    type: str = ""
    namespace: int = 0
    title: str = ""
    comment: str = ""
    timestamp: int = 0
    user: str = ""
    bot: bool = False
    minor: bool = False
    patrolled: bool = False
    length: OldNew = Field(default_factory=OldNew)
    revision: OldNew = Field(default_factory=OldNew)
    server_url: str = ""
    server_name: str = ""
    server_script_path: str = ""
    wiki: str = ""
    parsedcomment: str = ""


class Performer(_Record):
    user_text: str = ""
    user_groups: list[str] = Field(default_factory=list)
    user_is_bot: bool = False
    user_id: int = 0
    user_registration_dt: str | None = None
    user_edit_count: int = 0


class Slot(_Record):
    rev_slot_content_model: str = ""
    rev_slot_sha1: str = ""
    rev_slot_size: int = 0
    rev_slot_origin_rev_id: int = 0


class RevSlots(_Record):
    main: Slot = Field(default_factory=Slot)


class RevisionCreateEvent(EventData):
    """One entry of the ``revision-create`` stream."""

    meta: Meta = Field(default_factory=Meta)
    database: str = ""
    page_id: int = 0
    page_title: str = ""
    page_namespace: int = 0
    rev_id: int = 0
    rev_timestamp: str = ""
    rev_sha1: str = ""
    rev_minor_edit: bool = False
    rev_len: int = 0
    rev_content_model: str = ""
    rev_content_format: str = ""
    performer: Performer = Field(default_factory=Performer)
    page_is_redirect: bool = False
    comment: str = ""
    parsedcomment: str = ""
    rev_parent_id: int = 0
    dt: str = ""
    rev_slots: RevSlots = Field(default_factory=RevSlots)
    rev_content_changed: bool = False
