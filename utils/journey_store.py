# utils/journey_store.py
"""
Unified data layer for the Journey feed.

Adapts the upstream highlights, notes and guided sessions held by ``AppState``
into one list of ``UnifiedItem`` rows, alongside the guided insights that this
store owns and persists itself. Filtering, sorting and time grouping are pure
functions over that list.
"""
import logging
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from schemas.journey_schemas import ItemKind, SortOption, UnifiedItem
from utils.journey_mapper import build_unified_items

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


class TimeGroup(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    EARLIER = "earlier"

    @property
    def label(self):
        return {"today": "Today", "this_week": "This Week", "earlier": "Earlier"}[self.value]


@dataclass
class JourneyFilters:
    search_text: str = ""
    selected_kinds: set = field(default_factory=set)
    selected_scripture_ids: set = field(default_factory=set)
    selected_book_ids: set = field(default_factory=set)
    sort: SortOption = SortOption.RECENT
    pinned_only: bool = False

    def active_dimensions(self):
        # Search text is not a filter dimension; a non-default sort is
        return [
            bool(self.selected_kinds),
            bool(self.selected_scripture_ids),
            bool(self.selected_book_ids),
            self.pinned_only,
            self.sort != SortOption.RECENT,
        ]

    def to_json(self):
        return {
            "search_text": self.search_text,
            "kinds": sorted(k.value for k in self.selected_kinds),
            "scripture_ids": sorted(self.selected_scripture_ids),
            "book_ids": sorted(self.selected_book_ids),
            "sort": self.sort.value,
            "pinned_only": self.pinned_only
        }


def _matches_search(item, needle):
    fields = (item.ref.display, item.title, item.body, item.quote, item.text_name)
    return any(value is not None and needle in value.lower() for value in fields)


def filter_items(items, filters):
    """Apply the search, kind, scripture, book and pinned-only filters in order."""
    result = list(items)

    if filters.search_text:
        needle = filters.search_text.lower()
        result = [i for i in result if _matches_search(i, needle)]

    if filters.selected_kinds:
        result = [i for i in result if i.kind in filters.selected_kinds]

    if filters.selected_scripture_ids:
        result = [i for i in result if i.ref.scripture_id in filters.selected_scripture_ids]

    if filters.selected_book_ids:
        result = [i for i in result if i.ref.book_id in filters.selected_book_ids]

    if filters.pinned_only:
        result = [i for i in result if i.is_pinned]

    return result


def sort_items(items, sort):
    if sort == SortOption.RECENT:
        return sorted(items, key=lambda i: i.updated_at, reverse=True)
    if sort == SortOption.OLDEST:
        return sorted(items, key=lambda i: i.updated_at)
    # Pinned first, then oldest first within each group
    return sorted(items, key=lambda i: (0 if i.is_pinned else 1, i.updated_at))


def time_group_for(date, now):
    if date.astimezone(now.tzinfo).date() == now.date():
        return TimeGroup.TODAY
    if date >= now - timedelta(days=7):
        return TimeGroup.THIS_WEEK
    return TimeGroup.EARLIER


def group_by_time(items, now=None):
    """Bucket items into today / this week / earlier, dropping empty buckets.

    Item order within a bucket is preserved.
    """
    now = now or _utcnow()
    grouped = {group: [] for group in TimeGroup}
    for item in items:
        grouped[time_group_for(item.updated_at, now)].append(item)
    return [(group, grouped[group]) for group in TimeGroup if grouped[group]]


class JourneyStore:
    def __init__(self, app_state, storage, clock=_utcnow):
        self._app_state = weakref.ref(app_state) if app_state is not None else lambda: None
        self._storage = storage
        self._clock = clock

        self.items = []
        self.filters = JourneyFilters()
        self.guided_insights = storage.load()
        self._rebuild()

        if app_state is not None:
            app_state.subscribe(self._on_source_changed)

    # --- Rebuild ---

    def _on_source_changed(self, source):
        logger.debug(f"Upstream {source} changed, rebuilding journey items")
        self._rebuild()

    def _rebuild(self):
        app_state = self._app_state()
        if app_state is None:
            return
        self.items = build_unified_items(
            app_state.journey_records,
            app_state.guided_sessions,
            self.guided_insights
        )

    def _persist_and_rebuild(self):
        self._storage.save(self.guided_insights)
        self._rebuild()

    def _find_insight(self, item_id):
        return next((i for i in self.guided_insights if i.id == item_id), None)

    # --- Views ---

    @property
    def filtered_items(self):
        return sort_items(filter_items(self.items, self.filters), self.filters.sort)

    def grouped_by_time(self, now=None):
        return group_by_time(self.filtered_items, now or self._clock())

    @property
    def available_scripture_ids(self):
        return {i.ref.scripture_id for i in self.items}

    def available_book_ids(self, scripture_id=None):
        return {
            i.ref.book_id for i in self.items
            if scripture_id is None or i.ref.scripture_id == scripture_id
        }

    @property
    def has_active_filters(self):
        return any(self.filters.active_dimensions())

    @property
    def active_filter_count(self):
        return sum(1 for active in self.filters.active_dimensions() if active)

    def counts_by_kind(self):
        counts = {kind: 0 for kind in ItemKind}
        for item in self.items:
            counts[item.kind] += 1
        return counts

    @property
    def highlight_count(self):
        return self.counts_by_kind()[ItemKind.HIGHLIGHT]

    @property
    def note_count(self):
        return self.counts_by_kind()[ItemKind.NOTE]

    @property
    def session_count(self):
        return self.counts_by_kind()[ItemKind.GUIDED_SESSION]

    @property
    def insight_count(self):
        return self.counts_by_kind()[ItemKind.GUIDED_INSIGHT]

    @property
    def total_count(self):
        return len(self.items)

    def item(self, item_id):
        return next((i for i in self.items if i.id == item_id), None)

    def guided_session(self, item):
        if item.kind != ItemKind.GUIDED_SESSION:
            return None
        app_state = self._app_state()
        if app_state is None:
            return None
        return app_state.get_guided_session(item.id)

    # --- Insight mutations ---

    def save_insight(self, body, session_id, ref, title=None, quote=None):
        now = self._clock()
        insight = UnifiedItem(
            id=str(uuid.uuid4()),
            kind=ItemKind.GUIDED_INSIGHT,
            ref=ref,
            title=title if title is not None else f"Insight from {ref.display}",
            body=body,
            quote=quote,
            created_at=now,
            updated_at=now,
            is_pinned=False,
            source_session_id=session_id
        )
        self.guided_insights.append(insight)
        self._persist_and_rebuild()
        logger.info(f"Saved insight {insight.id} for {ref.display}")
        return insight

    def toggle_pin(self, item_id):
        """Flip the pinned flag of an insight.

        Only insights can be pinned; any other id is ignored and None is returned.
        """
        insight = self._find_insight(item_id)
        if insight is None:
            return None
        insight.is_pinned = not insight.is_pinned
        insight.updated_at = self._clock()
        self._persist_and_rebuild()
        return insight

    def delete_insight(self, item_id):
        insight = self._find_insight(item_id)
        if insight is None:
            return None
        self.guided_insights = [i for i in self.guided_insights if i.id != item_id]
        self._persist_and_rebuild()
        logger.info(f"Deleted insight {item_id}")
        return insight

    def update_insight_body(self, item_id, new_body):
        insight = self._find_insight(item_id)
        if insight is None:
            return None
        insight.body = new_body
        insight.updated_at = self._clock()
        self._persist_and_rebuild()
        return insight

    def clear_filters(self):
        self.filters = JourneyFilters()
