from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Union
import logging
import random
import threading
import weakref

from .dates import Date, iso_week_start, iso_weeks_in_year
from .objects import DrawObject, object_from_value


logger = logging.getLogger(__name__)

PageId = int


class PageKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


TITLE_FORMATS = {
    PageKind.MONTHLY: "%B %Y",
    PageKind.WEEKLY: "Week %V %G",
    PageKind.DAILY: "%Y-%m-%d (%A)",
}


class PageKey(NamedTuple):
    kind: PageKind
    year: int
    ordinal: int

    @classmethod
    def for_date(cls, kind: PageKind, date: Date) -> "PageKey":
        kind = PageKind(kind)
        if kind == PageKind.MONTHLY:
            return cls(kind, date.year, date.month - 1)
        if kind == PageKind.WEEKLY:
            return cls(kind, date.iso_year, date.week - 1)
        return cls(kind, date.year, date.ordinal - 1)


class ObjectQueue:
    """Depth-keyed multimap of draw objects shared between page handles."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_depth: Dict[int, List[DrawObject]] = defaultdict(list)

    def push(self, obj: DrawObject) -> None:
        with self._lock:
            self._by_depth[obj.depth].append(obj)

    def objects(self) -> List[DrawObject]:
        """Snapshot ordered by depth, then by push order within a depth."""
        with self._lock:
            return [obj for depth in sorted(self._by_depth) for obj in self._by_depth[depth]]

    def __len__(self) -> int:
        with self._lock:
            return sum(len(items) for items in self._by_depth.values())


@dataclass
class Page:
    id: PageId
    title: str
    kind: Optional[PageKind] = None
    date: Optional[Date] = None
    width: Optional[float] = None
    height: Optional[float] = None
    queue: ObjectQueue = field(default_factory=ObjectQueue, repr=False)

    @property
    def key(self) -> Optional[PageKey]:
        if self.kind is None or self.date is None:
            return None
        return PageKey.for_date(self.kind, self.date)

    def push(self, obj: Any) -> bool:
        self.queue.push(object_from_value(obj))
        return True

    def objects(self) -> List[DrawObject]:
        return self.queue.objects()

    def downgrade(self) -> "WeakPage":
        return WeakPage(self)


class WeakPage:
    """Page handle that does not keep the queue alive."""

    def __init__(self, page: Page) -> None:
        self.id = page.id
        self.title = page.title
        self.kind = page.kind
        self.date = page.date
        self.width = page.width
        self.height = page.height
        self._queue = weakref.ref(page.queue)

    @property
    def key(self) -> Optional[PageKey]:
        if self.kind is None or self.date is None:
            return None
        return PageKey.for_date(self.kind, self.date)

    def is_alive(self) -> bool:
        return self._queue() is not None

    def push(self, obj: Any) -> bool:
        obj = object_from_value(obj)
        queue = self._queue()
        if queue is None:
            return False
        queue.push(obj)
        return True

    def upgrade(self) -> Optional[Page]:
        queue = self._queue()
        if queue is None:
            return None
        return Page(self.id, self.title, self.kind, self.date, self.width, self.height, queue)


AnyPage = Union[Page, WeakPage]


class PageRegistry:
    def __init__(self) -> None:
        self._pages: Dict[PageId, Page] = {}
        self._order: List[PageId] = []
        self._keys: Dict[PageKey, PageId] = {}

    def _next_id(self) -> PageId:
        while True:
            candidate = random.getrandbits(32)
            if candidate not in self._pages:
                return candidate

    def insert_page(self, page: Page) -> PageId:
        if page.id is None or page.id in self._pages:
            page.id = self._next_id()
        key = page.key
        if key is not None and key in self._keys:
            old_id = self._keys[key]
            self._order.remove(old_id)
            del self._pages[old_id]
            logger.debug("Replaced page %08X for %s", old_id, key)
        self._pages[page.id] = page
        self._order.append(page.id)
        if key is not None:
            self._keys[key] = page.id
        return page.id

    def create(self, title: str, width: Optional[float] = None, height: Optional[float] = None) -> Page:
        page = Page(self._next_id(), str(title), width=width, height=height)
        self.insert_page(page)
        return page

    def create_calendar_page(self, kind: PageKind, date: Date) -> Page:
        kind = PageKind(kind)
        page = Page(self._next_id(), date.format(TITLE_FORMATS[kind]), kind=kind, date=date)
        self.insert_page(page)
        return page

    def get_page(self, page_id: PageId) -> Optional[Page]:
        return self._pages.get(page_id)

    def get_page_by_date(self, kind: PageKind, date: Date) -> Optional[Page]:
        page_id = self._keys.get(PageKey.for_date(kind, Date.from_value(date)))
        return self._pages.get(page_id) if page_id is not None else None

    def ids(self) -> List[PageId]:
        return list(self._order)

    def pages(self) -> List[Page]:
        return [self._pages[page_id] for page_id in self._order]

    def __iter__(self) -> Iterator[Page]:
        return iter(self.pages())

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def setup_planner(self, planner) -> int:
        """
        Registers monthly, weekly and daily pages for the planner year, in that
        order, skipping disabled kinds and keys that already exist. Returns the
        number of pages added.
        """
        year = int(planner.year)
        added = 0

        def ensure(kind: PageKind, date: Date) -> None:
            nonlocal added
            if PageKey.for_date(kind, date) in self._keys:
                return
            self.create_calendar_page(kind, date)
            added += 1

        if planner.monthly.enabled:
            for month in range(1, 13):
                ensure(PageKind.MONTHLY, Date.beginning_of_month_for(year, month))
        if planner.weekly.enabled:
            for week in range(1, iso_weeks_in_year(year) + 1):
                ensure(PageKind.WEEKLY, iso_week_start(year, week))
        if planner.daily.enabled:
            start = Date.beginning_of_year_for(year)
            for date in start.iter_days():
                if date.year != year:
                    break
                ensure(PageKind.DAILY, date)

        logger.debug("Planner setup for %s added %d pages", year, added)
        return added

    def _adjacent(self, page: AnyPage, step: int) -> Optional[Page]:
        key = page.key
        if key is None:
            return None
        if key.kind == PageKind.DAILY:
            date = page.date.add_days(step)
        elif key.kind == PageKind.WEEKLY:
            date = page.date.add_weeks(step)
        else:
            date = page.date.add_months(step)
        if date is None:
            return None
        year = date.iso_year if key.kind == PageKind.WEEKLY else date.year
        if year != key.year:
            return None
        return self.get_page_by_date(key.kind, date)

    def next_page(self, page: AnyPage) -> Optional[Page]:
        return self._adjacent(page, 1)

    def prev_page(self, page: AnyPage) -> Optional[Page]:
        return self._adjacent(page, -1)
