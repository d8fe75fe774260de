"""Walk the paginated patient listing until the server says there is no more."""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterator

from .errors import PaginationLimitExceeded, SchemaFault

logger = logging.getLogger(__name__)

# Accepted names for the record list, in order of preference.
RECORD_LIST_FIELDS = ("data", "patients")


@dataclass
class Page:
    number: int
    records: list = field(default_factory=list)
    has_next: bool = False


def extract_records(body, fields=RECORD_LIST_FIELDS) -> list:
    if not isinstance(body, dict):
        raise SchemaFault(f"Expected a JSON object, got {type(body).__name__}")
    for name in fields:
        records = body.get(name)
        if isinstance(records, list):
            return records
    raise SchemaFault(
        f"Response has none of the record fields {list(fields)}; keys: {sorted(body)}"
    )


def has_next_page(body) -> bool:
    """Only an explicit ``pagination.hasNext: true`` continues paging."""
    pagination = body.get("pagination") if isinstance(body, dict) else None
    if not isinstance(pagination, dict):
        return False
    return pagination.get("hasNext") is True


class PatientRetriever:
    """Sequential, throttled pager over the patient listing endpoint."""

    def __init__(
        self,
        client,
        path: str = "/patients",
        page_size: int = 5,
        page_delay: float = 1.0,
        max_pages: int = 100,
        record_fields=RECORD_LIST_FIELDS,
        sleep=time.sleep,
    ):
        self.client = client
        self.path = path
        self.page_size = page_size
        self.page_delay = page_delay
        self.max_pages = max_pages
        self.record_fields = tuple(record_fields)
        self.sleep = sleep

    def fetch_page(self, number: int) -> Page:
        body = self.client.get_json(self.path, params={"page": number, "limit": self.page_size})
        return Page(
            number=number,
            records=extract_records(body, self.record_fields),
            has_next=has_next_page(body),
        )

    def iter_pages(self) -> Iterator[Page]:
        number = 1
        while True:
            if number > self.max_pages:
                raise PaginationLimitExceeded(
                    f"Server still reports more pages after {self.max_pages} pages"
                )
            page = self.fetch_page(number)
            logger.info(
                f"Fetched page {page.number}: {len(page.records)} record(s), "
                f"hasNext={page.has_next}"
            )
            yield page
            # Rate limit: the delay follows every page, the last one included.
            if self.page_delay > 0:
                self.sleep(self.page_delay)
            if not page.has_next:
                return
            number += 1

    def fetch_all(self) -> list[dict]:
        patients = []
        for page in self.iter_pages():
            patients.extend(page.records)
        logger.info(f"Retrieved {len(patients)} patient record(s)")
        return patients


def fetch_all_patients(client, **kwargs) -> list[dict]:
    return PatientRetriever(client, **kwargs).fetch_all()
