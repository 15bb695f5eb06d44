# ledgerdesk

Reporting helpers for outstanding bills kept in MongoDB by an accounting
sync. ledgerdesk turns bill and ledger records into the reports a
collections team works from:

- bill-wise and party-wise outstanding reports, each bill split into
  not-yet-due, due and overdue amounts;
- party-wise and bill-wise overviews with received and pending percentages;
- aging reports with 30/60/90/120-day columns, cumulative or ranged;
- upcoming-due summaries grouped by day, week, month or year;
- per-party outstanding summaries: delay percentage and average delay;
- follow-up status calibration and team-wise and party-wise follow-up reports;
- collection prompts with suggested actions and amounts formatted in rupees.

## Installation

```
pip install ledgerdesk
```

For the test suite:

```
pip install "ledgerdesk[test]"
pytest
```

## Modules

| Module | Purpose |
| --- | --- |
| `ledgerdesk.models` | Shared models: `Pagination`, `RequestFilter`, `EmailSettings`, `File`; `clean_string`, `parse_float_from_string` |
| `ledgerdesk.outstanding_models` | Bills, ledgers, settings, locations and overview records |
| `ledgerdesk.followup_models` | Follow-ups, contact persons, actionables, prompts and summaries |
| `ledgerdesk.group_cache` | `GroupCacheManager`: a tree of ledger groups per company |
| `ledgerdesk.store` | `DocumentStore` and `DocumentFilter` over a MongoDB collection; `connect`, `get_all_settings` |
| `ledgerdesk.queries` | Sort/search field mappings, filter and projection builders |
| `ledgerdesk.outstanding_report` | `make_bill`, `build_bills`, `summarize_parties`, `page_party_bills` |
| `ledgerdesk.overview` | `party_wise_overview`, `bill_wise_overview`, `delay_days`, `paginate` |
| `ledgerdesk.aging` | `aging_buckets`, `aging_overview`, `duration_key`, `upcoming_overview` |
| `ledgerdesk.summary` | `populate_outstanding_summary`, `calculate_outstanding_summary` |
| `ledgerdesk.followups` | `calibrate_status`, `team_report`, `party_report`, `history_entry` |
| `ledgerdesk.prompts` | `collection_prompts`, `format_money` |

## Examples

Ledger group tree:

```python
from ledgerdesk.group_cache import GroupCacheManager, Group

cache = GroupCacheManager()
cache.build("company-1", [
    Group(guid="g1", name="Current Assets", parent="Primary"),
    Group(guid="g2", name="Sundry Debtors", parent="Current Assets"),
])
print(cache.get_children_names("company-1", "Current Assets"))
# ['Current Assets', 'Sundry Debtors']
```

A bill row from a projected bill document:

```python
from datetime import datetime, timezone
from ledgerdesk.outstanding_report import make_bill

item = {
    "LedgerName": "Acme Traders",
    "LedgerGroupName": "Sundry Debtors",
    "Name": "INV-1",
    "BillDate": datetime(2024, 1, 1, tzinfo=timezone.utc),
    "Amount": "1500.50",
}
bill = make_bill(item, over_due_days=30, now=datetime(2024, 3, 1, tzinfo=timezone.utc))
print(bill.delay_days, bill.over_due_amount)
# 59 1500.5
```

Aging columns and money formatting:

```python
from ledgerdesk.aging import aging_buckets
from ledgerdesk.prompts import format_money

print(aging_buckets(75, 100.0, use_range=True))   # (0.0, 100.0, 0.0, 0.0)
print(aging_buckets(75, 100.0, use_range=False))  # (100.0, 100.0, 0.0, 0.0)
print(format_money(1234.5))                       # ₹1,234.50
```

Queries against MongoDB:

```python
from ledgerdesk.store import connect, DocumentFilter, DocumentStore

client = connect("mongodb://localhost:27017")
store = DocumentStore(client["NewTallyDesktopSync"]["Bills"])
page = DocumentFilter(filter={"CompanyId": "company-1"}, use_pagination=True, limit=25, offset=2)
print(page.find_kwargs())
# {'filter': {'CompanyId': 'company-1'}, 'skip': 50, 'limit': 25}
docs = store.find_documents(page)
```

Most report functions take plain records plus an explicit `now`, so the
same inputs always give the same report.

Notes on behaviour:

- `paginate` and `page_party_bills` count `offset` in pages, not items.
- `party_wise_overview` splits ledgers into about four batches whose last
  batch stops one short of the list, so the final ledger gets no bills
  gathered; `aging_overview` batches cover every ledger.

## What it does not do

ledgerdesk is a library of report builders. It does not run an HTTP
server or expose any command, it does not send e-mail reminders or render
e-mail templates, and it does not itself fetch bills, ledgers or
follow-ups for a report: `DocumentStore` runs the queries you give it, and
the report functions work on the records you pass in.