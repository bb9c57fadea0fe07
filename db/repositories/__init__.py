"""Repository layer for the lead console.

Provides query and write helpers for the console's entities:
- audience: stored-procedure calls (search, preview, build, results, summary)
- audience_runs: get, list_runs, update_metadata, delete_run
- allocations: create_campaign_file, add_file_contacts, record_allocation
- contacts: get_by_email, get_many, upsert_by_email, count
- companies: get_many, insert, count
- campaigns: list, create, update, delete, count_active
- master_data: list_entries, add_entry, delete_entry
"""
