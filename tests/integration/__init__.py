"""
Integration tests for metadb.

These tests drive the engine end-to-end against real temporary library trees:
- Registry document written and reloaded by a second engine
- Entry metadata flushed to and reloaded from the metadata mirror
- External file moves reconciled through the content index
"""
