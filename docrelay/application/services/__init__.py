"""Application services – shared, single-responsibility modules.

These modules contain ALL request logic so that API handlers remain thin
orchestrators.

Modules:
    prompt_builder    – Renders the query and documents into the enrichment prompt.
    response_parser   – Section-by-section parsing of the LLM reply.
    suggestion_rules  – Named policy table filtering ENRICHMENT lines.
    search_service    – Prompt → LLM → parse pipeline for one request.
"""
