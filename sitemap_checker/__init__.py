"""
Sitemap Status Checker - Source Package

Modules:
- config: Run configuration, validators and config.json defaults
- prompts: Interactive collection of the run configuration
- sitemap_fetcher: HTTP fetching of sitemap XML
- sitemap_parser: XML parsing for sitemap indexes and urlsets
- status_store: Shared status records, histogram and processed counter
- url_queue: Shared work queue of pending URLs
- url_validator: One GET per URL, mapped to a status record
- pause: Pause/resume token shared by all workers
- progress: Progress reporters (console tables, log lines)
- worker_pool: Workers and the pool that drains the queue
- results: JSON persistence and run summary
- main: Command-line entry point
"""

__version__ = "1.0.0"
