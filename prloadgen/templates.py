"""Fixed PR titles, bodies, and generated file contents."""

PR_TITLES = (
    "Docs: Improve README section",
    "Chore: Update contributor guide",
    "Feat: Add tiny utility script",
    "Refactor: Tidy scripts layout",
    "Docs: Add blog note",
    "Build: Update config snippet",
    "Docs: Add troubleshooting tips",
    "Chore: Add example code file",
)

PR_BODIES = (
    "This PR updates documentation and adds small examples for clarity.",
    "Introduce a minor utility and accompanying docs to aid maintainers.",
    "Refreshing docs and adding a lightweight script for demonstration.",
)

DOCS_NOTE_TEMPLATE = """# PR Note

Created at: {created_at}

This file is generated to support testing of PR workflows.
"""

# $(date -u) is left for the shell to expand when the stub runs
CODE_STUB = """#!/bin/bash
# Auto-generated example utility
echo "Utility generated at $(date -u)"
"""

CONFIG_ENTRY_TEMPLATE = "entry_{stamp}_{suffix}=true"

# Same layout as `date -u`, e.g. "Mon Jan 15 10:00:00 UTC 2024"
UTC_DATE_FORMAT = "%a %b %d %H:%M:%S UTC %Y"
