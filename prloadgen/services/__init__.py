"""Services: git commands, artifact generation, preflight checks, and the PR loop."""
