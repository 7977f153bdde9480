"""Schedule file import: orchestration, invocation handler and CLI."""
