"""Protocol executors, one per request descriptor type."""
