"""Background tasks run by the TaskIQ worker."""
