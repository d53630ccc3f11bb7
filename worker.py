#!/usr/bin/env python
"""TaskIQ worker and scheduler entry point."""

# Import broker and tasks to ensure they are registered
from parkbook.tasks.broker import broker, scheduler
from parkbook.tasks.booking_tasks import promote_bookings_task

# TaskIQ CLI uses these module-level objects:
#   taskiq worker worker:broker
#   taskiq scheduler worker:scheduler
