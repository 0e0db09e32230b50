from django.dispatch import Signal

# sent with pending_count
pending_count_changed = Signal()

# sent with is_syncing
syncing_changed = Signal()

# sent with is_online, source
connectivity_changed = Signal()

# sent with operation, outcome
operation_replayed = Signal()

# sent with operation
operation_enqueued = Signal()
