"""Account service: embedded key-value storage for account records."""
