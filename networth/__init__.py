"""Net-worth projection and history engine."""
