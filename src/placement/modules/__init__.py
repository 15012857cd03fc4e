"""Feature modules: accounts, postings, applications, admin and their shared core."""
