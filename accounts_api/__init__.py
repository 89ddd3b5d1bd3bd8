"""Account Management API: customer-owned deposit accounts over REST."""
