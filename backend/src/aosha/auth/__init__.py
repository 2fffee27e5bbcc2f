"""Local account authentication: user model, passwords, bearer tokens."""
