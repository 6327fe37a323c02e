"""Mail transport adapters.

The contact service only sees ``AbstractMailTransport``; the SMTP client is
one implementation and tests substitute their own.
"""
