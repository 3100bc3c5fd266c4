# Secure-link status constants

# Issued, waiting for the customer to confirm their email.
# The only status from which verification is allowed.
PENDING = "pending"

# Terminal: confirmed once, never re-verifiable.
VERIFIED = "verified"
