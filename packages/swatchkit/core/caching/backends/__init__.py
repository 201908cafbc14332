"""Cache storage backends."""
