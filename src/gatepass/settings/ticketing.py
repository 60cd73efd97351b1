"""Settings for registration, check-in and ticket transfer."""

from decouple import config

# Uppercase alphanumerics without the look-alikes 0/O and 1/I.
CODE_ALPHABET = config("CODE_ALPHABET", default="ABCDEFGHJKLMNPQRSTUVWXYZ23456789")
CHECKIN_CODE_LENGTH = config("CHECKIN_CODE_LENGTH", default=8, cast=int)
CHANNEL_CODE_LENGTH = config("CHANNEL_CODE_LENGTH", default=6, cast=int)
OFFER_CODE_LENGTH = config("OFFER_CODE_LENGTH", default=10, cast=int)
CODE_MAX_ATTEMPTS = config("CODE_MAX_ATTEMPTS", default=10, cast=int)

TRANSFER_OFFER_WINDOW_MINUTES = config("TRANSFER_OFFER_WINDOW_MINUTES", default=30, cast=int)

# How many times an atomic unit is re-run after an optimistic-concurrency conflict.
STORE_CONFLICT_MAX_RETRIES = config("STORE_CONFLICT_MAX_RETRIES", default=3, cast=int)
