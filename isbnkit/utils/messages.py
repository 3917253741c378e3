"""
Standardized error messages for ISBN parsing.
Messages are plain English; only the error kind is meant to be stable.
"""

# Structural errors (recorded on the parse result)
ERROR_EMPTY = "No code provided"
ERROR_INVALID_CHARACTERS = "Invalid characters in the code"
ERROR_INVALID_LENGTH = "Code is too short or too long"
ERROR_INVALID_PRODUCT_CODE = "Product code should be 978 or 979"
ERROR_INVALID_COUNTRY_CODE = "Country code is unknown"

# Boundary errors
ERROR_CANNOT_FORMAT_INVALID = "Cannot format invalid ISBN: %(errors)s"
ERROR_INVALID_GTIN14_PREFIX = "GTIN-14 prefix must be a single digit, got %(prefix)r"
ERROR_UNKNOWN_FORMAT = "Unknown format %(format)r, expected one of %(formats)s"
