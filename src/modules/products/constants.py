"""Product storage limits shared by the model and the input DTOs."""

PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 2

# Upper bound of a 32-bit signed INTEGER column.
MAX_STOCK = 2_147_483_647
