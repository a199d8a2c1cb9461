"""Pure helpers: ids, clock, odds math, validation."""
