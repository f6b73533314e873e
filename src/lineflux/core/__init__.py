"""Core encoding logic: models, formatters, schemas and the encoder."""
