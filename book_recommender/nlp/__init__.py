"""Text processing for Indonesian book titles and synopses."""
