"""Gallery content core: records, sanitizer, media and link helpers."""
