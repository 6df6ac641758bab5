"""Point-of-sale domain models and storage mappings."""
