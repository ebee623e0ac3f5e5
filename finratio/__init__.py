"""FinRatio: financial health ratio evaluation service."""
