"""Command-line interface for mailbridge."""
