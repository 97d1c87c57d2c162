"""Click commands for the ftxindex CLI."""
