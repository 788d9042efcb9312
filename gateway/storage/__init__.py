"""Local byte storage for staged files."""
