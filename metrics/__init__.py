"""CloudWatch metric definitions."""
