"""Core building blocks shared by every workspace-authz feature."""
